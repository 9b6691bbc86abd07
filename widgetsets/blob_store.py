"""
Blob stores: flat key-value storage for the persisted widget-set tree.

Values are addressed by a fixed path plus a key name. TinyDBBlobStore keeps one
TinyDB table per path; MemoryBlobStore is a process-local stand-in.
"""

import base64
import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple

from tinydb import Query, TinyDB

logger = logging.getLogger(__name__)

_DATA_DIR = Path(os.getenv("WIDGETSETS_ROOT", ".")) / "data"
_BYTES_TAG = "__bytes__"


class BlobStore(Protocol):
    def get(self, key: str, path: str) -> Any: ...

    def set(self, key: str, path: str, tree: Any) -> None: ...

    def remove(self, key: str, path: str) -> None: ...


class MemoryBlobStore:
    """In-memory store. Values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[Tuple[str, str], Any]] = None):
        self._values: Dict[Tuple[str, str], Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, path: str) -> Any:
        return copy.deepcopy(self._values.get((path, key)))

    def set(self, key: str, path: str, tree: Any) -> None:
        self._values[(path, key)] = copy.deepcopy(tree)

    def remove(self, key: str, path: str) -> None:
        self._values.pop((path, key), None)

    def __contains__(self, item: Tuple[str, str]) -> bool:
        return item in self._values


def _pack(value: Any) -> Any:
    """Make a tree JSON-safe by wrapping bytes."""
    if isinstance(value, (bytes, bytearray)):
        return {_BYTES_TAG: base64.b64encode(bytes(value)).decode("ascii")}
    if isinstance(value, dict):
        return {k: _pack(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_pack(v) for v in value]
    return value


def _unpack(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {_BYTES_TAG} and isinstance(value[_BYTES_TAG], str):
            try:
                return base64.b64decode(value[_BYTES_TAG], validate=True)
            except ValueError:
                logger.warning("Invalid base64 payload in store, keeping raw value")
                return value
        return {k: _unpack(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_unpack(v) for v in value]
    return value


class TinyDBBlobStore:
    """TinyDB-backed store; one table per path, one document per key."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            db_path = _DATA_DIR / "widgetsets.json"
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db = TinyDB(str(db_path), indent=2, ensure_ascii=False)
        logger.info(f"TinyDB store opened: {db_path}")

    def get(self, key: str, path: str) -> Any:
        Entry = Query()
        results = self.db.table(path).search(Entry.key == key)
        if not results:
            return None
        return _unpack(results[0].get("value"))

    def set(self, key: str, path: str, tree: Any) -> None:
        Entry = Query()
        self.db.table(path).upsert({"key": key, "value": _pack(tree)}, Entry.key == key)
        logger.debug(f"[{path}] '{key}' written")

    def remove(self, key: str, path: str) -> None:
        Entry = Query()
        self.db.table(path).remove(Entry.key == key)
        logger.debug(f"[{path}] '{key}' removed")

    def close(self):
        self.db.close()
