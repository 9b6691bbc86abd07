"""
Widget Manager: owns the live widget sets and keeps the blob store in sync.

Sets are matched structurally (every field but the runtime id) because ids are
never persisted. Positional widget removal raises IndexError; every other
"not found" case is a silent no-op.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel

from widgetsets.blob_store import BlobStore
from widgetsets.codec import decode_widget_sets, encode_widget_sets
from widgetsets.color_codec import ColorCodec
from widgetsets.config_loader import StoreSettings
from widgetsets.models import PlacedWidget, WidgetKind, WidgetSet

logger = logging.getLogger(__name__)

Listener = Callable[[List[WidgetSet]], None]


class WidgetManager:
    """Manages the widget sets held under one key of a blob store."""

    def __init__(
        self,
        store: BlobStore,
        settings: Optional[StoreSettings] = None,
        color_codec: Optional[ColorCodec] = None,
    ):
        self.store = store
        self.settings = settings or StoreSettings()
        self.color_codec = color_codec

        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._widget_sets: List[WidgetSet] = self.load()
        logger.info(f"Loaded {len(self._widget_sets)} widget set(s) from '{self.settings.key}'")

    @property
    def widget_sets(self) -> List[WidgetSet]:
        """Snapshots of the held sets; editing them does not touch the manager."""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> List[WidgetSet]:
        return [s.model_copy(deep=True) for s in self._widget_sets]

    # ── Listeners ────────────────────────────────────

    def add_listener(self, callback: Listener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self._snapshot())
            except Exception as exc:
                logger.error(f"Listener error: {exc}")

    # ── Persistence ──────────────────────────────────

    def load(self) -> List[WidgetSet]:
        """Decode the current store contents without touching in-memory state."""
        tree = self.store.get(self.settings.key, self.settings.path)
        return decode_widget_sets(tree, self.color_codec)

    def reload(self) -> None:
        """Replace the in-memory sets with the store contents."""
        with self._lock:
            self._widget_sets = self.load()
            self._notify_listeners()

    def save(self) -> None:
        """Write the in-memory sets; an empty collection removes the key."""
        with self._lock:
            if self._widget_sets:
                tree = encode_widget_sets(self._widget_sets, self.color_codec)
                self.store.set(self.settings.key, self.settings.path, tree)
                logger.debug(f"Saved {len(tree)} widget set(s)")
            else:
                self.store.remove(self.settings.key, self.settings.path)
                logger.debug("No widget sets left, removed persisted key")

    def _commit(self, save: bool) -> None:
        if save:
            self.save()
        self._notify_listeners()

    def _matches(self, widget_set: WidgetSet) -> List[WidgetSet]:
        return [s for s in self._widget_sets if s == widget_set]

    def _first_match(self, widget_set: WidgetSet) -> Optional[WidgetSet]:
        for s in self._widget_sets:
            if s == widget_set:
                return s
        return None

    # ── Widgets ──────────────────────────────────────

    def add_widget(
        self,
        widget_set: WidgetSet,
        kind: WidgetKind,
        config: Optional[Dict[str, Any]] = None,
        save: bool = True,
    ) -> PlacedWidget:
        """Append a new widget to every matching set and return it."""
        new_widget = PlacedWidget(kind=kind, config=dict(config or {}))
        with self._lock:
            for s in self._matches(widget_set):
                # each set owns its own copy; ids stay equal so the sets stay equal
                s.widgets.append(new_widget.model_copy(deep=True))
            logger.debug(f"Added {kind.name} widget to '{widget_set.title}'")
            self._commit(save)
        return new_widget

    def remove_widget(self, widget_set: WidgetSet, target: int | PlacedWidget, save: bool = True) -> None:
        """
        Remove a widget from every matching set, either by position or by the
        widget itself. A position outside any matched set raises IndexError and
        leaves all sets untouched; a widget that is not present is ignored.
        """
        if isinstance(target, PlacedWidget):
            self._remove_widget_object(widget_set, target, save)
        elif isinstance(target, int) and not isinstance(target, bool):
            self._remove_widget_at(widget_set, target, save)
        else:
            raise TypeError(f"Expected a widget index or PlacedWidget, got {type(target).__name__}")

    def _remove_widget_at(self, widget_set: WidgetSet, index: int, save: bool) -> None:
        with self._lock:
            matches = self._matches(widget_set)
            for s in matches:
                if not 0 <= index < len(s.widgets):
                    raise IndexError(
                        f"Widget index {index} out of range for '{s.title}' ({len(s.widgets)} widgets)"
                    )
            for s in matches:
                del s.widgets[index]
            self._commit(save)

    def _remove_widget_object(self, widget_set: WidgetSet, widget: PlacedWidget, save: bool) -> None:
        with self._lock:
            for s in self._matches(widget_set):
                for j, w in enumerate(s.widgets):
                    if w == widget:
                        del s.widgets[j]
                        break
            self._commit(save)

    def update_widget_config(
        self,
        widget_set: WidgetSet,
        widget: PlacedWidget,
        new_widget: PlacedWidget,
        save: bool = True,
    ) -> None:
        """Replace the config of widget inside the first matching set."""
        with self._lock:
            for s in self._widget_sets:
                if s != widget_set:
                    continue
                for w in s.widgets:
                    if w == widget:
                        w.config = dict(new_widget.config)
                        self._commit(save)
                        return

    # ── Widget sets ──────────────────────────────────

    def add_widget_set(self, widget_set: WidgetSet, save: bool = True) -> None:
        """Append a copy of widget_set; the caller keeps no handle on the held record."""
        with self._lock:
            self._widget_sets.append(widget_set.model_copy(deep=True))
            logger.debug(f"Added widget set '{widget_set.title}'")
            self._commit(save)

    def remove_widget_set(self, widget_set: WidgetSet, save: bool = True) -> None:
        """Remove the first matching set only."""
        with self._lock:
            for i, s in enumerate(self._widget_sets):
                if s == widget_set:
                    del self._widget_sets[i]
                    logger.debug(f"Removed widget set '{s.title}'")
                    break
            self._commit(save)

    def create_widget_set(self, title: str, anchor: int = 0, save: bool = True) -> WidgetSet:
        """Create a set with the default layout and append it."""
        widget_set = WidgetSet(
            title=title,
            anchor=anchor,
            anchor_y=0,
            # centered anchor sits on the axis, edge anchors get a margin
            offset_x=0.0 if anchor == 1 else 10.0,
            offset_y=0.0,
            auto_resizes=True,
            scale=100.0,
            scale_y=12.0,
        )
        self.add_widget_set(widget_set, save=save)
        return widget_set

    def edit_widget_set(self, widget_set: WidgetSet, new_details: WidgetSet, save: bool = True) -> None:
        """Copy every setting except the widget list onto the first matching set."""
        with self._lock:
            target = self._first_match(widget_set)
            if target is not None:
                for name in type(new_details).model_fields:
                    if name in ("id", "widgets"):
                        continue
                    value = getattr(new_details, name)
                    if isinstance(value, BaseModel):
                        value = value.model_copy(deep=True)
                    setattr(target, name, value)
            self._commit(save)

    def get_updated_widget_set(self, widget_set: WidgetSet) -> Optional[WidgetSet]:
        with self._lock:
            found = self._first_match(widget_set)
            return found.model_copy(deep=True) if found is not None else None
