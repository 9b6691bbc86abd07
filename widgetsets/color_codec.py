"""
Color codec: converts Color values to and from their persisted byte form.
"""

import logging
import struct
from typing import Any, Optional, Protocol

from widgetsets.models import Color

logger = logging.getLogger(__name__)

# r, g, b, a as little-endian doubles
_RGBA_FORMAT = "<4d"
_RGBA_SIZE = struct.calcsize(_RGBA_FORMAT)


class ColorCodec(Protocol):
    def encode(self, color: Color) -> Optional[bytes]: ...

    def decode(self, data: bytes) -> Optional[Color]: ...


class RGBAColorCodec:
    """Packs the four channels as fixed-width floats."""

    def encode(self, color: Any) -> Optional[bytes]:
        if not isinstance(color, Color):
            logger.warning(f"Cannot encode color of type {type(color).__name__}")
            return None
        return struct.pack(_RGBA_FORMAT, color.r, color.g, color.b, color.a)

    def decode(self, data: Any) -> Optional[Color]:
        if not isinstance(data, (bytes, bytearray)) or len(data) != _RGBA_SIZE:
            return None
        r, g, b, a = struct.unpack(_RGBA_FORMAT, bytes(data))
        return Color(r=r, g=g, b=b, a=a)
