"""
Codec between the persisted widget-set tree and the in-memory records.

Decoding is total: missing or mistyped fields fall back to their defaults and
widgets with an unknown kind tag are dropped. It never raises.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from widgetsets.color_codec import ColorCodec, RGBAColorCodec
from widgetsets.models import (
    WHITE,
    BlurStyle,
    Color,
    ColorStyle,
    PlacedWidget,
    WidgetKind,
    WidgetSet,
)

logger = logging.getLogger(__name__)

WIDGET_ID_KEY = "widgetID"
WIDGETS_KEY = "widgetIDs"
BLUR_KEY = "blurDetails"
COLOR_KEY = "colorDetails"

# (attribute, persisted key, type) for the flat scalar fields of a WidgetSet
_SET_FIELDS = [
    ("title", "title", "str"),
    ("anchor", "anchor", "int"),
    ("anchor_y", "anchorY", "int"),
    ("offset_x", "offsetX", "float"),
    ("offset_y", "offsetY", "float"),
    ("auto_resizes", "autoResizes", "bool"),
    ("scale", "scale", "float"),
    ("scale_y", "scaleY", "float"),
    ("text_bold", "textBold", "bool"),
    ("text_alignment", "textAlignment", "int"),
    ("font_size", "fontSize", "float"),
    ("text_alpha", "textAlpha", "float"),
]

_BLUR_FIELDS = [
    ("has_blur", "hasBlur", "bool"),
    ("corner_radius", "cornerRadius", "float"),
    ("style_dark", "styleDark", "bool"),
    ("alpha", "alpha", "float"),
]

_COLOR_FLAGS = [
    ("uses_custom_color", "usesCustomColor", "bool"),
    ("dynamic_color", "dynamicColor", "bool"),
]

_default_codec = RGBAColorCodec()


def _coerce(value: Any, type_hint: str) -> Any:
    """Return value converted to type_hint, or None when it does not fit."""
    if type_hint == "bool":
        return value if isinstance(value, bool) else None
    # bool is an int subclass, never accept it as a number
    if isinstance(value, bool):
        return None
    if type_hint == "int":
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None
    if type_hint == "float":
        if not isinstance(value, (int, float)):
            return None
        try:
            value = float(value)
        except OverflowError:
            return None
        # NaN and inf cannot be narrowed back to an int on encode
        return value if math.isfinite(value) else None
    if type_hint == "str":
        return value if isinstance(value, str) else None
    return None


def _read_fields(source: Dict[str, Any], fields: list) -> Dict[str, Any]:
    """Collect present, well-typed fields; the model supplies defaults for the rest."""
    values = {}
    for attr, key, type_hint in fields:
        if key not in source:
            continue
        value = _coerce(source[key], type_hint)
        if value is None:
            logger.debug(f"Ignoring malformed '{key}': {source[key]!r}")
            continue
        values[attr] = value
    return values


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


# ── Decode ───────────────────────────────────────────

def decode_widget(entry: Any) -> Optional[PlacedWidget]:
    """Decode one widget mapping; None if it carries no known kind tag."""
    if not isinstance(entry, dict):
        return None
    kind = WidgetKind.from_tag(entry.get(WIDGET_ID_KEY))
    if kind is None:
        logger.debug(f"Dropping widget with unknown tag {entry.get(WIDGET_ID_KEY)!r}")
        return None
    config = {}
    for k, v in entry.items():
        if k == WIDGET_ID_KEY:
            continue
        if not isinstance(k, str):
            logger.debug(f"Dropping non-string config key {k!r}")
            continue
        config[k] = v
    return PlacedWidget(kind=kind, config=config)


def decode_color(data: Any, color_codec: ColorCodec) -> Color:
    if not isinstance(data, (bytes, bytearray)):
        return WHITE
    try:
        color = color_codec.decode(bytes(data))
    except Exception as e:
        logger.warning(f"Color decode failed, using white: {e}")
        return WHITE
    return color if isinstance(color, Color) else WHITE


def decode_widget_set(entry: Dict[str, Any], color_codec: ColorCodec) -> WidgetSet:
    widgets = []
    raw_widgets = entry.get(WIDGETS_KEY)
    if isinstance(raw_widgets, list):
        for raw in raw_widgets:
            widget = decode_widget(raw)
            if widget is not None:
                widgets.append(widget)

    blur = BlurStyle(**_read_fields(_as_dict(entry.get(BLUR_KEY)), _BLUR_FIELDS))

    color_details = _as_dict(entry.get(COLOR_KEY))
    color = ColorStyle(
        color=decode_color(color_details.get("color"), color_codec),
        **_read_fields(color_details, _COLOR_FLAGS),
    )

    return WidgetSet(
        widgets=widgets,
        blur=blur,
        color=color,
        **_read_fields(entry, _SET_FIELDS),
    )


def decode_widget_sets(tree: Any, color_codec: Optional[ColorCodec] = None) -> List[WidgetSet]:
    """Decode the persisted array into widget sets. Always returns a list."""
    if tree is None:
        return []
    if not isinstance(tree, list):
        logger.warning(f"Expected a list of widget sets, got {type(tree).__name__}")
        return []
    codec = color_codec or _default_codec
    return [decode_widget_set(entry, codec) for entry in tree if isinstance(entry, dict)]


# ── Encode ───────────────────────────────────────────

def encode_widget(widget: PlacedWidget) -> Dict[str, Any]:
    data = dict(widget.config)
    # the kind tag always wins over a stray config key of the same name
    data[WIDGET_ID_KEY] = widget.kind.value
    return data


def encode_widget_set(widget_set: WidgetSet, color_codec: ColorCodec) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for attr, key, _ in _SET_FIELDS:
        data[key] = getattr(widget_set, attr)

    data[WIDGETS_KEY] = [encode_widget(w) for w in widget_set.widgets]

    blur = widget_set.blur
    data[BLUR_KEY] = {
        "hasBlur": blur.has_blur,
        "cornerRadius": int(blur.corner_radius),
        "styleDark": blur.style_dark,
        "alpha": blur.alpha,
    }

    color_details: Dict[str, Any] = {
        "usesCustomColor": widget_set.color.uses_custom_color,
        "dynamicColor": widget_set.color.dynamic_color,
    }
    try:
        color_bytes = color_codec.encode(widget_set.color.color)
    except Exception as e:
        logger.warning(f"Color encode failed, omitting color: {e}")
        color_bytes = None
    if color_bytes is not None:
        color_details["color"] = color_bytes
    data[COLOR_KEY] = color_details

    return data


def encode_widget_sets(widget_sets: List[WidgetSet], color_codec: Optional[ColorCodec] = None) -> List[Dict[str, Any]]:
    codec = color_codec or _default_codec
    return [encode_widget_set(s, codec) for s in widget_sets]
