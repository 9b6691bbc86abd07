"""
Data models for widget sets and the widgets placed inside them.
"""

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WidgetKind(int, Enum):
    """Widget kinds. The integer value is the persisted tag and must never change."""
    DATE = 1
    NETWORK = 2
    TEMPERATURE = 3
    BATTERY = 4
    TIME = 5
    TEXT = 6
    CURRENT_CAPACITY = 7
    CHARGE_SYMBOL = 8

    @classmethod
    def from_tag(cls, tag: Any) -> Optional["WidgetKind"]:
        """Look up a kind by persisted tag; unknown tags yield None."""
        if isinstance(tag, bool) or not isinstance(tag, int):
            return None
        try:
            return cls(tag)
        except ValueError:
            return None


class Color(BaseModel):
    """RGBA color, channels in [0, 1]."""
    model_config = ConfigDict(frozen=True)

    r: float = 1.0
    g: float = 1.0
    b: float = 1.0
    a: float = 1.0


WHITE = Color(r=1.0, g=1.0, b=1.0, a=1.0)


class PlacedWidget(BaseModel):
    """A single widget inside a set. Identity is the runtime-only id."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, description="Never persisted")
    kind: WidgetKind
    config: Dict[str, Any] = Field(default_factory=dict, description="Kind-specific settings, opaque")
    modified: bool = Field(default=False, description="Transient UI dirty flag")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlacedWidget):
            return NotImplemented
        return self.id == other.id


class BlurStyle(BaseModel):
    has_blur: bool = False
    # persisted as an int, float at runtime for interpolation
    corner_radius: float = 4.0
    style_dark: bool = True
    alpha: float = 1.0


class ColorStyle(BaseModel):
    uses_custom_color: bool = False
    color: Color = WHITE
    dynamic_color: bool = True


class WidgetSet(BaseModel):
    """A named group of widgets with its layout and appearance settings."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, description="Runtime-only identity")
    title: str = "Untitled"

    anchor: int = Field(default=0, description="Horizontal corner/edge selector")
    anchor_y: int = Field(default=0, description="Vertical selector")
    offset_x: float = 10.0
    offset_y: float = 0.0

    auto_resizes: bool = False
    scale: float = 100.0
    scale_y: float = 12.0

    widgets: List[PlacedWidget] = Field(default_factory=list, description="Order is stacking order")

    blur: BlurStyle = Field(default_factory=BlurStyle)
    color: ColorStyle = Field(default_factory=ColorStyle)

    text_bold: bool = False
    text_alignment: int = 1
    font_size: float = 10.0
    text_alpha: float = 1.0

    def __eq__(self, other: object) -> bool:
        # Structural: everything but the runtime id.
        if not isinstance(other, WidgetSet):
            return NotImplemented
        return all(
            getattr(self, name) == getattr(other, name)
            for name in type(self).model_fields
            if name != "id"
        )
