"""
Human-readable names and preview strings for each widget kind.
"""

from typing import Dict, Tuple

from widgetsets.models import WidgetKind

# kind -> (name, example)
WIDGET_DETAILS: Dict[WidgetKind, Tuple[str, str]] = {
    WidgetKind.DATE: ("Date", "Mon Oct 16"),
    WidgetKind.NETWORK: ("Network", "▲ 0 KB/s"),
    WidgetKind.TEMPERATURE: ("Device Temperature", "29.34ºC"),
    WidgetKind.BATTERY: ("Battery Details", "25 W"),
    WidgetKind.TIME: ("Time", "14:57:05"),
    WidgetKind.TEXT: ("Text Label", "Example"),
    WidgetKind.CURRENT_CAPACITY: ("Battery Capacity", "50%"),
    WidgetKind.CHARGE_SYMBOL: ("Charging Symbol", "⚡"),
}


def get_details(kind: WidgetKind) -> Tuple[str, str]:
    return WIDGET_DETAILS[kind]


def get_widget_name(kind: WidgetKind) -> str:
    name, _ = get_details(kind)
    return name


def get_widget_example(kind: WidgetKind) -> str:
    _, example = get_details(kind)
    return example
