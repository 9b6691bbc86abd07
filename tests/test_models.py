import pytest

from widgetsets.color_codec import RGBAColorCodec
from widgetsets.models import WHITE, Color, PlacedWidget, WidgetKind, WidgetSet
from widgetsets.widget_details import get_details, get_widget_example, get_widget_name


def test_kind_tags_are_stable():
    assert {k.name: k.value for k in WidgetKind} == {
        "DATE": 1,
        "NETWORK": 2,
        "TEMPERATURE": 3,
        "BATTERY": 4,
        "TIME": 5,
        "TEXT": 6,
        "CURRENT_CAPACITY": 7,
        "CHARGE_SYMBOL": 8,
    }


@pytest.mark.parametrize("tag", [0, 9, -1, None, "5", 5.0, True])
def test_from_tag_rejects_unknown(tag):
    assert WidgetKind.from_tag(tag) is None


def test_from_tag_known():
    assert WidgetKind.from_tag(7) is WidgetKind.CURRENT_CAPACITY


def test_every_kind_has_details():
    for kind in WidgetKind:
        name, example = get_details(kind)
        assert name and example
    assert get_widget_name(WidgetKind.TEMPERATURE) == "Device Temperature"
    assert get_widget_example(WidgetKind.TIME) == "14:57:05"


def test_placed_widget_equality_is_by_id():
    a = PlacedWidget(kind=WidgetKind.TEXT, config={"text": "a"})
    b = a.model_copy(update={"config": {"text": "b"}, "modified": True})
    assert a == b
    assert a != PlacedWidget(kind=WidgetKind.TEXT, config={"text": "a"})


def test_widget_set_equality_ignores_id():
    a = WidgetSet(title="A")
    b = WidgetSet(title="A")
    assert a.id != b.id
    assert a == b
    assert a != WidgetSet(title="B")


def test_widget_set_equality_compares_widgets():
    widget = PlacedWidget(kind=WidgetKind.DATE)
    a = WidgetSet(widgets=[widget])
    assert a == WidgetSet(widgets=[widget.model_copy()])
    assert a != WidgetSet(widgets=[PlacedWidget(kind=WidgetKind.DATE)])
    assert a != WidgetSet()


def test_color_codec_round_trip():
    codec = RGBAColorCodec()
    color = Color(r=0.2, g=0.4, b=0.6, a=0.8)
    data = codec.encode(color)
    assert isinstance(data, bytes)
    assert codec.decode(data) == color


def test_color_codec_rejects_bad_input():
    codec = RGBAColorCodec()
    assert codec.encode("white") is None
    assert codec.decode(b"short") is None
    assert codec.decode("not bytes") is None


def test_white_is_default_color():
    assert WHITE == Color()
