"""Tests for the canonical symbol model."""

import pytest

from symbol_tools.symbols import (
    Arc,
    Circle,
    LabelPosition,
    Line,
    Path,
    PathTransform,
    Pin,
    PinKind,
    PinOrientation,
    Polygon,
    Rect,
    Style,
    Symbol,
    SymbolSource,
    Text,
    parse_pin_path,
    placeholder_texts,
    primitive_from_dict,
    symbol_from_dict,
    symbol_to_dict,
)


class TestPrimitiveMoved:
    """Offset-then-scale normalization of primitives."""

    def test_line(self):
        line = Line(10, 20, 30, 20, style=Style(stroke_width=1.0)).moved(-10, -20, 0.5)
        assert (line.x1, line.y1, line.x2, line.y2) == (0, 0, 10, 0)
        assert line.style.stroke_width == pytest.approx(0.5)

    def test_rect_scales_size_and_radii(self):
        rect = Rect(2, 4, 10, 6, rx=1, ry=1).moved(-2, -4, 2)
        assert (rect.x, rect.y, rect.width, rect.height) == (0, 0, 20, 12)
        assert rect.rx == 2

    def test_circle_and_arc(self):
        circle = Circle(5, 5, 2).moved(1, 1, 0.254)
        assert circle.cx == pytest.approx(1.524)
        assert circle.r == pytest.approx(0.508)
        arc = Arc(0, 0, 1, 0, 90).moved(1, 0, 2)
        assert (arc.cx, arc.r, arc.start_angle, arc.end_angle) == (2, 2, 0, 90)

    def test_polygon_keeps_type(self):
        polygon = Polygon(((0, 0), (1, 0), (0, 1))).moved(1, 1)
        assert isinstance(polygon, Polygon)
        assert polygon.points[1] == (2.0, 1.0)

    def test_text_scales_font(self):
        text = Text(1, 1, "U1", font_size=7).moved(0, 0, 0.254)
        assert text.font_size == pytest.approx(1.778)
        assert text.text == "U1"

    def test_path_data_untouched(self):
        """Path data is never rewritten; a transform is composed instead."""
        path = Path("M 10 10 L 20 10").moved(-10, -10, 0.254)
        assert path.d == "M 10 10 L 20 10"
        assert path.transform.apply(10, 10) == pytest.approx((0, 0))
        assert path.transform.apply(20, 10) == pytest.approx((2.54, 0))

    def test_path_transform_composes(self):
        """Two moves compose additively."""
        path = Path("M 0 0").moved(1, 2).moved(0, 0, 2)
        assert path.transform == PathTransform(2, 4, 2)

    def test_path_transform_string(self):
        assert str(PathTransform(1.5, -2, 0.254)) == "translate(1.5,-2) scale(0.254)"
        assert PathTransform.parse("translate(1.5,-2) scale(0.254)") == PathTransform(1.5, -2, 0.254)


class TestPinPath:
    """Pin lead path parsing."""

    def test_relative_horizontal(self):
        assert parse_pin_path("M 0 0 h 3") == ((0, 0), (3, 0))

    def test_absolute_horizontal(self):
        assert parse_pin_path("M 5 1 H 2") == ((5, 1), (2, 1))

    def test_relative_vertical(self):
        assert parse_pin_path("M 1 1 v -2") == ((1, 1), (1, -1))

    def test_line_to(self):
        assert parse_pin_path("M 0 0 L 4 3") == ((0, 0), (4, 3))

    def test_unparseable(self):
        assert parse_pin_path("C 1 2 3 4 5 6") is None
        assert parse_pin_path("") is None
        assert parse_pin_path(None) is None


class TestPin:
    """Pin tests."""

    def test_moved_rewrites_path(self):
        """Moving a pin re-emits its lead as an absolute line."""
        pin = Pin("1", "A", 10, 10, PinOrientation.RIGHT, 3, path="M 10 10 h 3")
        moved = pin.moved(-10, -10, 2)
        assert (moved.x, moved.y, moved.length) == (0, 0, 6)
        assert moved.path == "M 0 0 L 6 0"

    def test_moved_drops_unparseable_path(self):
        pin = Pin("1", "A", 0, 0, path="Z").moved(1, 1)
        assert pin.path is None

    def test_moved_labels(self):
        label = LabelPosition(4, 4, anchor="start", font_size=7)
        pin = Pin("1", "A", 0, 0, name_label=label).moved(-4, -4, 0.5)
        assert (pin.name_label.x, pin.name_label.y) == (0, 0)
        assert pin.name_label.font_size == pytest.approx(3.5)

    def test_orientation_direction(self):
        """Y grows downward in the symbol frame."""
        assert PinOrientation.UP.direction == (0.0, -1.0)
        assert PinOrientation.LEFT.direction == (-1.0, 0.0)

    def test_orientation_from_delta(self):
        assert PinOrientation.from_delta(-3, 1) == PinOrientation.LEFT
        assert PinOrientation.from_delta(0, 2) == PinOrientation.DOWN

    def test_kind_from_string(self):
        assert PinKind.from_string("power_in") == PinKind.POWER_IN
        assert PinKind.from_string("tri-state") == PinKind.TRI_STATE
        assert PinKind.from_string("weird") == PinKind.UNSPECIFIED
        assert PinKind.from_string(None) == PinKind.PASSIVE


class TestSymbol:
    """Symbol container tests."""

    @pytest.fixture
    def symbol(self):
        return Symbol(
            width=10,
            height=5,
            origin=(5, 2.5),
            graphics=[Rect(0, 0, 10, 5), Text(11, -1, "${REF}")],
            pins=[
                Pin("1", "IN", 0, 2.5, PinOrientation.LEFT, 2.54),
                Pin("2", "OUT", 10, 2.5, PinOrientation.RIGHT, 2.54),
                Pin("3", "OUT", 5, 0, PinOrientation.UP, 2.54, kind=PinKind.OUTPUT),
            ],
            properties={"Value": "10k"},
            source=SymbolSource.KICAD,
            name="Demo",
        )

    def test_sequences_become_tuples(self, symbol):
        assert isinstance(symbol.graphics, tuple)
        assert isinstance(symbol.pins, tuple)

    def test_get_pin_compares_as_string(self, symbol):
        assert symbol.get_pin(2).name == "OUT"
        assert symbol.get_pin("9") is None

    def test_pins_by_name(self, symbol):
        assert [p.number for p in symbol.pins_by_name("OUT")] == ["2", "3"]

    def test_pin_count(self, symbol):
        assert symbol.pin_count == 3

    def test_dict_round_trip(self, symbol):
        """to_dict output rebuilds an equal symbol."""
        data = symbol_to_dict(symbol)
        assert data["origin"] == {"x": 5.0, "y": 2.5}
        assert data["graphics"][0]["type"] == "rect"
        assert data["pins"][2]["type"] == "output"
        assert symbol_from_dict(data) == symbol

    def test_from_dict_unknown_primitive(self):
        with pytest.raises(ValueError):
            primitive_from_dict({"type": "spline"})

    def test_placeholders_sit_right_of_body(self):
        ref, value = placeholder_texts(10)
        assert (ref.x, ref.text) == (11, "${REF}")
        assert (value.x, value.text) == (11, "${VALUE}")
