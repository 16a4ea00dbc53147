"""Tests for KiCad library search and conversion."""

import pytest

from symbol_tools.config import KiCadConfig
from symbol_tools.kicad import (
    angle_to_orientation,
    circle_from_three_points,
    convert_kicad_symbol,
    dedupe_pins,
    find_symbol_node,
    is_sub_unit_name,
    list_symbol_names,
    load_kicad_symbol,
    pin_from_sexp,
)
from symbol_tools.sexp import parse_sexp
from symbol_tools.symbols import (
    Arc,
    Circle,
    Pin,
    PinKind,
    PinOrientation,
    Polyline,
    Rect,
    SymbolSource,
    Text,
)


def _symbol(body: str):
    """Convert a one-symbol library built around ``body``."""
    return load_kicad_symbol(f'(kicad_symbol_lib (symbol "X" {body}))', "X")


class TestLibrarySearch:
    """Finding symbols in a parsed library."""

    def test_list_names_skips_units(self, device_library):
        tree = parse_sexp(device_library)
        assert list_symbol_names(tree) == ["Device:R", "Device:LED", "Device:R_Small"]

    def test_find_by_suffix(self, device_library):
        tree = parse_sexp(device_library)
        assert find_symbol_node(tree, "R").get_string(0) == "Device:R"
        assert find_symbol_node(tree, "r_small").get_string(0) == "Device:R_Small"

    def test_find_by_full_name_and_substring(self, device_library):
        tree = parse_sexp(device_library)
        assert find_symbol_node(tree, "Device:LED").get_string(0) == "Device:LED"
        assert find_symbol_node(tree, "LE").get_string(0) == "Device:LED"

    def test_not_found(self, device_library):
        tree = parse_sexp(device_library)
        assert find_symbol_node(tree, "Q_NPN") is None
        assert find_symbol_node(tree, "") is None
        assert find_symbol_node(parse_sexp("(not_a_lib)"), "R") is None

    def test_first_node_matching_any_rule_wins(self):
        """An earlier substring match beats a later exact match."""
        tree = parse_sexp(
            '(kicad_symbol_lib (symbol "Device:R_Network") (symbol "Device:R_Pack") (symbol "R"))'
        )
        assert find_symbol_node(tree, "R").get_string(0) == "Device:R_Network"
        assert find_symbol_node(tree, "r_pack").get_string(0) == "Device:R_Pack"

    def test_sub_unit_names(self):
        assert is_sub_unit_name("R_0_1")
        assert is_sub_unit_name("LM358_1_1")
        assert not is_sub_unit_name("R_Small")


class TestPinFromSexp:
    """Pin clauses."""

    def test_y_is_negated(self):
        pin = pin_from_sexp(parse_sexp('(pin input line (at 1.27 3.81 0) (length 2.54) (name "IN") (number "5"))'))
        assert (pin.x, pin.y) == pytest.approx((1.27, -3.81))
        assert pin.kind == PinKind.INPUT
        assert (pin.name, pin.number) == ("IN", "5")

    def test_default_length(self):
        pin = pin_from_sexp(parse_sexp("(pin passive line (at 0 0 0))"), default_length=5.08)
        assert pin.length == 5.08

    def test_zero_length_kept(self):
        pin = pin_from_sexp(parse_sexp("(pin passive line (at 0 0 0) (length 0))"))
        assert pin.length == 0

    def test_tilde_name_is_empty(self):
        pin = pin_from_sexp(parse_sexp('(pin passive line (at 0 0 0) (name "~") (number "1"))'))
        assert pin.name == ""

    @pytest.mark.parametrize(
        "clause",
        ["(pin power_in line (at 0 0 0) hide)", "(pin power_in line (at 0 0 0) (hide yes))"],
    )
    def test_hidden(self, clause):
        assert pin_from_sexp(parse_sexp(clause)).show_name is False

    @pytest.mark.parametrize(
        "angle,orientation",
        [
            (0, PinOrientation.RIGHT),
            (90, PinOrientation.UP),
            (180, PinOrientation.LEFT),
            (270, PinOrientation.DOWN),
            (450, PinOrientation.UP),
            (45, PinOrientation.RIGHT),
            (None, PinOrientation.RIGHT),
        ],
    )
    def test_angle_mapping(self, angle, orientation):
        assert angle_to_orientation(angle) == orientation


class TestCircleFromThreePoints:
    """Arc centre reconstruction."""

    def test_quarter_circle(self):
        cx, cy, r = circle_from_three_points((1, 0), (0.70710678, 0.70710678), (0, 1))
        assert (cx, cy, r) == pytest.approx((0, 0, 1), abs=1e-6)

    def test_collinear(self):
        assert circle_from_three_points((0, 0), (1, 1), (2, 2)) == (1, 1, 1.0)


class TestConvertKicadSymbol:
    """Whole-symbol conversion."""

    def test_single_pin_resistor(self, simple_r_library):
        """One pin at (0,0) pointing right, length 2.54, Value 10k."""
        symbol = load_kicad_symbol(simple_r_library, "R")
        assert symbol.source == SymbolSource.KICAD
        assert symbol.name == "R"
        assert len(symbol.pins) == 1
        pin = symbol.pins[0]
        assert pin.position == pytest.approx((0, 0))
        assert pin.orientation == PinOrientation.RIGHT
        assert pin.length == pytest.approx(2.54)
        assert symbol.properties["Value"] == "10k"

    def test_device_resistor(self, device_library):
        symbol = load_kicad_symbol(device_library, "R")
        assert symbol.name == "R"
        assert (symbol.width, symbol.height) == pytest.approx((2.032, 7.62))
        assert symbol.origin == pytest.approx((1.016, 3.81))

        pin1, pin2 = symbol.get_pin("1"), symbol.get_pin("2")
        assert pin1.position == pytest.approx((1.016, 0))
        assert pin1.orientation == PinOrientation.DOWN
        assert pin2.position == pytest.approx((1.016, 7.62))
        assert pin2.orientation == PinOrientation.UP
        assert pin1.name == ""

        body = symbol.graphics[0]
        assert isinstance(body, Rect)
        assert (body.x, body.y, body.width, body.height) == pytest.approx((0, 1.27, 2.032, 5.08))
        assert body.style.fill == "none"
        assert body.style.stroke_width == pytest.approx(0.254)

    def test_properties(self, device_library):
        symbol = load_kicad_symbol(device_library, "R")
        assert symbol.properties["Reference"] == "R"
        assert symbol.properties["ki_keywords"] == "R res resistor"
        assert "Footprint" not in symbol.properties

    def test_led_styles_and_text(self, device_library):
        symbol = load_kicad_symbol(device_library, "LED")
        triangle = symbol.graphics[0]
        assert isinstance(triangle, Polyline)
        assert triangle.style.stroke == "rgb(255,0,0)"
        assert triangle.style.fill == "currentColor"

        label = symbol.graphics[1]
        assert isinstance(label, Text)
        assert label.text == "LED"
        assert label.anchor == "start"
        assert (label.x, label.y) == pytest.approx((3.81, 4.27))

        assert (symbol.width, symbol.height) == pytest.approx((7.62, 2.54))
        assert symbol.get_pin("1").position == pytest.approx((0, 1.27))
        assert symbol.get_pin("2").orientation == PinOrientation.LEFT

    def test_extends_parent(self, device_library):
        """A derived symbol borrows the parent's body and overrides properties."""
        symbol = load_kicad_symbol(device_library, "R_Small")
        assert symbol.name == "R_Small"
        assert symbol.pin_count == 2
        assert symbol.properties["Value"] == "R_Small"
        assert symbol.properties["ki_keywords"] == "R res resistor"

    def test_placeholders(self, simple_r_library):
        texts = [g.text for g in load_kicad_symbol(simple_r_library, "R").graphics if isinstance(g, Text)]
        assert texts == ["${REF}", "${VALUE}"]

    def test_pins_deduplicated_across_units(self):
        symbol = _symbol(
            '(symbol "X_1_1" (pin input line (at 0 0 0) (length 2.54) (number "1")))'
            '(symbol "X_2_1" (pin input line (at 0 0.001 0) (length 2.54) (number "1")))'
        )
        assert symbol.pin_count == 1

    def test_units_in_unexpected_list(self):
        """Unit symbols wrapped in a non-symbol list are still found."""
        symbol = _symbol(
            '(units (symbol "X_1_1" (pin input line (at 0 0 0) (length 2.54) (number "1"))'
            ' (rectangle (start -1 -1) (end 1 1))))'
        )
        assert symbol is not None
        assert symbol.pin_count == 1
        assert isinstance(symbol.graphics[0], Rect)

    def test_circle_defaults(self):
        symbol = _symbol("(circle (center 1 1))")
        circle = symbol.graphics[0]
        assert isinstance(circle, Circle)
        assert circle.r == 1.0
        assert (circle.cx, circle.cy) == pytest.approx((1, 1))

    def test_arc_from_midpoint(self):
        symbol = _symbol("(arc (start 1 0) (mid 0 1) (end -1 0))")
        arc = symbol.graphics[0]
        assert isinstance(arc, Arc)
        assert arc.r == pytest.approx(1)
        assert (symbol.width, symbol.height) == pytest.approx((2, 2))

    def test_legacy_arc(self):
        symbol = _symbol("(arc (start 2 0) (end 0 2) (radius (at 0 0) (length 2)))")
        assert symbol.graphics[0].r == 2

    def test_default_color(self):
        symbol = _symbol("(rectangle (start 0 0) (end 1 1) (stroke (width 0) (color 0 0 0 0)) (fill (type background)))")
        rect = symbol.graphics[0]
        assert rect.style.stroke == "#880000"
        assert rect.style.stroke_width == pytest.approx(0.254)
        assert rect.style.fill == "#ffffcc"

    def test_text_only_symbol(self):
        symbol = _symbol('(text "NOTE" (at 0 0 0))')
        assert symbol is not None
        assert symbol.width > 0

    def test_nothing_to_draw(self):
        assert _symbol('(property "Value" "X")') is None

    def test_not_found(self, device_library, caplog):
        with caplog.at_level("WARNING"):
            assert load_kicad_symbol(device_library, "Q_NPN") is None
        assert "Device:R" in caplog.text

    def test_malformed_text(self):
        assert load_kicad_symbol("(kicad_symbol_lib (symbol", "R") is None

    def test_wrong_node(self):
        assert convert_kicad_symbol(None) is None
        assert convert_kicad_symbol(parse_sexp("(pin passive line)")) is None

    def test_dedupe_precision_option(self):
        text = (
            '(kicad_symbol_lib (symbol "X" (pin input line (at 0 0 0) (length 1) (number "1"))'
            ' (pin input line (at 0 0.001 0) (length 1) (number "2"))))'
        )
        assert load_kicad_symbol(text, "X", KiCadConfig(dedupe_precision=4)).pin_count == 2


class TestDedupePins:
    """Pin deduplication."""

    def test_first_pin_wins(self):
        pins = [Pin("1", "A", 0, 0), Pin("2", "B", 0.001, 0), Pin("3", "C", 1, 0)]
        assert [p.number for p in dedupe_pins(pins)] == ["1", "3"]
