"""Tests for bounds and instance transforms."""

import pytest

from symbol_tools.config import GeometryConfig
from symbol_tools.geometry import (
    BoundingBox,
    Placement,
    estimate_text_size,
    local_bounds,
    normalize_rotation,
    path_points,
    pin_far_end,
    pin_label_extents,
    pin_lead_length,
    pin_world_position,
    pin_world_positions,
    primitive_extent,
    rotate_point,
    text_extent,
    world_bounds,
)
from symbol_tools.symbols import (
    Arc,
    Circle,
    Line,
    Path,
    PathTransform,
    Pin,
    PinOrientation,
    Polyline,
    Rect,
    Symbol,
    Text,
)


@pytest.fixture
def body_symbol():
    """A 10 x 4 body with one pin on each side."""
    return Symbol(
        width=10,
        height=4,
        origin=(5, 2),
        graphics=[Rect(0, 0, 10, 4)],
        pins=[
            Pin("1", "IN", 0, 2, PinOrientation.RIGHT, 0),
            Pin("2", "OUT", 10, 2, PinOrientation.LEFT, 0),
        ],
    )


class TestPinFarEnd:
    """Lead far-end resolution."""

    def test_path_takes_precedence(self):
        """Explicit path data wins over length and orientation."""
        pin = Pin("1", "A", 0, 0, PinOrientation.RIGHT, 5, path="M 0 0 h 3")
        assert pin_far_end(pin) == (3, 0)
        assert pin_lead_length(pin) == pytest.approx(3)

    @pytest.mark.parametrize(
        "orientation,expected",
        [
            (PinOrientation.RIGHT, (3, 1)),
            (PinOrientation.LEFT, (-1, 1)),
            (PinOrientation.UP, (1, -1)),
            (PinOrientation.DOWN, (1, 3)),
        ],
    )
    def test_orientation_and_length(self, orientation, expected):
        pin = Pin("1", "A", 1, 1, orientation, 2)
        assert pin_far_end(pin) == pytest.approx(expected)

    def test_zero_length(self):
        assert pin_far_end(Pin("1", "A", 4, 4, PinOrientation.UP, 0)) == (4, 4)


class TestPrimitiveExtent:
    """Per-primitive extents."""

    def test_rect(self):
        box = primitive_extent(Rect(1, 2, 3, 4))
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (1, 2, 4, 6)

    def test_arc_uses_full_circle(self):
        box = primitive_extent(Arc(0, 0, 2, 0, 90))
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (-2, -2, 2, 2)

    def test_polyline(self):
        box = primitive_extent(Polyline(((0, 0), (5, -1), (2, 3))))
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (0, -1, 5, 3)

    def test_path_with_transform(self):
        path = Path("M 0 0 L 10 0", transform=PathTransform(1, 1, 0.5))
        box = primitive_extent(path)
        assert (box.min_x, box.max_x, box.min_y) == pytest.approx((1, 6, 1))

    def test_unparseable_path(self):
        assert primitive_extent(Path("not a path")) is None

    def test_text_anchor_middle(self):
        """Width is characters x font size x width factor."""
        box = text_extent(Text(0, 0, "ABCD", font_size=1, anchor="middle"))
        assert box.width == pytest.approx(2.4)
        assert box.height == pytest.approx(1)
        assert box.min_x == pytest.approx(-1.2)
        assert box.min_y == pytest.approx(-0.5)

    def test_text_anchor_end_top_baseline(self):
        box = text_extent(Text(0, 0, "AB", font_size=2, anchor="end", baseline="top"))
        assert (box.max_x, box.min_y) == pytest.approx((0, 0))

    def test_text_size_defaults(self):
        options = GeometryConfig(default_font_size=2.0)
        assert estimate_text_size("abc", 0, options) == pytest.approx((3.6, 2.0))


class TestPathPoints:
    """SVG path coordinate collection."""

    def test_curve_control_points_included(self):
        points = path_points("M 0 0 C 1 2 3 4 5 6 Z")
        assert points == [(0, 0), (1, 2), (3, 4), (5, 6)]

    def test_relative_and_implicit_lineto(self):
        assert path_points("M 1 1 l 2 0 0 2") == [(1, 1), (3, 1), (3, 3)]

    def test_horizontal_vertical(self):
        assert path_points("M 0 0 h 4 v -2 H 1") == [(0, 0), (4, 0), (4, -2), (1, -2)]

    def test_arc_endpoint(self):
        assert path_points("M 0 0 A 5 5 0 0 1 10 0") == [(0, 0), (10, 0)]


class TestLocalBounds:
    """Local bounding boxes."""

    def test_padding(self, body_symbol):
        box = local_bounds(body_symbol)
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == pytest.approx((-0.5, -0.5, 10.5, 4.5))

    def test_custom_padding(self, body_symbol):
        box = local_bounds(body_symbol, GeometryConfig(padding=0))
        assert (box.width, box.height) == pytest.approx((10, 4))

    def test_pin_far_ends_included(self):
        symbol = Symbol(graphics=[Rect(0, 0, 2, 2)], pins=[Pin("1", "", 0, 1, PinOrientation.LEFT, 3)])
        box = local_bounds(symbol, GeometryConfig(padding=0))
        assert box.min_x == pytest.approx(-3)

    def test_declared_size_fallback(self):
        """No finite geometry falls back to width/height at -origin."""
        symbol = Symbol(width=4, height=2, origin=(2, 1))
        box = local_bounds(symbol, GeometryConfig(padding=0))
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (-2, -1, 2, 1)

    def test_missing_symbol(self):
        assert local_bounds(None) is None

    def test_monotonic_when_adding_primitives(self, body_symbol):
        """Adding a primitive never shrinks the box."""
        extra = [
            Line(-5, 0, 0, 0),
            Circle(5, 2, 1),
            Text(12, 2, "label"),
            Arc(20, 20, 3, 0, 45),
            Path("M 0 0 C -4 -4 4 -4 0 0"),
            Rect(1, 1, 1, 1),
        ]
        graphics = list(body_symbol.graphics)
        previous = local_bounds(body_symbol)
        for primitive in extra:
            graphics.append(primitive)
            current = local_bounds(Symbol(graphics=graphics, pins=body_symbol.pins))
            assert current.contains_box(previous)
            previous = current

    def test_pin_labels_optional(self, body_symbol):
        plain = local_bounds(body_symbol)
        labelled = local_bounds(body_symbol, GeometryConfig(include_pin_labels=True))
        assert labelled.contains_box(plain)
        assert labelled.area > plain.area

    def test_hidden_pin_name_has_no_label(self):
        pin = Pin("", "VCC", 0, 0, PinOrientation.RIGHT, 2, show_name=False)
        assert pin_label_extents(pin) == []


class TestTransforms:
    """Placement and world-frame queries."""

    def test_normalize_rotation(self):
        assert normalize_rotation(-90) == 270
        assert normalize_rotation(450) == 90
        assert normalize_rotation(360) == 0

    def test_rotate_point_quarter_turn_exact(self):
        assert rotate_point(1, 0, 90) == (0.0, 1.0)

    def test_apply_rotate_then_translate(self):
        assert Placement(10, 20, 90).apply(1, 0) == (10.0, 21.0)

    def test_apply_mirror_before_rotation(self):
        assert Placement(0, 0, 0, mirror=True).apply(2, 3) == (-2, 3)
        assert Placement(0, 0, 90, mirror=True).apply(1, 0) == (0.0, -1.0)

    def test_rotation_swaps_world_box(self, body_symbol):
        """Quarter turns swap width and height; half turns do not."""
        local = local_bounds(body_symbol)
        for rotation in (0, 180):
            box = world_bounds(body_symbol, Placement(rotation=rotation))
            assert (box.width, box.height) == pytest.approx((local.width, local.height))
        for rotation in (90, 270):
            box = world_bounds(body_symbol, Placement(rotation=rotation))
            assert (box.width, box.height) == pytest.approx((local.height, local.width))
            assert box.area == pytest.approx(local.area)

    def test_world_bounds_translated(self, body_symbol):
        box = world_bounds(body_symbol, Placement(x=100, y=50))
        assert (box.min_x, box.min_y) == pytest.approx((99.5, 49.5))

    def test_world_bounds_missing_symbol(self):
        assert world_bounds(None, Placement()) is None

    def test_pin_world_position(self, body_symbol):
        assert pin_world_position(body_symbol, "2", Placement(5, 5, 180)) == pytest.approx((-5, 3))
        assert pin_world_position(body_symbol, "9", Placement()) is None
        assert pin_world_position(None, "1") is None

    def test_pin_world_positions(self, body_symbol):
        positions = pin_world_positions(body_symbol, Placement(1, 1))
        assert positions == {"1": (1, 3), "2": (11, 3)}

    def test_box_helpers(self):
        box = BoundingBox(0, 0, 2, 2)
        assert box.union(BoundingBox(3, 3, 4, 4)) == BoundingBox(0, 0, 4, 4)
        assert box.expand(1) == BoundingBox(-1, -1, 3, 3)
        assert box.contains(1, 1)
        assert box.intersects(BoundingBox(1, 1, 5, 5))
        assert BoundingBox.from_points([]) is None
