"""
Local bounding boxes for canonical symbols.

Text has no real glyph metrics here: its box is estimated from the character
count and font size (``GeometryConfig.text_width_factor`` and
``text_height_factor``). Treat text extents as approximate.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import GeometryConfig
from ..symbols import (
    Arc,
    Circle,
    Line,
    Path,
    Pin,
    PinOrientation,
    Point,
    Polyline,
    Primitive,
    Rect,
    Symbol,
    Text,
    parse_pin_path,
)

# Pin label layout used when a pin carries no explicit label positions
PIN_NAME_GAP = 1.0
PIN_NUMBER_MARGIN = 0.6
PIN_NUMBER_NUDGE = 0.5
PIN_NUMBER_FONT_SIZE = 1.1
BUBBLE_RADIUS = 0.6

_NUM = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_PATH_TOKEN_RE = re.compile(rf"([MmLlHhVvCcSsQqTtAaZz])|({_NUM})")
_PATH_ARITY = {"m": 2, "l": 2, "h": 1, "v": 1, "c": 6, "s": 4, "q": 4, "t": 2, "a": 7, "z": 0}

_TOP_BASELINES = {"top", "hanging", "text-before-edge", "text-top"}
_BOTTOM_BASELINES = {"bottom", "alphabetic", "baseline", "auto", "text-after-edge", "ideographic"}


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box in mm."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
        )

    def union(self, other: BoundingBox) -> BoundingBox:
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def expand(self, margin: float) -> BoundingBox:
        """Return the box grown by ``margin`` on every side."""
        return BoundingBox(
            self.min_x - margin, self.min_y - margin, self.max_x + margin, self.max_y + margin
        )

    def contains(self, x: float, y: float, tolerance: float = 0.0) -> bool:
        return (
            self.min_x - tolerance <= x <= self.max_x + tolerance
            and self.min_y - tolerance <= y <= self.max_y + tolerance
        )

    def contains_box(self, other: BoundingBox) -> bool:
        return (
            self.min_x <= other.min_x
            and self.min_y <= other.min_y
            and self.max_x >= other.max_x
            and self.max_y >= other.max_y
        )

    def intersects(self, other: BoundingBox) -> bool:
        return not (
            other.min_x > self.max_x
            or other.max_x < self.min_x
            or other.min_y > self.max_y
            or other.max_y < self.min_y
        )

    def to_dict(self) -> dict:
        return {
            "x": self.min_x,
            "y": self.min_y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Optional[BoundingBox]:
        builder = BoundsBuilder()
        builder.add_points(points)
        return builder.build()


class BoundsBuilder:
    """Accumulates finite points into a bounding box."""

    def __init__(self):
        self.min_x = math.inf
        self.min_y = math.inf
        self.max_x = -math.inf
        self.max_y = -math.inf

    @property
    def empty(self) -> bool:
        return self.min_x == math.inf

    def add_point(self, x: float, y: float) -> None:
        if not (math.isfinite(x) and math.isfinite(y)):
            return
        self.min_x = min(self.min_x, x)
        self.min_y = min(self.min_y, y)
        self.max_x = max(self.max_x, x)
        self.max_y = max(self.max_y, y)

    def add_points(self, points: Iterable[Point]) -> None:
        for x, y in points:
            self.add_point(x, y)

    def add_box(self, box: Optional[BoundingBox]) -> None:
        if box is not None:
            self.add_point(box.min_x, box.min_y)
            self.add_point(box.max_x, box.max_y)

    def build(self) -> Optional[BoundingBox]:
        if self.empty:
            return None
        return BoundingBox(self.min_x, self.min_y, self.max_x, self.max_y)


def estimate_text_size(
    content: str, font_size: float, options: Optional[GeometryConfig] = None
) -> Tuple[float, float]:
    """Heuristic (width, height) of a single line of text."""
    options = options or GeometryConfig()
    size = font_size if font_size and font_size > 0 else options.default_font_size
    return len(content) * size * options.text_width_factor, size * options.text_height_factor


def _anchored_box(
    x: float,
    y: float,
    width: float,
    height: float,
    anchor: Optional[str],
    baseline: Optional[str],
) -> BoundingBox:
    if anchor == "middle":
        left = x - width / 2
    elif anchor == "end":
        left = x - width
    else:
        left = x

    if baseline in _TOP_BASELINES:
        top = y
    elif baseline in _BOTTOM_BASELINES:
        top = y - height
    else:
        top = y - height / 2

    return BoundingBox(left, top, left + width, top + height)


def text_extent(text: Text, options: Optional[GeometryConfig] = None) -> BoundingBox:
    """Heuristic box of a text primitive, aligned by its anchor and baseline."""
    width, height = estimate_text_size(text.text, text.font_size, options)
    return _anchored_box(text.x, text.y, width, height, text.anchor, text.baseline)


def path_points(d: str) -> List[Point]:
    """
    Collect the coordinates named by SVG path data.

    Control points of curves are included and arcs contribute their
    endpoints only, so the result bounds the path loosely. Unparseable data
    yields an empty list.
    """
    points: List[Point] = []
    cur_x = cur_y = 0.0
    start_x = start_y = 0.0
    command: Optional[str] = None
    args: List[float] = []

    for match in _PATH_TOKEN_RE.finditer(d or ""):
        letter, number = match.groups()
        if letter:
            command = letter
            args = []
            if letter in "Zz":
                cur_x, cur_y = start_x, start_y
            continue
        if command is None or command in "Zz":
            continue

        args.append(float(number))
        lower = command.lower()
        if len(args) < _PATH_ARITY[lower]:
            continue

        relative = command.islower()
        base_x, base_y = (cur_x, cur_y) if relative else (0.0, 0.0)
        if lower == "h":
            cur_x = base_x + args[0]
            points.append((cur_x, cur_y))
        elif lower == "v":
            cur_y = base_y + args[0]
            points.append((cur_x, cur_y))
        elif lower == "a":
            cur_x, cur_y = base_x + args[5], base_y + args[6]
            points.append((cur_x, cur_y))
        else:
            pairs = [(base_x + args[i], base_y + args[i + 1]) for i in range(0, len(args), 2)]
            points.extend(pairs)
            cur_x, cur_y = pairs[-1]
            if lower == "m":
                start_x, start_y = cur_x, cur_y
                # Extra pairs after a moveto are implicit linetos
                command = "l" if relative else "L"
        args = []

    return points


def primitive_extent(
    primitive: Primitive, options: Optional[GeometryConfig] = None
) -> Optional[BoundingBox]:
    """Bounding box of one primitive, or None if it has no finite extent."""
    if isinstance(primitive, Rect):
        return BoundingBox.from_points(
            [
                (primitive.x, primitive.y),
                (primitive.x + primitive.width, primitive.y + primitive.height),
            ]
        )
    if isinstance(primitive, (Circle, Arc)):
        r = abs(primitive.r)
        return BoundingBox.from_points(
            [(primitive.cx - r, primitive.cy - r), (primitive.cx + r, primitive.cy + r)]
        )
    if isinstance(primitive, Line):
        return BoundingBox.from_points([(primitive.x1, primitive.y1), (primitive.x2, primitive.y2)])
    if isinstance(primitive, Polyline):
        # Polygon is a Polyline subclass
        return BoundingBox.from_points(primitive.points)
    if isinstance(primitive, Path):
        points = path_points(primitive.d)
        if primitive.transform is not None:
            points = [primitive.transform.apply(x, y) for x, y in points]
        return BoundingBox.from_points(points)
    if isinstance(primitive, Text):
        return text_extent(primitive, options)
    return None


def pin_far_end(pin: Pin) -> Point:
    """
    Body-side end of a pin's lead.

    Explicit path data wins; otherwise walk ``length`` from the connection
    point along the orientation.
    """
    ends = parse_pin_path(pin.path)
    if ends is not None:
        return ends[1]
    length = pin.length if math.isfinite(pin.length) else 0.0
    dx, dy = pin.orientation.direction
    return (pin.x + dx * length, pin.y + dy * length)


def pin_lead_length(pin: Pin) -> float:
    fx, fy = pin_far_end(pin)
    return math.hypot(fx - pin.x, fy - pin.y)


def _rotated_label_box(
    x: float,
    y: float,
    content: str,
    font_size: float,
    anchor: Optional[str],
    rotation: float,
    options: GeometryConfig,
) -> BoundingBox:
    width, height = estimate_text_size(content, font_size, options)
    box = _anchored_box(0.0, 0.0, width, height, anchor, "middle")
    if rotation % 360 == 0:
        return BoundingBox(box.min_x + x, box.min_y + y, box.max_x + x, box.max_y + y)

    rad = math.radians(rotation)
    cos_a, sin_a = math.cos(rad), math.sin(rad)
    return BoundingBox.from_points(
        (x + px * cos_a - py * sin_a, y + px * sin_a + py * cos_a) for px, py in box.corners()
    )


def _is_active_low(pin: Pin) -> bool:
    return pin.shape.startswith("inverted") or "~" in pin.name or "/" in pin.name


def pin_label_extents(pin: Pin, options: Optional[GeometryConfig] = None) -> List[BoundingBox]:
    """
    Heuristic boxes for a pin's name and number labels.

    Explicit label positions are used verbatim. Otherwise the name sits one
    unit beyond the lead's far end and the number sits along the lead, just
    off the line.
    """
    options = options or GeometryConfig()
    boxes: List[BoundingBox] = []
    length = pin.length if math.isfinite(pin.length) else 0.0
    dx, dy = pin.orientation.direction

    if pin.name and pin.show_name:
        label = pin.name_label
        if label is not None:
            boxes.append(
                _rotated_label_box(
                    label.x,
                    label.y,
                    pin.name,
                    label.font_size or options.default_font_size,
                    label.anchor,
                    label.rotation,
                    options,
                )
            )
        else:
            offset = length + PIN_NAME_GAP
            anchor = {
                PinOrientation.RIGHT: "start",
                PinOrientation.LEFT: "end",
                PinOrientation.UP: "end",
                PinOrientation.DOWN: "start",
            }[pin.orientation]
            rotation = 90.0 if pin.orientation.is_vertical else 0.0
            boxes.append(
                _rotated_label_box(
                    pin.x + dx * offset,
                    pin.y + dy * offset,
                    pin.name,
                    options.default_font_size,
                    anchor,
                    rotation,
                    options,
                )
            )

    if pin.number:
        label = pin.number_label
        if label is not None:
            boxes.append(
                _rotated_label_box(
                    label.x,
                    label.y,
                    pin.number,
                    label.font_size or PIN_NUMBER_FONT_SIZE,
                    label.anchor or "middle",
                    label.rotation,
                    options,
                )
            )
        else:
            clearance = BUBBLE_RADIUS * 2 + 0.2 if _is_active_low(pin) else 0.0
            along = length - (clearance + PIN_NUMBER_MARGIN)
            if pin.orientation.is_vertical:
                nx, ny = pin.x - PIN_NUMBER_NUDGE, pin.y + dy * along
            else:
                nx, ny = pin.x + dx * along, pin.y - PIN_NUMBER_NUDGE
            boxes.append(
                _rotated_label_box(nx, ny, pin.number, PIN_NUMBER_FONT_SIZE, "middle", 0.0, options)
            )

    return boxes


def content_bounds(
    graphics: Sequence[Primitive],
    pins: Sequence[Pin],
    include_text: bool = False,
    options: Optional[GeometryConfig] = None,
) -> Optional[BoundingBox]:
    """
    Unpadded union of primitives, pin connection points and pin far ends.

    Converters use this with ``include_text=False`` to size a symbol from its
    drawing alone.
    """
    builder = BoundsBuilder()
    for primitive in graphics:
        if isinstance(primitive, Text) and not include_text:
            continue
        builder.add_box(primitive_extent(primitive, options))
    for pin in pins:
        builder.add_point(pin.x, pin.y)
        builder.add_point(*pin_far_end(pin))
    return builder.build()


def local_bounds(
    symbol: Optional[Symbol], options: Optional[GeometryConfig] = None
) -> Optional[BoundingBox]:
    """
    Padded bounding box of a symbol in its own frame.

    Falls back to the declared width/height placed at ``-origin`` when no
    primitive or pin has a finite extent. Returns None for a missing symbol.
    """
    if symbol is None:
        return None
    options = options or GeometryConfig()

    builder = BoundsBuilder()
    builder.add_box(content_bounds(symbol.graphics, symbol.pins, include_text=True, options=options))
    if options.include_pin_labels:
        for pin in symbol.pins:
            for box in pin_label_extents(pin, options):
                builder.add_box(box)

    box = builder.build()
    if box is None:
        ox, oy = symbol.origin
        box = BoundingBox(-ox, -oy, -ox + symbol.width, -oy + symbol.height)
    return box.expand(options.padding)
