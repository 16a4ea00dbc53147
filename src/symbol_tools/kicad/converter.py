"""
KiCad symbol to canonical symbol conversion.

KiCad symbol libraries describe each part as a ``symbol`` node whose
graphics and pins usually live in nested unit symbols:

    (symbol "Device:R"
        (property "Reference" "R" (at 2.032 0 90))
        (property "Value" "R" (at 0 0 90))
        (symbol "R_0_1"
            (rectangle (start -1.016 -2.54) (end 1.016 2.54)
                (stroke (width 0.254) (type default)) (fill (type none))))
        (symbol "R_1_1"
            (pin passive line (at 0 3.81 270) (length 1.27)
                (name "~" (effects (font (size 1.27 1.27))))
                (number "1" (effects (font (size 1.27 1.27)))))))

KiCad's Y axis points up; every Y coordinate is negated on the way in.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..config import KiCadConfig
from ..geometry import content_bounds
from ..sexp import SExp, SExpValue, parse_sexp
from ..symbols import (
    DEFAULT_STROKE,
    Arc,
    Circle,
    Pin,
    PinKind,
    PinOrientation,
    Point,
    Polyline,
    Primitive,
    Rect,
    Style,
    Symbol,
    SymbolSource,
    Text,
    placeholder_texts,
)
from .library import find_symbol_by_exact_name, find_symbol_node, list_symbol_names

logger = logging.getLogger(__name__)

DEFAULT_STROKE_WIDTH = 0.254
BACKGROUND_FILL = "#ffffcc"
OUTLINE_FILL = "currentColor"

# Pin angle -> direction the lead extends from the connection point
KICAD_PIN_ORIENTATIONS = {
    0: PinOrientation.RIGHT,
    90: PinOrientation.UP,
    180: PinOrientation.LEFT,
    270: PinOrientation.DOWN,
}

FILL_TYPES = {
    "none": "none",
    "outline": OUTLINE_FILL,
    "background": BACKGROUND_FILL,
}

# Collinearity threshold for the three-point arc construction
_ARC_EPSILON = 0.0001

# Names listed in the not-found warning
_MAX_LISTED_NAMES = 20


def angle_to_orientation(angle: Optional[float]) -> PinOrientation:
    """Map a KiCad pin angle to an orientation; unknown angles point right."""
    if angle is None or not math.isfinite(angle):
        return PinOrientation.RIGHT
    if float(angle).is_integer():
        return KICAD_PIN_ORIENTATIONS.get(int(angle) % 360, PinOrientation.RIGHT)
    return PinOrientation.RIGHT


def _xy(node: Optional[SExp]) -> Point:
    """Point from ``(tag x y ...)`` with Y flipped into the canonical frame."""
    if node is None:
        return (0.0, 0.0)
    x = node.get_float(0) or 0.0
    y = node.get_float(1) or 0.0
    return (x, -y)


def _parse_stroke(node: Optional[SExp]) -> Tuple[str, float]:
    color = DEFAULT_STROKE
    width = DEFAULT_STROKE_WIDTH
    if node is None:
        return color, width

    if width_node := node.find("width"):
        width = width_node.get_float(0) or DEFAULT_STROKE_WIDTH

    if color_node := node.find("color"):
        rgb = [color_node.get_float(i) for i in range(3)]
        # (color 0 0 0 0) is KiCad's "use the default colour"
        if all(c is not None for c in rgb) and any(rgb):
            r, g, b = (round(c) for c in rgb)
            color = f"rgb({r},{g},{b})"
    return color, width


def _parse_fill(node: Optional[SExp]) -> str:
    if node is None:
        return "none"
    fill_type = node.find("type")
    if fill_type is None:
        return "none"
    return FILL_TYPES.get((fill_type.get_string(0) or "").lower(), "none")


def _style(node: SExp) -> Style:
    stroke, width = _parse_stroke(node.find("stroke"))
    return Style(stroke=stroke, stroke_width=width, fill=_parse_fill(node.find("fill")))


def circle_from_three_points(a: Point, b: Point, c: Point) -> Tuple[float, float, float]:
    """
    Circumscribed circle of three points.

    Collinear points give a unit circle centred on the middle point.

    Returns:
        (cx, cy, r)
    """
    ax, ay = a
    bx, by = b
    cx, cy = c
    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < _ARC_EPSILON:
        return (bx, by, 1.0)

    a_sq = ax * ax + ay * ay
    b_sq = bx * bx + by * by
    c_sq = cx * cx + cy * cy
    ux = (a_sq * (by - cy) + b_sq * (cy - ay) + c_sq * (ay - by)) / d
    uy = (a_sq * (cx - bx) + b_sq * (ax - cx) + c_sq * (bx - ax)) / d
    return (ux, uy, math.hypot(ax - ux, ay - uy))


def _rectangle_from_sexp(node: SExp) -> Optional[Primitive]:
    x1, y1 = _xy(node.find("start"))
    x2, y2 = _xy(node.find("end"))
    return Rect(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1), style=_style(node))


def _polyline_from_sexp(node: SExp) -> Optional[Primitive]:
    pts = node.find("pts")
    if pts is None:
        return None
    points = [_xy(xy) for xy in pts.find_all("xy")]
    if not points:
        return None
    return Polyline(tuple(points), style=_style(node))


def _circle_from_sexp(node: SExp) -> Optional[Primitive]:
    cx, cy = _xy(node.find("center"))
    radius = node.find("radius")
    r = (radius.get_float(0) if radius else None) or 1.0
    return Circle(cx, cy, r, style=_style(node))


def _arc_from_sexp(node: SExp) -> Optional[Primitive]:
    start = _xy(node.find("start"))
    end = _xy(node.find("end"))
    if mid_node := node.find("mid"):
        mid = _xy(mid_node)
    else:
        # Pre-v6 arcs carry (radius (at x y) (length r)) instead of a midpoint
        radius = node.find("radius")
        if radius is None or radius.find("at") is None:
            return None
        cx, cy = _xy(radius.find("at"))
        length = radius.find("length")
        r = (length.get_float(0) if length else None) or 1.0
        return Arc(
            cx,
            cy,
            r,
            math.degrees(math.atan2(start[1] - cy, start[0] - cx)),
            math.degrees(math.atan2(end[1] - cy, end[0] - cx)),
            style=_style(node),
        )

    cx, cy, r = circle_from_three_points(start, mid, end)
    return Arc(
        cx,
        cy,
        r,
        math.degrees(math.atan2(start[1] - cy, start[0] - cx)),
        math.degrees(math.atan2(end[1] - cy, end[0] - cx)),
        style=_style(node),
    )


def _text_from_sexp(node: SExp) -> Optional[Primitive]:
    content = node.get_string(0)
    if not content:
        return None
    x, y = _xy(node.find("at"))
    font_size = 1.27
    anchor = "middle"
    if effects := node.find("effects"):
        font = effects.find("font")
        size = font.find("size") if font else None
        if size is not None:
            font_size = size.get_float(0) or font_size
        if justify := effects.find("justify"):
            atoms = [str(a) for a in justify.get_atoms()]
            if "left" in atoms:
                anchor = "start"
            elif "right" in atoms:
                anchor = "end"
    return Text(x, y, content, font_size=font_size, anchor=anchor, baseline="middle")


GRAPHIC_PARSERS = {
    "rectangle": _rectangle_from_sexp,
    "polyline": _polyline_from_sexp,
    "circle": _circle_from_sexp,
    "arc": _arc_from_sexp,
    "text": _text_from_sexp,
}


def pin_from_sexp(node: SExp, default_length: float = 2.54) -> Pin:
    """
    Parse a ``(pin <kind> <shape> (at x y angle) (length l) (name ..) (number ..))`` node.

    A missing length uses ``default_length``; an explicit zero is kept.
    """
    kind = PinKind.from_string(node.get_string(0) or "passive")
    shape = node.get_string(1) or "line"

    x, y, angle = 0.0, 0.0, 0.0
    if at := node.find("at"):
        x, y = _xy(at)
        angle = at.get_float(2) or 0.0

    length = default_length
    if length_node := node.find("length"):
        value = length_node.get_float(0)
        if value is not None:
            length = value

    name = ""
    if name_node := node.find("name"):
        name = name_node.get_string(0) or ""
    # "~" is KiCad's empty pin name
    if name == "~":
        name = ""

    number = ""
    if number_node := node.find("number"):
        number = number_node.get_string(0) or ""

    return Pin(
        number=number,
        name=name,
        x=x,
        y=y,
        orientation=angle_to_orientation(angle),
        length=length,
        kind=kind,
        shape=shape,
        show_name=not _is_hidden(node),
    )


def _is_hidden(node: SExp) -> bool:
    if "hide" in node.get_atoms():
        return True
    hide = node.find("hide")
    return hide is not None and hide.get_string(0) in (None, "yes")


@dataclass
class _Collected:
    """Graphics, pins and properties gathered while walking a symbol."""

    graphics: List[Primitive] = field(default_factory=list)
    pins: List[Pin] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not self.graphics and not self.pins

    def add_property(self, node: SExp) -> None:
        name = node.get_string(0)
        value = node.get_string(1)
        if not name or not value:
            return
        # First non-empty value wins
        self.properties.setdefault(name, value)

    def collect(self, node: SExp, options: KiCadConfig, recursive: bool = True) -> None:
        for child in node.iter_children():
            if child.tag == "symbol":
                if recursive:
                    self.collect(child, options)
            elif child.tag == "property":
                self.add_property(child)
            elif child.tag == "pin":
                self.pins.append(pin_from_sexp(child, options.default_pin_length))
            elif child.tag in GRAPHIC_PARSERS:
                primitive = GRAPHIC_PARSERS[child.tag](child)
                if primitive is not None:
                    self.graphics.append(primitive)
                else:
                    logger.debug(f"Skipping unusable KiCad {child.tag}")


def dedupe_pins(pins: List[Pin], precision: int = 2) -> List[Pin]:
    """Collapse pins sharing a rounded connection point; the first one is kept."""
    seen: Set[Tuple[float, float]] = set()
    unique: List[Pin] = []
    for pin in pins:
        key = (round(pin.x, precision), round(pin.y, precision))
        if key in seen:
            continue
        seen.add(key)
        unique.append(pin)
    return unique


def _collect_extends(
    node: SExp,
    library: Optional[SExpValue],
    options: KiCadConfig,
    visited: Set[str],
) -> Optional[_Collected]:
    """Collect the body of the parent named by ``(extends "Parent")``."""
    extends = node.find("extends")
    parent_name = extends.get_string(0) if extends else None
    if not parent_name or library is None or parent_name in visited:
        return None
    parent = find_symbol_by_exact_name(library, parent_name)
    if parent is None:
        logger.debug(f"Parent symbol {parent_name!r} not found")
        return None

    visited.add(parent_name)
    collected = _Collected()
    collected.collect(parent, options)
    if collected.empty:
        inherited = _collect_extends(parent, library, options, visited)
        if inherited is not None:
            inherited.properties.update(collected.properties)
            collected = inherited
    return collected


def convert_kicad_symbol(
    node: Optional[SExp],
    library: Optional[SExpValue] = None,
    options: Optional[KiCadConfig] = None,
) -> Optional[Symbol]:
    """
    Convert a KiCad ``symbol`` node into a canonical symbol.

    Args:
        node: The top-level symbol node (see ``find_symbol_node``)
        library: The parsed library, used to resolve ``extends``
        options: Conversion settings

    Returns:
        The normalized symbol, or None when the node has no pins or graphics
    """
    if not isinstance(node, SExp) or node.tag != "symbol":
        return None
    options = options or KiCadConfig()
    full_name = node.get_string(0) or ""

    collected = _Collected()
    collected.collect(node, options)

    if collected.empty:
        # Unit symbols wrapped in unexpected lists
        for descendant in node.walk():
            if descendant.tag == "symbol":
                collected.collect(descendant, options, recursive=False)

    if collected.empty:
        inherited = _collect_extends(node, library, options, {full_name})
        if inherited is not None and not inherited.empty:
            overrides = collected.properties
            collected = inherited
            collected.properties.update(overrides)

    if collected.empty:
        logger.debug(f"KiCad symbol {full_name!r} has no pins or graphics")
        return None

    pins = dedupe_pins(collected.pins, options.dedupe_precision)
    bounds = content_bounds(collected.graphics, pins) or content_bounds(
        collected.graphics, pins, include_text=True
    )
    if bounds is None:
        return None

    dx, dy = -bounds.min_x, -bounds.min_y
    width, height = bounds.width, bounds.height
    graphics = [g.moved(dx, dy) for g in collected.graphics]
    graphics.extend(placeholder_texts(width))

    return Symbol(
        width=width,
        height=height,
        origin=(width / 2, height / 2),
        graphics=tuple(graphics),
        pins=tuple(p.moved(dx, dy) for p in pins),
        properties=collected.properties,
        source=SymbolSource.KICAD,
        name=full_name.split(":")[-1],
    )


def load_kicad_symbol(
    text: str, name: str, options: Optional[KiCadConfig] = None
) -> Optional[Symbol]:
    """
    Parse library text, find ``name`` and convert it.

    Returns:
        The symbol, or None if the text is malformed or the name is not found
    """
    tree = parse_sexp(text)
    if tree is None:
        logger.debug("KiCad library text could not be parsed")
        return None

    node = find_symbol_node(tree, name)
    if node is None:
        available = list_symbol_names(tree)
        shown = ", ".join(available[:_MAX_LISTED_NAMES])
        more = f" (+{len(available) - _MAX_LISTED_NAMES} more)" if len(available) > _MAX_LISTED_NAMES else ""
        logger.warning(f"Symbol {name!r} not found in library. Available: {shown or 'none'}{more}")
        return None

    return convert_kicad_symbol(node, library=tree, options=options)
