"""
Generic fallback symbols for parts with no usable drawing.

The shape is chosen from the part's category (resistor, capacitor, ...) and
its pin count. The pin count comes from the footprint pads when known, else
from the first number in the package name (``SOIC-8`` -> 8).
"""

from __future__ import annotations

import logging
import math
import re
from typing import List, Optional, Sequence

from ..easyeda.shapes import number
from ..symbols import (
    DEFAULT_STROKE,
    Line,
    Pin,
    PinKind,
    PinOrientation,
    Polygon,
    Polyline,
    Rect,
    Style,
    Symbol,
    SymbolSource,
)

logger = logging.getLogger(__name__)

PIN_SPACING = 2.54
DEFAULT_IC_PIN_COUNT = 8

_STROKE = Style(stroke=DEFAULT_STROKE, stroke_width=0.254)
_OUTLINE = Style(stroke=DEFAULT_STROKE, stroke_width=0.254, fill="none")
_FIRST_INTEGER_RE = re.compile(r"(\d+)")

L, R, U, D = PinOrientation.LEFT, PinOrientation.RIGHT, PinOrientation.UP, PinOrientation.DOWN


def _pin(num: str, name: str, x: float, y: float, orientation: PinOrientation, length: float,
         kind: PinKind = PinKind.PASSIVE) -> Pin:
    return Pin(num, name, x, y, orientation, length, kind=kind)


def _generic(width: float, height: float, graphics, pins) -> Symbol:
    return Symbol(
        width=width,
        height=height,
        origin=(width / 2, height / 2),
        graphics=tuple(graphics),
        pins=tuple(pins),
        source=SymbolSource.GENERIC,
    )


def _package_pin_count(package: Optional[str]) -> Optional[int]:
    match = _FIRST_INTEGER_RE.search((package or "").upper())
    return int(match.group(1)) if match else None


def estimate_pin_count(
    package: Optional[str] = None, footprint_shapes: Optional[Sequence[str]] = None
) -> int:
    """
    Estimate how many pins a part has.

    Args:
        package: Package name, e.g. "SOIC-8" or "0603"
        footprint_shapes: EasyEDA footprint shape strings; ``PAD~`` entries
            are counted by distinct position

    Returns:
        Pin count, or 0 if nothing indicates one
    """
    if footprint_shapes:
        pads = set()
        for shape in footprint_shapes:
            if not isinstance(shape, str) or not shape.startswith("PAD~"):
                continue
            parts = shape.split("~")
            if len(parts) < 6:
                continue
            x, y = number(parts[2]), number(parts[3])
            if x is None or y is None:
                continue
            pads.add((f"{x:.2f}", f"{y:.2f}"))
        if pads:
            return len(pads)

    return _package_pin_count(package) or 0


def resistor_symbol() -> Symbol:
    return _generic(
        10,
        3,
        [Rect(2.5, 0.5, 5, 2, style=_OUTLINE)],
        [_pin("1", "1", 0, 1.5, R, 2.5), _pin("2", "2", 10, 1.5, L, 2.5)],
    )


def capacitor_symbol() -> Symbol:
    return _generic(
        6,
        6,
        [Line(2.5, 1, 2.5, 5, style=_STROKE), Line(3.5, 1, 3.5, 5, style=_STROKE)],
        [_pin("1", "1", 0, 3, R, 2.5), _pin("2", "2", 6, 3, L, 2.5)],
    )


def inductor_symbol() -> Symbol:
    coil = [(2.5, 2), (3.5, 0.5), (4.5, 2), (5.5, 0.5), (6.5, 2), (7.5, 0.5), (8.5, 2)]
    return _generic(
        10,
        4,
        [Polyline(coil, style=_OUTLINE)],
        [_pin("1", "1", 0, 2, R, 2.5), _pin("2", "2", 10, 2, L, 2.5)],
    )


def diode_symbol() -> Symbol:
    return _generic(
        10,
        4,
        [
            Polygon([(3.5, 0.5), (3.5, 3.5), (6.5, 2)], style=_OUTLINE),
            Line(6.5, 0.5, 6.5, 3.5, style=_STROKE),
        ],
        [_pin("1", "K", 0, 2, R, 3.5), _pin("2", "A", 10, 2, L, 3.5)],
    )


def led_symbol() -> Symbol:
    arrow = Style(stroke=DEFAULT_STROKE, stroke_width=0.15)
    return _generic(
        10,
        5,
        [
            Polygon([(3.5, 0.5), (3.5, 4.5), (6.5, 2.5)], style=_OUTLINE),
            Line(6.5, 0.5, 6.5, 4.5, style=_STROKE),
            Line(5.5, 0, 7, -1, style=arrow),
            Line(6.5, 0, 8, -1, style=arrow),
        ],
        [_pin("1", "K", 0, 2.5, R, 3.5), _pin("2", "A", 10, 2.5, L, 3.5)],
    )


def transistor_symbol() -> Symbol:
    return _generic(
        8,
        10,
        [
            Line(3, 3, 3, 7, style=_STROKE),
            Line(3, 4, 6, 2, style=_STROKE),
            Line(3, 6, 6, 8, style=_STROKE),
        ],
        [
            _pin("1", "B", 0, 5, R, 3, kind=PinKind.INPUT),
            _pin("2", "C", 6, 0, D, 2),
            _pin("3", "E", 6, 10, U, 2),
        ],
    )


def switch_3pin_symbol() -> Symbol:
    return _generic(
        10,
        8,
        [Line(2, 4, 8, 2, style=_STROKE), Line(8, 2, 8, 6, style=_STROKE)],
        [_pin("1", "1", 0, 4, R, 2), _pin("2", "2", 10, 2, L, 2), _pin("3", "3", 10, 6, L, 2)],
    )


def inline_symbol(pin_count: int) -> Symbol:
    """Narrow box with every pin on the left edge, for 1-4 pin parts."""
    body_width = 6
    height = max(6, (pin_count - 1) * PIN_SPACING + 2)
    pins = [
        _pin(str(i + 1), str(i + 1), 0, height / (pin_count + 1) * (i + 1), R, 2)
        for i in range(pin_count)
    ]
    return _generic(body_width + 4, height, [Rect(2, 0, body_width, height, style=_OUTLINE)], pins)


def ic_symbol(pin_count: int) -> Symbol:
    """
    Dual-sided IC box.

    Pins 1..ceil(n/2) run down the left edge; the rest run back up the right
    edge, so pin n sits opposite pin 1.
    """
    pins_per_side = math.ceil(pin_count / 2)
    body_height = (pins_per_side + 1) * PIN_SPACING
    body_width = 10
    width = body_width + 10

    pins: List[Pin] = []
    for i in range(pins_per_side):
        if i * 2 >= pin_count:
            break
        y = 2 + PIN_SPACING * (i + 1)
        pins.append(_pin(str(i + 1), str(i + 1), 0, y, R, 5))
    for i in range(pins_per_side):
        if pins_per_side + i >= pin_count:
            break
        y = 2 + PIN_SPACING * (i + 1)
        num = str(pin_count - i)
        pins.append(_pin(num, num, width, y, L, 5))

    return _generic(
        width,
        body_height + 4,
        [Rect(5, 2, body_width, body_height, style=_OUTLINE)],
        pins,
    )


def create_generic_symbol(
    category: Optional[str] = None,
    package: Optional[str] = None,
    footprint_shapes: Optional[Sequence[str]] = None,
) -> Symbol:
    """
    Pick a generic symbol for a part.

    Args:
        category: Supplier category, matched by keyword ("Resistors", "LED Indicators", ...)
        package: Package name
        footprint_shapes: EasyEDA footprint shapes used to count pads

    Returns:
        A symbol with source ``Generic``
    """
    category = (category or "").lower()
    pin_count = estimate_pin_count(package, footprint_shapes)

    if "resistor" in category:
        return resistor_symbol()
    if "capacitor" in category:
        return capacitor_symbol()
    if "inductor" in category:
        return inductor_symbol()
    if "diode" in category:
        return diode_symbol()
    if "led" in category:
        return led_symbol()
    if "transistor" in category:
        return transistor_symbol()
    if ("switch" in category or "button" in category) and pin_count == 3:
        return switch_3pin_symbol()

    if 0 < pin_count <= 4:
        return inline_symbol(pin_count)
    if pin_count <= 0:
        logger.debug(f"No pin count for package {package!r}; using {DEFAULT_IC_PIN_COUNT}")
        pin_count = DEFAULT_IC_PIN_COUNT
    return ic_symbol(pin_count)
