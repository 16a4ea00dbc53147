"""
Instance transforms: symbol frame to world frame.

A local point goes through three steps: mirror (negate x), rotate by the
instance rotation, then translate by the instance position.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config import GeometryConfig
from ..symbols import Point, Symbol
from .bounds import BoundingBox, local_bounds

# Exact values for quarter turns so 90/270 rotations swap axes exactly
_QUARTER_TURNS = {0: (1.0, 0.0), 90: (0.0, 1.0), 180: (-1.0, 0.0), 270: (0.0, -1.0)}


def normalize_rotation(degrees: float) -> float:
    """Normalize an angle into [0, 360)."""
    value = float(degrees) % 360.0
    if value == 360.0:
        return 0.0
    return value


def _cos_sin(degrees: float) -> tuple[float, float]:
    value = normalize_rotation(degrees)
    if value.is_integer() and int(value) in _QUARTER_TURNS:
        return _QUARTER_TURNS[int(value)]
    rad = math.radians(value)
    return math.cos(rad), math.sin(rad)


def rotate_point(x: float, y: float, degrees: float) -> Point:
    """Rotate a point about the origin with the standard 2D rotation matrix."""
    cos_a, sin_a = _cos_sin(degrees)
    return (x * cos_a - y * sin_a, x * sin_a + y * cos_a)


@dataclass(frozen=True)
class Placement:
    """Position, rotation (degrees) and mirror flag of a placed symbol."""

    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    mirror: bool = False

    def apply(self, px: float, py: float) -> Point:
        """Map a symbol-frame point to the world frame."""
        if self.mirror:
            px = -px
        rx, ry = rotate_point(px, py, self.rotation)
        return (rx + self.x, ry + self.y)

    def apply_box(self, box: BoundingBox) -> Optional[BoundingBox]:
        """Axis-aligned union of all four transformed corners."""
        return BoundingBox.from_points(self.apply(cx, cy) for cx, cy in box.corners())

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "rotation": self.rotation, "mirror": self.mirror}


def world_bounds(
    symbol: Optional[Symbol],
    placement: Optional[Placement] = None,
    options: Optional[GeometryConfig] = None,
) -> Optional[BoundingBox]:
    """World-frame bounding box of a placed symbol, or None for a missing symbol."""
    box = local_bounds(symbol, options)
    if box is None:
        return None
    return (placement or Placement()).apply_box(box)


def pin_world_position(
    symbol: Optional[Symbol], number: Any, placement: Optional[Placement] = None
) -> Optional[Point]:
    """World position of a pin's connection point, or None if absent."""
    if symbol is None:
        return None
    pin = symbol.get_pin(number)
    if pin is None:
        return None
    return (placement or Placement()).apply(pin.x, pin.y)


def pin_world_positions(
    symbol: Optional[Symbol], placement: Optional[Placement] = None
) -> Dict[str, Point]:
    """World positions of every pin, keyed by pin number (first pin wins)."""
    if symbol is None:
        return {}
    placement = placement or Placement()
    positions: Dict[str, Point] = {}
    for pin in symbol.pins:
        positions.setdefault(pin.number, placement.apply(pin.x, pin.y))
    return positions
