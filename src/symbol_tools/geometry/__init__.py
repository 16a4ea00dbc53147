"""
Geometry and transform engine for canonical symbols.

Geometry functions never raise on missing data: a None symbol yields a None
box or position.

Example::

    from symbol_tools.geometry import Placement, local_bounds, world_bounds

    box = local_bounds(symbol)
    placed = world_bounds(symbol, Placement(x=50, y=20, rotation=90))
"""

from .bounds import (
    BoundingBox,
    BoundsBuilder,
    content_bounds,
    estimate_text_size,
    local_bounds,
    path_points,
    pin_far_end,
    pin_label_extents,
    pin_lead_length,
    primitive_extent,
    text_extent,
)
from .transform import (
    Placement,
    normalize_rotation,
    pin_world_position,
    pin_world_positions,
    rotate_point,
    world_bounds,
)

__all__ = [
    "BoundingBox",
    "BoundsBuilder",
    "Placement",
    "content_bounds",
    "estimate_text_size",
    "local_bounds",
    "normalize_rotation",
    "path_points",
    "pin_far_end",
    "pin_label_extents",
    "pin_lead_length",
    "pin_world_position",
    "pin_world_positions",
    "primitive_extent",
    "rotate_point",
    "text_extent",
    "world_bounds",
]
