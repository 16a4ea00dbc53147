"""
Placed component instances.

An instance binds a shared, read-only definition to its own position,
rotation, mirror flag, reference, value and properties.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..config import GeometryConfig
from ..geometry import (
    BoundingBox,
    Placement,
    normalize_rotation,
    pin_world_position,
    pin_world_positions,
    world_bounds,
)
from ..symbols import REF_PLACEHOLDER, VALUE_PLACEHOLDER, Pin, Point, Symbol
from .definition import ComponentDefinition


def _new_id() -> str:
    return f"component_{uuid.uuid4().hex[:12]}"


@dataclass
class ComponentInstance:
    """
    A component placed in the world frame.

    Attributes:
        definition: Shared definition (not owned)
        x, y: World position of the symbol frame's (0, 0)
        rotation: Degrees, kept in [0, 360)
        mirror: Negate local X before rotating
        reference: Reference designator, e.g. "R1"
        value: Value text, e.g. "10k"
        properties: Instance properties layered over the definition defaults
        id: Unique instance id
    """

    definition: ComponentDefinition
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    mirror: bool = False
    reference: str = ""
    value: str = ""
    properties: Dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        self.rotation = normalize_rotation(self.rotation)
        if not self.reference:
            self.reference = self.definition.default_reference or "U?"
        if not self.value:
            self.value = self.definition.default_value or self.definition.name
        self.properties = {**self.definition.default_properties, **self.properties}

    @classmethod
    def create(cls, definition: ComponentDefinition, **options: Any) -> ComponentInstance:
        """
        Create an instance from keyword options.

        Unknown options are ignored; ``None`` values fall back to defaults.
        """
        known = {"x", "y", "rotation", "mirror", "reference", "value", "properties", "id"}
        kwargs = {k: v for k, v in options.items() if k in known and v is not None}
        return cls(definition, **kwargs)

    @property
    def symbol(self) -> Symbol:
        return self.definition.symbol

    @property
    def placement(self) -> Placement:
        return Placement(self.x, self.y, self.rotation, self.mirror)

    def set_position(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def set_rotation(self, degrees: float) -> None:
        self.rotation = normalize_rotation(degrees)

    def rotate(self, step: float = 90) -> None:
        """Rotate by ``step`` degrees (clockwise on screen with Y down)."""
        self.rotation = normalize_rotation(self.rotation + step)

    def set_mirror(self, mirror: bool) -> None:
        self.mirror = bool(mirror)

    def toggle_mirror(self) -> None:
        self.mirror = not self.mirror

    def get_pin(self, number: Any) -> Optional[Pin]:
        return self.symbol.get_pin(number)

    def pin_position(self, number: Any) -> Optional[Point]:
        """World position of a pin's connection point, or None if it doesn't exist."""
        return pin_world_position(self.symbol, number, self.placement)

    def pin_positions(self) -> Dict[str, Point]:
        return pin_world_positions(self.symbol, self.placement)

    def world_bounds(self, options: Optional[GeometryConfig] = None) -> Optional[BoundingBox]:
        return world_bounds(self.symbol, self.placement, options)

    def resolve_text(self, text: str) -> str:
        """Substitute the reference and value placeholders."""
        return text.replace(REF_PLACEHOLDER, self.reference).replace(VALUE_PLACEHOLDER, self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "definition": self.definition.name,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "mirror": self.mirror,
            "reference": self.reference,
            "value": self.value,
            "properties": dict(self.properties),
        }
