"""
Canonical symbol model: pins and symbols.

A Symbol is the format-agnostic drawing of a component. All of its
primitives and pins share one coordinate frame in millimetres with the Y axis
increasing downward. Symbols are immutable and may be shared by any number
of component instances.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .primitives import Point, Primitive, Text, primitive_from_dict

_NUM = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"

_PIN_PATH_RE = re.compile(
    rf"^\s*[Mm]\s*({_NUM})\s*[ ,]?\s*({_NUM})\s*"
    rf"(?:([hHvV])\s*({_NUM})|([Ll])\s*({_NUM})\s*[ ,]?\s*({_NUM}))"
)


class SymbolSource(Enum):
    """Provenance tag recording which converter produced a symbol."""

    BUILTIN = "Built-in"
    EASYEDA = "EasyEDA"
    KICAD = "KiCad"
    GENERIC = "Generic"

    @classmethod
    def from_string(cls, value: Optional[str]) -> SymbolSource:
        for member in cls:
            if value and member.value.lower() == str(value).lower():
                return member
        return cls.BUILTIN


class PinOrientation(Enum):
    """Direction the pin's lead line extends away from its connection point."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @property
    def direction(self) -> Point:
        """Unit vector in the symbol frame (Y down)."""
        return _DIRECTIONS[self]

    @property
    def is_vertical(self) -> bool:
        return self in (PinOrientation.UP, PinOrientation.DOWN)

    @classmethod
    def from_string(cls, value: Optional[str]) -> PinOrientation:
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.RIGHT

    @classmethod
    def from_delta(cls, dx: float, dy: float) -> PinOrientation:
        """Orientation of the dominant axis of a lead vector."""
        if abs(dx) >= abs(dy):
            return cls.RIGHT if dx >= 0 else cls.LEFT
        return cls.DOWN if dy >= 0 else cls.UP


_DIRECTIONS = {
    PinOrientation.RIGHT: (1.0, 0.0),
    PinOrientation.LEFT: (-1.0, 0.0),
    PinOrientation.UP: (0.0, -1.0),
    PinOrientation.DOWN: (0.0, 1.0),
}


class PinKind(Enum):
    """Electrical pin type. Advisory only; geometry ignores it."""

    PASSIVE = "passive"
    INPUT = "input"
    OUTPUT = "output"
    BIDIRECTIONAL = "bidirectional"
    POWER_IN = "power_in"
    POWER_OUT = "power_out"
    TRI_STATE = "tri_state"
    OPEN_COLLECTOR = "open_collector"
    OPEN_EMITTER = "open_emitter"
    FREE = "free"
    NO_CONNECT = "no_connect"
    UNSPECIFIED = "unspecified"

    @classmethod
    def from_string(cls, value: Optional[str]) -> PinKind:
        if value is None:
            return cls.PASSIVE
        try:
            return cls(str(value).lower().replace("-", "_"))
        except ValueError:
            return cls.UNSPECIFIED


def parse_pin_path(d: Optional[str]) -> Optional[Tuple[Point, Point]]:
    """
    Parse a pin lead path into its two endpoints.

    Understands a leading ``M x y`` followed by ``h dx``, ``v dy`` or
    ``L x y``. Upper-case H/V/L are absolute and lower-case are relative,
    as in SVG.

    Returns:
        ((x1, y1), (x2, y2)) or None when the path does not match
    """
    if not d:
        return None
    match = _PIN_PATH_RE.match(d)
    if not match:
        return None

    x1, y1 = float(match.group(1)), float(match.group(2))
    command = match.group(3)
    if command:
        value = float(match.group(4))
        if command == "h":
            return (x1, y1), (x1 + value, y1)
        if command == "H":
            return (x1, y1), (value, y1)
        if command == "v":
            return (x1, y1), (x1, y1 + value)
        return (x1, y1), (x1, value)

    x2, y2 = float(match.group(6)), float(match.group(7))
    if match.group(5) == "l":
        return (x1, y1), (x1 + x2, y1 + y2)
    return (x1, y1), (x2, y2)


@dataclass(frozen=True)
class LabelPosition:
    """Explicit placement of a pin name or number label."""

    x: float
    y: float
    anchor: Optional[str] = None
    rotation: float = 0.0
    font_size: Optional[float] = None
    font_family: Optional[str] = None

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> LabelPosition:
        return replace(
            self,
            x=(self.x + dx) * scale,
            y=(self.y + dy) * scale,
            font_size=self.font_size * scale if self.font_size is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"x": self.x, "y": self.y, "rotation": self.rotation}
        if self.anchor:
            data["anchor"] = self.anchor
        if self.font_size is not None:
            data["fontSize"] = self.font_size
        if self.font_family:
            data["fontFamily"] = self.font_family
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[LabelPosition]:
        if not data:
            return None
        font_size = data.get("fontSize")
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            anchor=data.get("anchor"),
            rotation=float(data.get("rotation") or 0.0),
            font_size=float(font_size) if font_size is not None else None,
            font_family=data.get("fontFamily"),
        )


@dataclass(frozen=True)
class Pin:
    """
    A connection point with a lead line.

    ``(x, y)`` is where wires attach. The lead runs ``length`` units from there
    in the ``orientation`` direction, unless ``path`` is given, in which case
    the path's endpoint is the far end.
    """

    number: str
    name: str
    x: float
    y: float
    orientation: PinOrientation = PinOrientation.RIGHT
    length: float = 0.0
    kind: PinKind = PinKind.PASSIVE
    shape: str = "line"
    path: Optional[str] = None
    name_label: Optional[LabelPosition] = None
    number_label: Optional[LabelPosition] = None
    show_name: bool = True

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> Pin:
        path = self.path
        if path is not None:
            ends = parse_pin_path(path)
            if ends is None:
                # Unparseable data cannot follow the new frame
                path = None
            else:
                (ax, ay), (bx, by) = ends
                path = (
                    f"M {(ax + dx) * scale:.10g} {(ay + dy) * scale:.10g} "
                    f"L {(bx + dx) * scale:.10g} {(by + dy) * scale:.10g}"
                )
        return replace(
            self,
            x=(self.x + dx) * scale,
            y=(self.y + dy) * scale,
            length=self.length * scale,
            path=path,
            name_label=self.name_label.moved(dx, dy, scale) if self.name_label else None,
            number_label=self.number_label.moved(dx, dy, scale) if self.number_label else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "number": self.number,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "orientation": self.orientation.value,
            "length": self.length,
            "type": self.kind.value,
            "shape": self.shape,
        }
        if self.path:
            data["path"] = self.path
        if self.name_label:
            data["namePos"] = self.name_label.to_dict()
        if self.number_label:
            data["numberPos"] = self.number_label.to_dict()
        if not self.show_name:
            data["showName"] = False
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Pin:
        length = data.get("length")
        return cls(
            number=str(data.get("number", "")),
            name=str(data.get("name", "")),
            x=float(data["x"]),
            y=float(data["y"]),
            orientation=PinOrientation.from_string(data.get("orientation")),
            length=float(length) if length is not None else 0.0,
            kind=PinKind.from_string(data.get("type") or data.get("pinType")),
            shape=data.get("shape") or "line",
            path=data.get("path"),
            name_label=LabelPosition.from_dict(data.get("namePos")),
            number_label=LabelPosition.from_dict(data.get("numberPos")),
            show_name=data.get("showName", True) is not False,
        )


@dataclass(frozen=True)
class Symbol:
    """
    Canonical symbol.

    Attributes:
        width: Extent of the drawing along X, in mm
        height: Extent of the drawing along Y, in mm
        origin: Reference offset within the frame
        graphics: Ordered drawing primitives
        pins: Ordered pins
        properties: Named properties such as "Footprint" or "Value"
        source: Which converter produced the symbol
        name: Symbol name as known to its source
    """

    width: float = 0.0
    height: float = 0.0
    origin: Point = (0.0, 0.0)
    graphics: Tuple[Primitive, ...] = ()
    pins: Tuple[Pin, ...] = ()
    properties: Mapping[str, str] = field(default_factory=dict, hash=False)
    source: SymbolSource = SymbolSource.BUILTIN
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "graphics", tuple(self.graphics))
        object.__setattr__(self, "pins", tuple(self.pins))
        object.__setattr__(self, "origin", (float(self.origin[0]), float(self.origin[1])))
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def pin_count(self) -> int:
        return len(self.pins)

    def get_pin(self, number: Any) -> Optional[Pin]:
        """Find a pin by number; numbers compare as strings."""
        wanted = str(number)
        for pin in self.pins:
            if pin.number == wanted:
                return pin
        return None

    def pins_by_name(self, name: str) -> List[Pin]:
        return [pin for pin in self.pins if pin.name == name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-compatible symbol layout."""
        return {
            "name": self.name,
            "source": self.source.value,
            "width": self.width,
            "height": self.height,
            "origin": {"x": self.origin[0], "y": self.origin[1]},
            "graphics": [g.to_dict() for g in self.graphics],
            "pins": [p.to_dict() for p in self.pins],
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Symbol:
        """
        Create from the JSON layout produced by ``to_dict``.

        Raises:
            ValueError, KeyError, TypeError: If the data is malformed
        """
        origin = data.get("origin") or {}
        width = float(data.get("width") or 0.0)
        height = float(data.get("height") or 0.0)
        symbol = cls(
            width=width,
            height=height,
            origin=(float(origin.get("x", width / 2)), float(origin.get("y", height / 2))),
            graphics=tuple(primitive_from_dict(g) for g in data.get("graphics", [])),
            pins=tuple(Pin.from_dict(p) for p in data.get("pins", [])),
            properties={str(k): str(v) for k, v in (data.get("properties") or {}).items()},
            source=SymbolSource.from_string(data.get("source")),
            name=str(data.get("name", "")),
        )
        if not (math.isfinite(symbol.width) and math.isfinite(symbol.height)):
            raise ValueError("Symbol width and height must be finite")
        return symbol


def symbol_to_dict(symbol: Symbol) -> Dict[str, Any]:
    return symbol.to_dict()


def symbol_from_dict(data: Dict[str, Any]) -> Symbol:
    return Symbol.from_dict(data)


REF_PLACEHOLDER = "${REF}"
VALUE_PLACEHOLDER = "${VALUE}"


def placeholder_texts(width: float) -> List[Text]:
    """Reference and value placeholders just right of a symbol's top edge."""
    return [
        Text(width + 1, -1, REF_PLACEHOLDER, font_size=1.5, anchor="start", baseline="middle"),
        Text(width + 1, 1.5, VALUE_PLACEHOLDER, font_size=1.3, anchor="start", baseline="middle"),
    ]
