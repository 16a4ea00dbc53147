"""
Graphics primitives for canonical symbols.

Every primitive is an immutable dataclass sharing the symbol's coordinate
frame (millimetres, Y increasing downward). Styling is advisory and never
affects geometry.

``moved(dx, dy, scale)`` returns a copy with ``(coord + d) * scale`` applied
to coordinates and ``* scale`` applied to lengths, radii, font sizes and
stroke widths. Converters use it for bounding-box normalization.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, Union

Point = Tuple[float, float]

DEFAULT_STROKE = "#880000"

_TRANSFORM_RE = re.compile(
    r"translate\(\s*([-+\d.eE]+)\s*[, ]\s*([-+\d.eE]+)\s*\)\s*scale\(\s*([-+\d.eE]+)\s*\)"
)


@dataclass(frozen=True)
class Style:
    """Advisory stroke and fill styling."""

    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    fill: Optional[str] = None

    def scaled(self, scale: float) -> Style:
        if self.stroke_width is None or scale == 1.0:
            return self
        return replace(self, stroke_width=self.stroke_width * scale)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.stroke is not None:
            data["stroke"] = self.stroke
        if self.stroke_width is not None:
            data["strokeWidth"] = self.stroke_width
        if self.fill is not None:
            data["fill"] = self.fill
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Style:
        width = data.get("strokeWidth")
        return cls(
            stroke=data.get("stroke"),
            stroke_width=float(width) if width is not None else None,
            fill=data.get("fill"),
        )


@dataclass(frozen=True)
class PathTransform:
    """
    Render-time additive transform for path data.

    Maps a path point ``p`` to ``translate + scale * p``, matching the SVG
    transform ``translate(tx,ty) scale(s)``.
    """

    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    def apply(self, x: float, y: float) -> Point:
        return (self.translate_x + self.scale * x, self.translate_y + self.scale * y)

    def then(self, dx: float, dy: float, scale: float) -> PathTransform:
        """Compose with a later ``(p + d) * scale`` step."""
        return PathTransform(
            translate_x=(self.translate_x + dx) * scale,
            translate_y=(self.translate_y + dy) * scale,
            scale=self.scale * scale,
        )

    def __str__(self) -> str:
        return f"translate({self.translate_x:.10g},{self.translate_y:.10g}) scale({self.scale:.10g})"

    @classmethod
    def parse(cls, text: str) -> Optional[PathTransform]:
        """Parse a ``translate(x,y) scale(s)`` string."""
        match = _TRANSFORM_RE.search(text or "")
        if not match:
            return None
        tx, ty, s = (float(g) for g in match.groups())
        return cls(tx, ty, s)


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    style: Style = field(default_factory=Style)

    kind: ClassVar[str] = "line"

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> Line:
        return Line(
            (self.x1 + dx) * scale,
            (self.y1 + dy) * scale,
            (self.x2 + dx) * scale,
            (self.y2 + dy) * scale,
            style=self.style.scaled(scale),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2, **self.style.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Line:
        return cls(
            float(data["x1"]), float(data["y1"]), float(data["x2"]), float(data["y2"]),
            style=Style.from_dict(data),
        )


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle from its top-left corner, with optional corner radii."""

    x: float
    y: float
    width: float
    height: float
    rx: float = 0.0
    ry: float = 0.0
    style: Style = field(default_factory=Style)

    kind: ClassVar[str] = "rect"

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> Rect:
        return Rect(
            (self.x + dx) * scale,
            (self.y + dy) * scale,
            self.width * scale,
            self.height * scale,
            rx=self.rx * scale,
            ry=self.ry * scale,
            style=self.style.scaled(scale),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.kind, "x": self.x, "y": self.y, "width": self.width, "height": self.height}
        if self.rx or self.ry:
            data["rx"] = self.rx
            data["ry"] = self.ry
        return {**data, **self.style.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Rect:
        return cls(
            float(data["x"]),
            float(data["y"]),
            float(data["width"]),
            float(data["height"]),
            rx=float(data.get("rx") or 0.0),
            ry=float(data.get("ry") or 0.0),
            style=Style.from_dict(data),
        )


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    style: Style = field(default_factory=Style)

    kind: ClassVar[str] = "circle"

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> Circle:
        return Circle((self.cx + dx) * scale, (self.cy + dy) * scale, self.r * scale, style=self.style.scaled(scale))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "cx": self.cx, "cy": self.cy, "r": self.r, **self.style.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Circle:
        return cls(float(data["cx"]), float(data["cy"]), float(data["r"]), style=Style.from_dict(data))


@dataclass(frozen=True)
class Arc:
    """Circular arc; angles are in degrees, measured in the symbol frame."""

    cx: float
    cy: float
    r: float
    start_angle: float
    end_angle: float
    style: Style = field(default_factory=Style)

    kind: ClassVar[str] = "arc"

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> Arc:
        return replace(
            self,
            cx=(self.cx + dx) * scale,
            cy=(self.cy + dy) * scale,
            r=self.r * scale,
            style=self.style.scaled(scale),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "cx": self.cx,
            "cy": self.cy,
            "r": self.r,
            "startAngle": self.start_angle,
            "endAngle": self.end_angle,
            **self.style.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Arc:
        return cls(
            float(data["cx"]),
            float(data["cy"]),
            float(data["r"]),
            float(data.get("startAngle", 0.0)),
            float(data.get("endAngle", 360.0)),
            style=Style.from_dict(data),
        )


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]
    style: Style = field(default_factory=Style)

    kind: ClassVar[str] = "polyline"

    def __post_init__(self):
        object.__setattr__(self, "points", tuple((float(x), float(y)) for x, y in self.points))

    def moved(self, dx: float, dy: float, scale: float = 1.0):
        points = tuple(((x + dx) * scale, (y + dy) * scale) for x, y in self.points)
        return type(self)(points, style=self.style.scaled(scale))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "points": [list(p) for p in self.points], **self.style.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return cls(tuple((p[0], p[1]) for p in data.get("points", [])), style=Style.from_dict(data))


@dataclass(frozen=True)
class Polygon(Polyline):
    """Closed polyline; the last point connects back to the first."""

    kind: ClassVar[str] = "polygon"


@dataclass(frozen=True)
class Path:
    """
    Raw SVG path data.

    The path string is never rewritten. Normalization composes an additive
    ``transform`` that renderers apply to the data instead.
    """

    d: str
    transform: Optional[PathTransform] = None
    style: Style = field(default_factory=Style)

    kind: ClassVar[str] = "path"

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> Path:
        base = self.transform or PathTransform()
        # Stroke width stays in path units; the transform scales it at render time
        return replace(self, transform=base.then(dx, dy, scale))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind, "d": self.d}
        if self.transform is not None:
            data["transform"] = str(self.transform)
        return {**data, **self.style.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Path:
        transform = data.get("transform")
        return cls(
            str(data.get("d", "")),
            transform=PathTransform.parse(transform) if transform else None,
            style=Style.from_dict(data),
        )


@dataclass(frozen=True)
class Text:
    """
    Text label. ``anchor`` is start|middle|end; ``baseline`` is middle or an
    edge-aligned variant (top/hanging, bottom/alphabetic).
    """

    x: float
    y: float
    text: str
    font_size: float = 1.27
    anchor: str = "start"
    baseline: str = "middle"
    style: Style = field(default_factory=Style)

    kind: ClassVar[str] = "text"

    def moved(self, dx: float, dy: float, scale: float = 1.0) -> Text:
        return replace(
            self,
            x=(self.x + dx) * scale,
            y=(self.y + dy) * scale,
            font_size=self.font_size * scale,
            style=self.style.scaled(scale),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "x": self.x,
            "y": self.y,
            "text": self.text,
            "fontSize": self.font_size,
            "anchor": self.anchor,
            "baseline": self.baseline,
            **self.style.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Text:
        return cls(
            float(data["x"]),
            float(data["y"]),
            str(data.get("text", "")),
            font_size=float(data.get("fontSize") or 1.27),
            anchor=data.get("anchor") or "start",
            baseline=data.get("baseline") or "middle",
            style=Style.from_dict(data),
        )


Primitive = Union[Line, Rect, Circle, Arc, Polyline, Polygon, Path, Text]

PRIMITIVE_TYPES: Dict[str, Type] = {
    cls.kind: cls for cls in (Line, Rect, Circle, Arc, Polyline, Polygon, Path, Text)
}


def primitive_from_dict(data: Dict[str, Any]) -> Primitive:
    """
    Build a primitive from its JSON form.

    Raises:
        ValueError: If the type tag is unknown
        KeyError: If a required field is missing
    """
    kind = data.get("type")
    cls = PRIMITIVE_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown primitive type: {kind!r}")
    return cls.from_dict(data)
