"""
Canonical symbol model shared by every converter and the geometry engine.

Modules:
    primitives: Line, Rect, Circle, Arc, Polyline, Polygon, Path, Text
    model: Pin, Symbol and their enums
"""

from .model import (
    REF_PLACEHOLDER,
    VALUE_PLACEHOLDER,
    LabelPosition,
    Pin,
    PinKind,
    PinOrientation,
    Symbol,
    SymbolSource,
    parse_pin_path,
    placeholder_texts,
    symbol_from_dict,
    symbol_to_dict,
)
from .primitives import (
    DEFAULT_STROKE,
    PRIMITIVE_TYPES,
    Arc,
    Circle,
    Line,
    Path,
    PathTransform,
    Point,
    Polygon,
    Polyline,
    Primitive,
    Rect,
    Style,
    Text,
    primitive_from_dict,
)

__all__ = [
    # Primitives
    "Arc",
    "Circle",
    "Line",
    "Path",
    "PathTransform",
    "Point",
    "Polygon",
    "Polyline",
    "Primitive",
    "Rect",
    "Style",
    "Text",
    "DEFAULT_STROKE",
    "PRIMITIVE_TYPES",
    "primitive_from_dict",
    # Pins and symbols
    "LabelPosition",
    "Pin",
    "PinKind",
    "PinOrientation",
    "Symbol",
    "SymbolSource",
    "parse_pin_path",
    "placeholder_texts",
    "REF_PLACEHOLDER",
    "VALUE_PLACEHOLDER",
    "symbol_from_dict",
    "symbol_to_dict",
]
