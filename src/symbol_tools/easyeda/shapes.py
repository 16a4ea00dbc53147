"""
Parsers for individual EasyEDA schematic shape strings.

Shape strings are ``~``-separated fields led by a type code, e.g.::

    L~0~0~10~0~#880000~1~0~none~gge12~0
    R~-20~-15~2~2~40~30~#880000~1~0~none~gge3~0
    P~show~0~1~360~290~180~gge5~0^^360~290^^M 360 290 h -10~#880000^^1~348~293~0~1~end~~~#0000FF^^...

Coordinates are returned in source units; the converter normalizes them.
Malformed shapes return None so one bad entry never spoils a whole symbol.
"""

from __future__ import annotations

import logging
import math
import re
from typing import List, Optional, Tuple

from ..symbols import (
    DEFAULT_STROKE,
    Circle,
    LabelPosition,
    Line,
    Path,
    Pin,
    PinKind,
    PinOrientation,
    Polygon,
    Polyline,
    Primitive,
    Rect,
    Style,
    parse_pin_path,
)

logger = logging.getLogger(__name__)

DEFAULT_STROKE_WIDTH = 1.0
DEFAULT_LABEL_FONT_SIZE = 7.0

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_PIN_RE = re.compile(r"^(P|PIN)~", re.IGNORECASE)
_DIGITS_RE = re.compile(r"^\d+$")
# Drawing command that follows the leading moveto of a lead path
_LEAD_COMMAND_RE = re.compile(r"^\s*M\s*[-+.\d]+\s*[ ,]?\s*[-+.\d]+\s*([HVL])", re.IGNORECASE)

# EasyEDA pin rotation: the angle names the side the lead points from
_ANGLE_ORIENTATION = {
    0: PinOrientation.LEFT,
    90: PinOrientation.DOWN,
    180: PinOrientation.RIGHT,
    270: PinOrientation.UP,
}


def number(value: Optional[str]) -> Optional[float]:
    """Parse a finite number field; empty or non-numeric fields give None."""
    if value is None:
        return None
    text = str(value).strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    result = float(text)
    return result if math.isfinite(result) else None


def _field(parts: List[str], index: int) -> str:
    return parts[index].strip() if index < len(parts) else ""


def _number_at(parts: List[str], index: int) -> Optional[float]:
    return number(parts[index]) if index < len(parts) else None


def _numbers(parts: List[str], *indices: int) -> Optional[Tuple[float, ...]]:
    values = tuple(_number_at(parts, i) for i in indices)
    if any(v is None for v in values):
        return None
    return values  # type: ignore[return-value]


def _style(parts: List[str], fill: Optional[str] = None) -> Style:
    """Stroke color is the first '#' field; stroke width follows it."""
    color_index = next((i for i, part in enumerate(parts) if part.startswith("#")), -1)
    stroke = parts[color_index] if color_index >= 0 else DEFAULT_STROKE
    width = number(parts[color_index + 1]) if 0 <= color_index < len(parts) - 1 else None
    return Style(
        stroke=stroke,
        stroke_width=width if width is not None else DEFAULT_STROKE_WIDTH,
        fill=fill,
    )


def _point_list(field: str, minimum: int) -> Optional[List[Tuple[float, float]]]:
    tokens = field.replace(",", " ").split()
    if len(tokens) < minimum:
        return None
    coords = [number(t) for t in tokens]
    if any(c is None for c in coords):
        return None
    return [(coords[i], coords[i + 1]) for i in range(0, len(coords) - 1, 2)]  # type: ignore[misc]


def is_pin_shape(shape: str) -> bool:
    return bool(_PIN_RE.match(shape))


def parse_shape(shape: str) -> Optional[Primitive]:
    """
    Parse one graphic shape string.

    Supported codes: PL polyline, PG polygon, L line, R rectangle (4- or
    6-field), C circle, E ellipse (as a circle of the larger radius), PT
    path and A arc path. Returns None for unknown codes or bad numbers.
    """
    if not isinstance(shape, str) or not shape:
        return None
    parts = shape.split("~")
    code = parts[0]

    if code in ("PL", "PG"):
        points = _point_list(_field(parts, 1), 4 if code == "PL" else 6)
        if points is None:
            return None
        if code == "PL":
            return Polyline(tuple(points), style=_style(parts, fill="none"))
        return Polygon(tuple(points), style=_style(parts, fill=_field(parts, 5) or "none"))

    if code == "L":
        values = _numbers(parts, 1, 2, 3, 4)
        if values is None:
            return None
        return Line(*values, style=_style(parts))

    if code == "R":
        # R~x~y~rx~ry~width~height (rounded) or R~x~y~width~height (legacy)
        values = _numbers(parts, 1, 2)
        w1, h1, w2, h2 = (_number_at(parts, i) for i in (3, 4, 5, 6))
        width = w2 if w2 is not None else w1
        height = h2 if h2 is not None else h1
        if values is None or width is None or height is None:
            return None
        rx = w1 if w2 is not None and w1 is not None else 0.0
        ry = h1 if h2 is not None and h1 is not None else 0.0
        return Rect(values[0], values[1], width, height, rx=rx, ry=ry, style=_style(parts, fill="none"))

    if code == "C":
        values = _numbers(parts, 1, 2, 3)
        if values is None:
            return None
        return Circle(*values, style=_style(parts, fill="none"))

    if code == "E":
        values = _numbers(parts, 1, 2, 3, 4)
        if values is None:
            return None
        cx, cy, rx, ry = values
        return Circle(cx, cy, max(rx, ry), style=_style(parts, fill="none"))

    if code in ("PT", "A"):
        d = _field(parts, 1)
        if not d:
            return None
        fill = _field(parts, 5) if code == "PT" else ""
        return Path(d, style=_style(parts, fill=fill or "none"))

    logger.debug(f"Skipping unsupported EasyEDA shape code {code!r}")
    return None


def angle_to_orientation(angle: Optional[float]) -> PinOrientation:
    """Map an EasyEDA pin rotation to an orientation; unknown angles map to right."""
    if angle is None:
        return PinOrientation.RIGHT
    normalized = angle % 360
    if not float(normalized).is_integer():
        return PinOrientation.RIGHT
    return _ANGLE_ORIENTATION.get(int(normalized), PinOrientation.RIGHT)


def _parse_label(segment: str) -> Optional[Tuple[str, Optional[LabelPosition]]]:
    """Parse a visible, non-empty label segment into (text, position)."""
    if "~" not in segment:
        return None
    parts = segment.split("~")
    if len(parts) < 5:
        return None
    if number(parts[0]) == 0:
        return None
    text = parts[4].strip()
    if not text:
        return None

    x, y = number(parts[1]), number(parts[2])
    if x is None or y is None:
        return text, None

    anchor = _field(parts, 5)
    font_token = re.sub(r"pt$", "", _field(parts, 7), flags=re.IGNORECASE)
    font_size = number(font_token)
    rotation = number(parts[3])
    return text, LabelPosition(
        x=x,
        y=y,
        anchor=anchor if anchor in ("start", "middle", "end") else None,
        rotation=rotation if rotation is not None else 0.0,
        font_size=font_size if font_size is not None else DEFAULT_LABEL_FONT_SIZE,
        font_family=_field(parts, 6) or None,
    )


def _lead_orientation(path: str, dx: float, dy: float) -> PinOrientation:
    """Orientation of a lead; h and v leads keep their axis even at zero length."""
    match = _LEAD_COMMAND_RE.match(path)
    command = match.group(1).upper() if match else "L"
    if command == "V":
        return PinOrientation.DOWN if dy >= 0 else PinOrientation.UP
    if command == "H":
        return PinOrientation.RIGHT if dx >= 0 else PinOrientation.LEFT
    return PinOrientation.from_delta(dx, dy)


def parse_pin(shape: str) -> Optional[Pin]:
    """
    Parse a ``P~`` / ``PIN~`` pin record.

    Header fields: [3] number, [4] x, [5] y, [6] rotation. Orientation and
    length come from the lead path fragment when one is present, otherwise
    from the rotation. The first label gives the name, the second the number
    position.
    """
    if not isinstance(shape, str) or not is_pin_shape(shape):
        return None

    segments = shape.split("^^")
    header = segments[0].split("~")

    header_number = _field(header, 3)
    x, y, angle = (_number_at(header, i) for i in (4, 5, 6))

    if x is None or y is None:
        # Shorter or variant headers: take the first numeric fields
        numeric = [v for v in (number(part) for part in header) if v is not None]
        if len(numeric) >= 2:
            x, y = numeric[0], numeric[1]
            if len(numeric) >= 3:
                angle = numeric[2]

    if x is None or y is None:
        logger.debug(f"Skipping EasyEDA pin without a position: {segments[0]!r}")
        return None

    orientation = angle_to_orientation(angle)
    length = 0.0
    path: Optional[str] = None

    path_segment = next((s for s in segments if s.strip()[:1] in ("M", "m")), None)
    if path_segment is not None:
        candidate = path_segment.split("~")[0].strip()
        ends = parse_pin_path(candidate)
        if ends is not None:
            (x1, y1), (x2, y2) = ends
            dx, dy = x2 - x1, y2 - y1
            orientation = _lead_orientation(candidate, dx, dy)
            length = math.hypot(dx, dy)
            path = candidate

    name = ""
    pin_number = header_number
    positioned: List[Tuple[str, LabelPosition]] = []
    for segment in segments[1:]:
        label = _parse_label(segment)
        if label is None:
            continue
        text, position = label
        if position is not None:
            positioned.append((text, position))
        if not name:
            name = text
        if not pin_number and _DIGITS_RE.match(text):
            pin_number = text

    name_label = positioned[0][1] if positioned else None
    number_label = positioned[1][1] if len(positioned) > 1 else None

    return Pin(
        number=pin_number,
        name=name or pin_number,
        x=x,
        y=y,
        orientation=orientation,
        length=length,
        kind=PinKind.PASSIVE,
        shape="line",
        path=path,
        name_label=name_label,
        number_label=number_label,
    )
