"""
EasyEDA symbol record to canonical symbol conversion.

A record (the ``dataStr`` of an EasyEDA component) looks like::

    {
        "head": {"c_para": {"pre": "U?", "package": "SOIC-8"}},
        "BBox": {"x": 380, "y": 270, "width": 40, "height": 60},
        "shape": ["R~390~270~2~2~20~60~#880000~1~0~none~gge1~0", "P~show~0~1~..."],
    }

Conversion offsets everything by the minimum corner of the union bounding
box (or the record's own box) and scales source units to millimetres.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from ..config import EasyEDAConfig
from ..geometry import BoundingBox, content_bounds
from ..symbols import (
    DEFAULT_STROKE,
    Pin,
    Primitive,
    Rect,
    Style,
    Symbol,
    SymbolSource,
    placeholder_texts,
)
from .shapes import is_pin_shape, number, parse_pin, parse_shape

logger = logging.getLogger(__name__)


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return number(value)
    return None


def _record_bbox(record: Mapping[str, Any]) -> Optional[BoundingBox]:
    bbox = record.get("BBox") or record.get("bbox")
    if not isinstance(bbox, Mapping):
        return None
    values = [_as_number(bbox.get(key)) for key in ("x", "y", "width", "height")]
    if any(v is None for v in values):
        return None
    x, y, width, height = values
    if width < 0 or height < 0:
        return None
    return BoundingBox(x, y, x + width, y + height)


def _head_properties(record: Mapping[str, Any]) -> Dict[str, str]:
    head = record.get("head")
    c_para = head.get("c_para") if isinstance(head, Mapping) else None
    if not isinstance(c_para, Mapping):
        return {}
    return {str(k): str(v) for k, v in c_para.items() if v not in (None, "")}


def convert_easyeda_symbol(
    record: Optional[Mapping[str, Any]],
    options: Optional[EasyEDAConfig] = None,
    name: str = "",
) -> Optional[Symbol]:
    """
    Convert an EasyEDA symbol record into a canonical symbol.

    Args:
        record: Mapping with a ``shape`` list and optional ``BBox``/``bbox``
        options: Conversion settings (scale factor)
        name: Name recorded on the resulting symbol

    Returns:
        The symbol, or None when the record yields no finite geometry
    """
    if not isinstance(record, Mapping):
        return None
    shapes = record.get("shape")
    if not isinstance(shapes, (list, tuple)):
        logger.debug("EasyEDA record has no shape list")
        return None
    options = options or EasyEDAConfig()

    graphics: List[Primitive] = []
    pins: List[Pin] = []
    for shape in shapes:
        if not isinstance(shape, str) or not shape:
            continue
        if is_pin_shape(shape):
            pin = parse_pin(shape)
            if pin is not None:
                pins.append(pin)
            continue
        primitive = parse_shape(shape)
        if primitive is not None:
            graphics.append(primitive)

    bounds = _record_bbox(record) or content_bounds(graphics, pins)
    if bounds is None:
        logger.debug("EasyEDA record produced no finite geometry")
        return None

    if not graphics:
        # Pins or a bounding box alone still describe a body outline
        graphics.append(
            Rect(
                bounds.min_x,
                bounds.min_y,
                bounds.width,
                bounds.height,
                style=Style(stroke=DEFAULT_STROKE, stroke_width=1.0, fill="none"),
            )
        )

    scale = options.scale
    dx, dy = -bounds.min_x, -bounds.min_y
    width = bounds.width * scale
    height = bounds.height * scale

    normalized: List[Primitive] = [g.moved(dx, dy, scale) for g in graphics]
    normalized.extend(placeholder_texts(width))
    properties = _head_properties(record)

    return Symbol(
        width=width,
        height=height,
        origin=(width / 2, height / 2),
        graphics=tuple(normalized),
        pins=tuple(p.moved(dx, dy, scale) for p in pins),
        properties=properties,
        source=SymbolSource.EASYEDA,
        name=name or properties.get("name", ""),
    )


def extract_datastr(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Unwrap an EasyEDA API payload into its symbol record.

    Accepts ``{"result": {"dataStr": ...}}``, ``{"dataStr": ...}`` or a bare
    record; ``dataStr`` may itself be a JSON string.
    """
    if isinstance(payload, Mapping) and isinstance(payload.get("result"), Mapping):
        payload = payload["result"]
    if isinstance(payload, Mapping) and "dataStr" in payload:
        payload = payload["dataStr"]
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.debug(f"dataStr is not valid JSON: {e}")
            return None
    if isinstance(payload, Mapping) and "shape" in payload:
        return dict(payload)
    return None
