"""
EasyEDA schematic symbol conversion.

Usage:
    from symbol_tools.easyeda import convert_easyeda_symbol, extract_datastr

    record = extract_datastr(api_payload)
    symbol = convert_easyeda_symbol(record)  # None if nothing usable
"""

from .converter import convert_easyeda_symbol, extract_datastr
from .shapes import angle_to_orientation, is_pin_shape, parse_pin, parse_shape

__all__ = [
    "angle_to_orientation",
    "convert_easyeda_symbol",
    "extract_datastr",
    "is_pin_shape",
    "parse_pin",
    "parse_shape",
]
