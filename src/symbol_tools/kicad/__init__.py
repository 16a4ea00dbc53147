"""
KiCad symbol library search and conversion.

Usage:
    from symbol_tools.kicad import load_kicad_symbol

    symbol = load_kicad_symbol(Path("Device.kicad_sym").read_text(), "R")
"""

from .converter import (
    angle_to_orientation,
    circle_from_three_points,
    convert_kicad_symbol,
    dedupe_pins,
    load_kicad_symbol,
    pin_from_sexp,
)
from .library import find_symbol_node, is_sub_unit_name, list_symbol_names

__all__ = [
    "angle_to_orientation",
    "circle_from_three_points",
    "convert_kicad_symbol",
    "dedupe_pins",
    "find_symbol_node",
    "is_sub_unit_name",
    "list_symbol_names",
    "load_kicad_symbol",
    "pin_from_sexp",
]
