"""
Unit constants and display formatting for symbol-tools.

All canonical symbol coordinates are millimetres. EasyEDA shape strings use
10 mil source units and KiCad 6+ libraries already use millimetres.

Display units follow the precedence: CLI flag > environment variable >
config file > default (mm).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config

__all__ = [
    "UnitSystem",
    "UnitFormatter",
    "MM_PER_MIL",
    "EASYEDA_UNIT_MM",
    "mm_to_mils",
    "get_unit_formatter",
]

MM_PER_MIL = 0.0254

# One EasyEDA source unit is 10 mil
EASYEDA_UNIT_MM = 0.254

UNITS_ENV_VAR = "SYMBOL_TOOLS_UNITS"


def mm_to_mils(value: float) -> float:
    return value / MM_PER_MIL


class UnitSystem(Enum):
    """Unit system for display output."""

    MM = "mm"
    MILS = "mils"

    @classmethod
    def from_string(cls, value: str | None) -> UnitSystem | None:
        """Parse a unit system from a string value.

        Args:
            value: String like "mm", "mils", "mil", or None

        Returns:
            UnitSystem or None if value is None or invalid
        """
        if value is None:
            return None
        value = value.lower().strip()
        if value in ("mm", "millimeters", "millimeter"):
            return cls.MM
        if value in ("mils", "mil", "thou"):
            return cls.MILS
        return None


@dataclass
class UnitFormatter:
    """Formatter for length values with configurable unit system.

    Examples:
        >>> UnitFormatter(UnitSystem.MM).format(0.254)
        '0.254 mm'

        >>> UnitFormatter(UnitSystem.MILS).format(0.254)
        '10.0 mils'
    """

    system: UnitSystem
    precision_mm: int = 3
    precision_mils: int = 1

    @property
    def unit_name(self) -> str:
        return self.system.value

    @property
    def precision(self) -> int:
        return self.precision_mils if self.system == UnitSystem.MILS else self.precision_mm

    def convert_to_display(self, value_mm: float) -> float:
        """Convert a mm value to the display unit."""
        if self.system == UnitSystem.MILS:
            return mm_to_mils(value_mm)
        return value_mm

    def format(self, value_mm: float, include_unit: bool = True) -> str:
        """Format a mm value in the configured unit system."""
        text = f"{self.convert_to_display(value_mm):.{self.precision}f}"
        if include_unit:
            return f"{text} {self.unit_name}"
        return text

    def format_compact(self, value_mm: float) -> str:
        """Format a mm value with no space before the unit, e.g. ``2.540mm``."""
        return f"{self.convert_to_display(value_mm):.{self.precision}f}{self.unit_name}"

    def format_coordinate(self, x_mm: float, y_mm: float, include_unit: bool = True) -> str:
        """Format a coordinate pair like ``(1.234, 5.678) mm``."""
        x = self.convert_to_display(x_mm)
        y = self.convert_to_display(y_mm)
        text = f"({x:.{self.precision}f}, {y:.{self.precision}f})"
        if include_unit:
            return f"{text} {self.unit_name}"
        return text


def get_unit_formatter(
    cli_units: str | None = None,
    config: Config | None = None,
) -> UnitFormatter:
    """Get a unit formatter based on precedence: CLI > env > config > default.

    Args:
        cli_units: Unit system from CLI flag (highest priority)
        config: Config object to read defaults.units from

    Returns:
        Configured UnitFormatter instance
    """
    system = UnitSystem.from_string(cli_units)

    if system is None:
        system = UnitSystem.from_string(os.environ.get(UNITS_ENV_VAR))

    if system is None and config is not None:
        system = UnitSystem.from_string(config.defaults.units)

    if system is None:
        system = UnitSystem.MM

    return UnitFormatter(system=system)
