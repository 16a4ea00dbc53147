"""
Custom exception hierarchy for symbol-tools.

The conversion and geometry cores never raise on bad source data; they return
``None`` or a fallback value instead. These exceptions are raised at the
seams that do fail loudly: the internal S-expression parser, registry misuse,
configuration loading and the command line.

Example::

    from symbol_tools.exceptions import ComponentError

    raise ComponentError(
        "Cannot remove built-in component",
        context={"component": "Resistor"},
        suggestions=["Register a user component under a different name"]
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class SymbolToolsError(Exception):
    """
    Base exception for all symbol-tools errors.

    Attributes:
        context: Dictionary of contextual information (file, line, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ParseError(SymbolToolsError):
    """
    S-expression or source-record parsing failed.

    Example::

        raise ParseError(
            "Unbalanced parentheses",
            context={"file": "Device.kicad_sym"},
            position=1042,
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        position: Optional[int] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        if position is not None and "position" not in ctx:
            ctx["position"] = position

        super().__init__(message, ctx, suggestions)


class FileFormatError(SymbolToolsError):
    """
    File format not recognized.

    Raised when an input file exists but is not a symbol library or an
    EasyEDA record (e.g., a footprint library where symbols were expected).
    """

    pass


class ComponentError(SymbolToolsError):
    """
    Component definition or registry error.

    Raised for unnamed definitions, unknown component names and attempts to
    remove built-in definitions.
    """

    pass


class ConfigurationError(SymbolToolsError):
    """
    Configuration or settings error.

    Example::

        raise ConfigurationError(
            "Invalid unit system",
            context={"units": "furlongs", "available": ["mm", "mils"]},
        )
    """

    pass


__all__ = [
    "SymbolToolsError",
    "ParseError",
    "FileFormatError",
    "ComponentError",
    "ConfigurationError",
]
