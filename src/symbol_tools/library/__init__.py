"""
Component library: built-in definitions, generic fallbacks, the registry and
placed instances.
"""

from .builtin import BUILTIN_COMPONENTS, builtin_names
from .definition import ComponentDefinition, DefinitionOrigin
from .generic import create_generic_symbol, estimate_pin_count
from .instance import ComponentInstance
from .registry import ComponentRegistry

__all__ = [
    "BUILTIN_COMPONENTS",
    "ComponentDefinition",
    "ComponentInstance",
    "ComponentRegistry",
    "DefinitionOrigin",
    "builtin_names",
    "create_generic_symbol",
    "estimate_pin_count",
]
