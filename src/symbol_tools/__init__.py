"""
symbol-tools: schematic symbol conversion and geometry.

Normalizes symbols from three sources into one canonical model:

    symbol_tools.sexp       - S-expression tokenizer and parser
    symbol_tools.symbols    - Canonical primitives, pins and symbols
    symbol_tools.geometry   - Bounds, pin far ends, placements
    symbol_tools.easyeda    - EasyEDA shape-string converter
    symbol_tools.kicad      - KiCad .kicad_sym converter
    symbol_tools.library    - Built-ins, generic fallbacks, registry, instances

Example::

    from symbol_tools.library import ComponentRegistry

    registry = ComponentRegistry()
    r1 = registry.create_component("Resistor", x=10, y=20, rotation=90)
    print(r1.pin_position("1"))
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
