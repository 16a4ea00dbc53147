"""KiCad library command handler."""

from __future__ import annotations

import logging

from symbol_tools.config import Config
from symbol_tools.exceptions import ComponentError, FileFormatError
from symbol_tools.kicad import is_sub_unit_name, list_symbol_names
from symbol_tools.library import ComponentRegistry
from symbol_tools.sexp import parse_sexp

from ..output import print_name_table, print_symbol
from ..utils import read_text_file

__all__ = ["run_kicad_command"]

logger = logging.getLogger(__name__)


def run_kicad_command(args, config: Config) -> int:
    """List the symbols of a .kicad_sym library, or convert one."""
    text = read_text_file(args.library)
    tree = parse_sexp(text)
    if tree is None:
        raise FileFormatError(
            f"Not a valid S-expression file: {args.library}",
            context={"file": args.library},
        )

    names = list_symbol_names(tree)
    if args.list or not args.name:
        print_name_table(
            [{"name": name} for name in names],
            ["name"],
            args,
            config,
            title=f"{len(names)} symbols",
        )
        return 0

    registry = ComponentRegistry(include_builtins=False, kicad_options=config.kicad)
    definition = registry.add_kicad_symbol(text, args.name)
    if definition is None:
        close = [n for n in names if args.name.lower() in n.lower() and not is_sub_unit_name(n)]
        raise ComponentError(
            f"Symbol not found: {args.name}",
            context={"file": args.library},
            suggestions=[f"Did you mean: {', '.join(close[:5])}"] if close else ["Use --list to see symbol names"],
        )

    logger.debug(f"Converted {definition.name} with {definition.symbol.pin_count} pins")
    print_symbol(
        definition.symbol,
        args,
        config,
        extra={"reference": definition.default_reference, "value": definition.default_value},
    )
    return 0
