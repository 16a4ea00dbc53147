"""
Command-line interface for symbol-tools.

Provides commands via the `symbol-tools` or `symt` command:

    symbol-tools builtin [NAME]          - List or show built-in components
    symbol-tools kicad LIBRARY [NAME]    - List or convert KiCad library symbols
    symbol-tools easyeda RECORD.json     - Convert an EasyEDA symbol record
    symbol-tools config                  - View configuration
"""

import logging
import sys
from typing import List, Optional

from symbol_tools.config import Config, ConfigError
from symbol_tools.exceptions import SymbolToolsError

from .commands import (
    run_builtin_command,
    run_config_command,
    run_easyeda_command,
    run_kicad_command,
)
from .parser import create_parser
from .utils import print_error

__all__ = ["main"]

COMMANDS = {
    "builtin": run_builtin_command,
    "kicad": run_kicad_command,
    "easyeda": run_easyeda_command,
    "config": run_config_command,
}


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for symbol-tools CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.load()
    except ConfigError as e:
        print_error(e, verbose=args.verbose)
        return 1

    verbose = args.verbose or config.defaults.verbose
    quiet = args.quiet or (config.defaults.quiet and not args.verbose)
    _configure_logging(verbose, quiet)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return COMMANDS[args.command](args, config)
    except SymbolToolsError as e:
        print_error(e, verbose=verbose)
        return 1
