"""
Argument parser setup for the symbol-tools CLI.
"""

import argparse

from symbol_tools import __version__

__all__ = ["create_parser", "CLI_DOCSTRING"]

# Module docstring used as epilog in help
CLI_DOCSTRING = """
Commands (`symbol-tools` or `symt`):

    symt builtin [NAME]              - List built-in components or show one
    symt kicad LIBRARY [NAME]        - List or convert symbols in a .kicad_sym library
    symt easyeda RECORD.json         - Convert an EasyEDA symbol record
    symt config                      - View configuration

Examples:
    symt builtin --category "Power Symbols"
    symt builtin Resistor --at 10 20 --rotation 90 --pins
    symt kicad Device.kicad_sym --list
    symt kicad Device.kicad_sym R --format json
    symt easyeda C46749.json --units mils
"""


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="symbol-tools",
        description="Schematic symbol conversion and geometry toolkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=CLI_DOCSTRING,
    )
    parser.add_argument("--version", action="version", version=f"symbol-tools {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging and stack traces")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _add_builtin_parser(subparsers)
    _add_kicad_parser(subparsers)
    _add_easyeda_parser(subparsers)
    _add_config_parser(subparsers)

    return parser


def _add_show_options(parser: argparse.ArgumentParser) -> None:
    """Output and placement options shared by the symbol commands."""
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default=None,
        help="Output format (default: from config, else table)",
    )
    parser.add_argument(
        "--units",
        choices=["mm", "mils"],
        default=None,
        help="Display units for table output",
    )
    parser.add_argument(
        "--at",
        nargs=2,
        type=float,
        metavar=("X", "Y"),
        help="Place the symbol at X Y (mm)",
    )
    parser.add_argument("--rotation", type=float, default=0.0, help="Rotation in degrees")
    parser.add_argument("--mirror", action="store_true", help="Mirror about the symbol's Y axis")
    parser.add_argument("--pins", action="store_true", help="Show pin details")


def _add_builtin_parser(subparsers) -> None:
    """Add builtin subcommand parser."""
    builtin_parser = subparsers.add_parser("builtin", help="Built-in component symbols")
    builtin_parser.add_argument("name", nargs="?", help="Component to show")
    builtin_parser.add_argument("--category", help="Only list this category")
    _add_show_options(builtin_parser)


def _add_kicad_parser(subparsers) -> None:
    """Add kicad subcommand parser."""
    kicad_parser = subparsers.add_parser("kicad", help="Convert KiCad library symbols")
    kicad_parser.add_argument("library", help="Path to .kicad_sym file")
    kicad_parser.add_argument("name", nargs="?", help="Symbol to convert")
    kicad_parser.add_argument("--list", action="store_true", help="List symbol names")
    _add_show_options(kicad_parser)


def _add_easyeda_parser(subparsers) -> None:
    """Add easyeda subcommand parser."""
    easyeda_parser = subparsers.add_parser("easyeda", help="Convert an EasyEDA symbol record")
    easyeda_parser.add_argument("record", help="JSON file with an EasyEDA record or API payload")
    easyeda_parser.add_argument("--name", default="", help="Name for the converted symbol")
    _add_show_options(easyeda_parser)


def _add_config_parser(subparsers) -> None:
    """Add config subcommand parser."""
    config_parser = subparsers.add_parser("config", help="View configuration")
    action_group = config_parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show", action="store_true", help="Show effective configuration with sources"
    )
    action_group.add_argument("--init", action="store_true", help="Print a template config file")
    action_group.add_argument("--paths", action="store_true", help="Show config file paths")
