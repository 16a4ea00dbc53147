"""
Table and JSON rendering for the symbol commands.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from rich.console import Console
from rich.table import Table

from symbol_tools.config import Config
from symbol_tools.geometry import Placement, local_bounds, pin_far_end, world_bounds
from symbol_tools.symbols import Symbol
from symbol_tools.units import UnitFormatter, get_unit_formatter

__all__ = [
    "output_format",
    "placement_from_args",
    "print_json",
    "print_name_table",
    "print_symbol",
    "symbol_report",
]


def output_format(args, config: Config) -> str:
    """CLI flag wins over ``defaults.format``."""
    return getattr(args, "format", None) or config.defaults.format or "table"


def placement_from_args(args) -> Placement:
    x, y = args.at if getattr(args, "at", None) else (0.0, 0.0)
    return Placement(
        x=x,
        y=y,
        rotation=getattr(args, "rotation", 0.0) or 0.0,
        mirror=bool(getattr(args, "mirror", False)),
    )


def symbol_report(symbol: Symbol, placement: Placement, config: Config) -> Dict[str, Any]:
    """Geometry summary of a symbol in both frames, all lengths in mm."""
    local = local_bounds(symbol, config.geometry)
    world = world_bounds(symbol, placement, config.geometry)
    pins = []
    for pin in symbol.pins:
        wx, wy = placement.apply(pin.x, pin.y)
        fx, fy = pin_far_end(pin)
        pins.append(
            {
                "number": pin.number,
                "name": pin.name,
                "orientation": pin.orientation.value,
                "kind": pin.kind.value,
                "length": pin.length,
                "local": [pin.x, pin.y],
                "far_end": [fx, fy],
                "world": [wx, wy],
            }
        )
    return {
        "name": symbol.name,
        "source": symbol.source.value,
        "width": symbol.width,
        "height": symbol.height,
        "origin": list(symbol.origin),
        "graphics": len(symbol.graphics),
        "pin_count": symbol.pin_count,
        "properties": dict(symbol.properties),
        "placement": placement.to_dict(),
        "local_bounds": local.to_dict() if local else None,
        "world_bounds": world.to_dict() if world else None,
        "pins": pins,
    }


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _format_box(box: Optional[Dict[str, float]], fmt: UnitFormatter) -> str:
    if box is None:
        return "-"
    return (
        f"{fmt.format_coordinate(box['x'], box['y'], include_unit=False)} "
        f"{fmt.format(box['width'], include_unit=False)} x {fmt.format(box['height'])}"
    )


def print_symbol(
    symbol: Symbol,
    args,
    config: Config,
    extra: Optional[Dict[str, Any]] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Print a symbol summary, with pin details when ``args.pins`` is set.

    Args:
        symbol: Symbol to describe
        args: Parsed arguments carrying the shared show options
        config: Loaded configuration (format, units, geometry)
        extra: Additional fields, e.g. the definition's reference and value
        console: Console to print tables to (default: stdout)
    """
    report = symbol_report(symbol, placement_from_args(args), config)
    if extra:
        report.update(extra)

    if output_format(args, config) == "json":
        if not getattr(args, "pins", False):
            report.pop("pins")
        print_json(report)
        return

    console = console or Console()
    fmt = get_unit_formatter(getattr(args, "units", None), config)

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Name", report["name"] or "-")
    table.add_row("Source", report["source"])
    for key, value in (extra or {}).items():
        table.add_row(key.replace("_", " ").capitalize(), str(value))
    table.add_row("Size", f"{fmt.format(symbol.width, include_unit=False)} x {fmt.format(symbol.height)}")
    table.add_row("Origin", fmt.format_coordinate(*symbol.origin))
    table.add_row("Graphics", str(report["graphics"]))
    table.add_row("Pins", str(report["pin_count"]))
    table.add_row("Placement", _placement_text(report, fmt))
    table.add_row("Local bounds", _format_box(report["local_bounds"], fmt))
    table.add_row("World bounds", _format_box(report["world_bounds"], fmt))
    console.print(table)

    if getattr(args, "pins", False) and report["pins"]:
        _print_pin_table(report["pins"], fmt, console)


def _placement_text(report: Dict[str, Any], fmt: UnitFormatter) -> str:
    placement = report["placement"]
    text = f"{fmt.format_coordinate(placement['x'], placement['y'])} rot {placement['rotation']:g}"
    if placement["mirror"]:
        text += " mirrored"
    return text


def _print_pin_table(pins: List[Dict[str, Any]], fmt: UnitFormatter, console: Console) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Pin", style="cyan")
    table.add_column("Name")
    table.add_column("Dir")
    table.add_column("Type")
    table.add_column("Local")
    table.add_column("World")
    for pin in pins:
        table.add_row(
            pin["number"],
            pin["name"] or "-",
            pin["orientation"],
            pin["kind"],
            fmt.format_coordinate(*pin["local"], include_unit=False),
            fmt.format_coordinate(*pin["world"], include_unit=False),
        )
    console.print(table)
    console.print(f"[dim]Coordinates in {fmt.unit_name}[/dim]")


def print_name_table(
    rows: Iterable[Dict[str, Any]],
    columns: List[str],
    args,
    config: Config,
    title: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """Print a list of records as a table, or as JSON when requested."""
    rows = list(rows)
    if output_format(args, config) == "json":
        print_json(rows)
        return

    console = console or Console()
    table = Table(show_header=True, header_style="bold", title=title)
    for index, column in enumerate(columns):
        table.add_column(column.replace("_", " ").capitalize(), style="cyan" if index == 0 else None)
    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))
    console.print(table)
