"""EasyEDA record command handler."""

from __future__ import annotations

from pathlib import Path

from symbol_tools.config import Config
from symbol_tools.easyeda import convert_easyeda_symbol, extract_datastr
from symbol_tools.exceptions import FileFormatError

from ..output import print_symbol
from ..utils import read_json_file

__all__ = ["run_easyeda_command"]


def run_easyeda_command(args, config: Config) -> int:
    """Convert an EasyEDA record (or API payload) and show the result."""
    record = extract_datastr(read_json_file(args.record))
    if record is None:
        raise FileFormatError(
            f"No EasyEDA symbol record in {args.record}",
            context={"file": args.record},
            suggestions=["Expected an object with a 'shape' list, or an API payload with 'dataStr'"],
        )

    name = args.name or Path(args.record).stem
    symbol = convert_easyeda_symbol(record, config.easyeda, name=name)
    if symbol is None:
        raise FileFormatError(
            f"No convertible shapes in {args.record}",
            context={"file": args.record, "shapes": len(record.get("shape") or [])},
        )

    extra = {}
    if prefix := symbol.properties.get("pre"):
        extra["reference"] = prefix
    print_symbol(symbol, args, config, extra=extra)
    return 0
