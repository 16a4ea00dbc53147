"""Built-in component command handler."""

from __future__ import annotations

import logging
import sys

from symbol_tools.config import Config
from symbol_tools.library import ComponentRegistry

from ..output import print_name_table, print_symbol

__all__ = ["run_builtin_command"]

logger = logging.getLogger(__name__)


def run_builtin_command(args, config: Config) -> int:
    """List built-in components, or show one placed per the CLI options."""
    registry = ComponentRegistry(kicad_options=config.kicad, easyeda_options=config.easyeda)

    if not args.name:
        if args.category:
            definitions = registry.by_category(args.category)
            if not definitions:
                print(f"Unknown category: {args.category}", file=sys.stderr)
                print(f"Categories: {', '.join(registry.categories())}", file=sys.stderr)
                return 1
        else:
            definitions = registry.all_definitions()

        rows = [
            {
                "name": d.name,
                "category": d.category,
                "reference": d.default_reference,
                "pins": d.symbol.pin_count,
                "description": d.description,
            }
            for d in definitions
        ]
        print_name_table(
            rows,
            ["name", "category", "reference", "pins", "description"],
            args,
            config,
            title="Built-in components",
        )
        return 0

    x, y = args.at if args.at else (0.0, 0.0)
    instance = registry.create_component(
        args.name, x=x, y=y, rotation=args.rotation, mirror=args.mirror
    )
    logger.debug(f"Created {instance.id} from {instance.definition.name}")
    print_symbol(
        instance.symbol,
        args,
        config,
        extra={
            "category": instance.definition.category,
            "reference": instance.reference,
            "value": instance.value,
        },
    )
    return 0
