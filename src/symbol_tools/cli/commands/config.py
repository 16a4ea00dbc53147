"""Config command handler."""

from __future__ import annotations

from pathlib import Path

import symbol_tools.config as symbol_config
from symbol_tools.config import CONFIG_FILENAMES, Config, generate_template, get_config_paths

__all__ = ["run_config_command"]


def run_config_command(args, config: Config) -> int:
    """Handle config command."""
    if args.init:
        print(generate_template(), end="")
        return 0
    if args.paths:
        return _show_paths()
    return _show_config(config)


def _show_config(config: Config) -> int:
    """Show effective configuration with sources."""
    print("# Effective symbol-tools configuration")
    for section, values in config.as_dict().items():
        print()
        print(f"[{section}]")
        for key, value in values.items():
            _print_value(key, value, config.get_source(f"{section}.{key}"))
    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, str):
        formatted = f'"{value}"'
    elif isinstance(value, bool):
        formatted = "true" if value else "false"
    elif value is None:
        formatted = "# not set"
    else:
        formatted = str(value)

    # Show just filename for brevity
    source_display = Path(source).name if source != "default" else source

    print(f"{key} = {formatted}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print("Config file paths:")
    print()

    print(f"User config: {symbol_config.USER_CONFIG_PATH}")
    print("  Status: exists" if paths["user"] else "  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0
