"""Shared utilities for CLI commands."""

from __future__ import annotations

import json
import sys
import traceback
from pathlib import Path
from typing import TYPE_CHECKING, Any

from symbol_tools.exceptions import FileFormatError, SymbolToolsError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console", "read_text_file", "read_json_file"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output.

    Returns a console configured for stderr with appropriate settings.
    The console is created lazily and cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Print an exception with Rich formatting when available.

    Uses the Rich console on TTY terminals and falls back to plain text for
    pipes and captured output.

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        # Always use plain text for stack traces
        print(traceback.format_exc(), file=sys.stderr)
        return

    if use_rich and isinstance(e, SymbolToolsError):
        from rich.markup import escape

        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
    else:
        print(format_error(e), file=sys.stderr)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Format an exception for user-friendly display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return traceback.format_exc()

    if isinstance(e, SymbolToolsError):
        return f"Error: {e}"

    return f"Error: {type(e).__name__}: {e}"


def read_text_file(path: str | Path) -> str:
    """
    Read an input file.

    Raises:
        FileFormatError: If the file is missing or unreadable
    """
    path = Path(path)
    if not path.is_file():
        raise FileFormatError(
            f"File not found: {path}",
            context={"file": str(path)},
            suggestions=["Check the path and try again"],
        )
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileFormatError(f"Cannot read {path}: {e}", context={"file": str(path)}) from e


def read_json_file(path: str | Path) -> Any:
    """
    Read and decode a JSON input file.

    Raises:
        FileFormatError: If the file is missing, unreadable or not JSON
    """
    text = read_text_file(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FileFormatError(
            f"Invalid JSON in {path}: {e.msg}",
            context={"file": str(path), "line": e.lineno, "column": e.colno},
        ) from e
