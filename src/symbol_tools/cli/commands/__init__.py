"""
Command handlers for the symbol-tools CLI.

Each handler takes the parsed arguments and the loaded configuration and
returns an exit code.
"""

from .builtin import run_builtin_command
from .config import run_config_command
from .easyeda import run_easyeda_command
from .kicad import run_kicad_command

__all__ = [
    "run_builtin_command",
    "run_config_command",
    "run_easyeda_command",
    "run_kicad_command",
]
