"""
Symbol lookup in parsed KiCad symbol libraries.

A library file parses to a ``kicad_symbol_lib`` list whose top-level
``symbol`` children are the parts. Unit and body-style variants are nested
``symbol`` nodes named ``{part}_{unit}_{style}`` and are never returned by a
search.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..sexp import SExp, SExpValue

logger = logging.getLogger(__name__)

LIBRARY_TAG = "kicad_symbol_lib"

# Markers of unit/body-style sub-symbols such as "R_0_1" or "LM358_1_1"
SUB_UNIT_MARKERS = ("_0_", "_1_")


def is_sub_unit_name(name: str) -> bool:
    """Check whether a symbol name belongs to a unit variant."""
    return any(marker in name for marker in SUB_UNIT_MARKERS)


def _top_level_symbols(tree: Optional[SExpValue]) -> List[SExp]:
    if not isinstance(tree, SExp) or tree.tag != LIBRARY_TAG:
        return []
    return [
        node
        for node in tree.find_all("symbol")
        if node.get_string(0) is not None and not is_sub_unit_name(node.get_string(0))
    ]


def list_symbol_names(tree: Optional[SExpValue]) -> List[str]:
    """
    List the parts defined in a library.

    Args:
        tree: Parsed library (result of ``parse_sexp``)

    Returns:
        Names of top-level symbols in file order; empty if ``tree`` is not a
        symbol library
    """
    return [node.get_string(0) or "" for node in _top_level_symbols(tree)]


def _matchers(name: str) -> List[Callable[[str], bool]]:
    wanted = name.lower()
    return [
        lambda candidate: candidate == wanted,
        lambda candidate: candidate.endswith(":" + wanted),
        lambda candidate: wanted in candidate,
    ]


def find_symbol_node(tree: Optional[SExpValue], name: str) -> Optional[SExp]:
    """
    Find a top-level symbol by name.

    Each node is tried against three case-insensitive tests in turn (exact
    name, ``Library:NAME`` suffix, substring) and the first node passing any
    of them wins. Sub-unit symbols are skipped.

    Args:
        tree: Parsed library (result of ``parse_sexp``)
        name: Symbol name to look for

    Returns:
        The symbol node, or None if the tree is not a library or nothing matches
    """
    if not name:
        return None
    matchers = _matchers(str(name))
    for node in _top_level_symbols(tree):
        candidate = (node.get_string(0) or "").lower()
        if any(match(candidate) for match in matchers):
            return node
    return None


def find_symbol_by_exact_name(tree: Optional[SExpValue], name: str) -> Optional[SExp]:
    """Find a top-level symbol whose name matches exactly (used for ``extends``)."""
    for node in _top_level_symbols(tree):
        if node.get_string(0) == name:
            return node
    return None
