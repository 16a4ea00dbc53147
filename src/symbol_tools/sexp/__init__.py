"""
S-expression parsing for KiCad symbol libraries.

Usage:
    from symbol_tools.sexp import parse_sexp

    tree = parse_sexp(text)  # None if text is empty or malformed
    if tree is not None:
        symbols = tree.find_all("symbol")
"""

from .parser import SExp, SExpParser, SExpValue, parse_atom, parse_sexp, tokenize

__all__ = [
    "SExp",
    "SExpParser",
    "SExpValue",
    "parse_atom",
    "parse_sexp",
    "tokenize",
]
