"""
S-expression tokenizer and parser.

KiCad symbol libraries use a Lisp-like S-expression format:

    (kicad_symbol_lib
        (version 20231120)
        (symbol "R"
            (property "Reference" "R" (at 2.032 0 90))
            (pin passive line (at 0 3.81 270) (length 1.27))
        )
    )

Tokenizing follows the library-file conventions rather than a full Lisp
reader: quoted strings keep their escape sequences verbatim, only the
closing-quote scan understands backslashes, and anything that reads fully as
a number becomes a numeric atom.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from ..exceptions import ParseError

logger = logging.getLogger(__name__)

# Type alias for S-expression values
SExpValue = Union[str, int, float, "SExp"]

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_WHITESPACE = " \t\n\r\f\v"


@dataclass
class SExp:
    """
    Represents an S-expression list node.

    A list is stored as its leading string atom (``tag``) and the remaining
    children (``values``). A list whose first element is not an atom keeps
    that element in ``values`` and gets an empty tag.

    Attributes:
        tag: The first element of the list (e.g., "symbol", "pin")
        values: The remaining elements (atoms or nested SExp)
    """

    tag: str
    values: List[SExpValue] = field(default_factory=list)

    def __getitem__(self, key: Union[int, str]) -> Optional[SExpValue]:
        """
        Get a value by index or find a child by tag.

        Args:
            key: Integer index or string tag name

        Returns:
            The value at index, or first child with matching tag, or None
        """
        if isinstance(key, int):
            return self.get_value(key)
        if isinstance(key, str):
            return self.find(key)
        return None

    def __len__(self) -> int:
        return len(self.values)

    def find(self, tag: str) -> Optional[SExp]:
        """Find the first child SExp with the given tag."""
        for v in self.values:
            if isinstance(v, SExp) and v.tag == tag:
                return v
        return None

    def find_all(self, tag: str) -> List[SExp]:
        """Find all children with the given tag."""
        return [v for v in self.values if isinstance(v, SExp) and v.tag == tag]

    def get_value(self, index: int = 0) -> Optional[SExpValue]:
        """Get a value by index (0 = first value after tag)."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return None

    def get_string(self, index: int = 0) -> Optional[str]:
        """Get an atom value by index as a string."""
        val = self.get_value(index)
        if val is None or isinstance(val, SExp):
            return None
        return str(val)

    def get_int(self, index: int = 0) -> Optional[int]:
        """Get an integer value by index."""
        val = self.get_value(index)
        if isinstance(val, int):
            return val
        if isinstance(val, float) and val.is_integer():
            return int(val)
        if isinstance(val, str):
            try:
                return int(val)
            except ValueError:
                return None
        return None

    def get_float(self, index: int = 0) -> Optional[float]:
        """Get a float value by index."""
        val = self.get_value(index)
        if isinstance(val, (int, float)):
            return float(val)
        if isinstance(val, str) and _NUMBER_RE.fullmatch(val.strip()):
            return float(val)
        return None

    def get_atoms(self) -> List[Union[str, int, float]]:
        """Return the atom values of this list, skipping nested lists."""
        return [v for v in self.values if not isinstance(v, SExp)]

    def iter_children(self) -> Iterator[SExp]:
        """Iterate over child SExp nodes (skipping atoms)."""
        for v in self.values:
            if isinstance(v, SExp):
                yield v

    def walk(self) -> Iterator[SExp]:
        """Depth-first iteration over every descendant list, excluding self."""
        for child in self.iter_children():
            yield child
            yield from child.walk()

    def has_tag(self, tag: str) -> bool:
        """Check if any child has the given tag."""
        return self.find(tag) is not None

    def to_list(self) -> list:
        """Convert back to plain nested Python lists."""
        head: list = [self.tag] if self.tag else []
        return head + [v.to_list() if isinstance(v, SExp) else v for v in self.values]

    def __repr__(self) -> str:
        if not self.values:
            return f"SExp({self.tag!r})"
        return f"SExp({self.tag!r}, {self.values!r})"


def tokenize(text: str) -> List[str]:
    """
    Split S-expression text into tokens.

    Parentheses are standalone tokens, quoted strings are single tokens that
    keep their quotes and escape sequences, and any other run of non-space,
    non-paren characters is one token.

    Raises:
        ParseError: If a quoted string is not terminated
    """
    tokens: List[str] = []
    pos = 0
    length = len(text)

    while pos < length:
        c = text[pos]
        if c in _WHITESPACE:
            pos += 1
        elif c in "()":
            tokens.append(c)
            pos += 1
        elif c == '"':
            start = pos
            pos += 1
            while pos < length and text[pos] != '"':
                # Skip the escaped character so \" does not close the string
                pos += 2 if text[pos] == "\\" else 1
            if pos >= length:
                raise ParseError("Unterminated string", position=start)
            pos += 1
            tokens.append(text[start:pos])
        else:
            start = pos
            while pos < length and text[pos] not in _WHITESPACE and text[pos] not in "()":
                pos += 1
            tokens.append(text[start:pos])

    return tokens


def parse_atom(token: str) -> Union[str, int, float]:
    """Classify a single token as an int, float or string atom."""
    if token.startswith('"'):
        return token[1:-1] if len(token) >= 2 and token.endswith('"') else token[1:]
    if _NUMBER_RE.fullmatch(token):
        if "." in token or "e" in token.lower():
            return float(token)
        return int(token)
    return token


class SExpParser:
    """Recursive-descent parser over the token stream."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0
        self.length = len(self.tokens)

    def parse(self) -> SExpValue:
        """
        Parse the first complete expression in the text.

        Raises:
            ParseError: On empty input, unbalanced parentheses or a leading ')'
        """
        if not self.tokens:
            raise ParseError("Empty input")

        result = self._parse_expr()

        if self.pos < self.length:
            logger.debug(f"Ignoring {self.length - self.pos} trailing token(s) after expression")
        return result

    def _parse_expr(self) -> SExpValue:
        """Parse a single S-expression (atom or list)."""
        if self.pos >= self.length:
            raise ParseError("Unexpected end of input", position=self.pos)

        token = self.tokens[self.pos]
        if token == "(":
            return self._parse_list()
        if token == ")":
            raise ParseError("Unexpected ')'", position=self.pos)

        self.pos += 1
        return parse_atom(token)

    def _parse_list(self) -> SExp:
        """Parse a list: (tag value1 value2 ...)"""
        start = self.pos
        self.pos += 1

        items: List[SExpValue] = []
        while True:
            if self.pos >= self.length:
                raise ParseError("Unexpected end of input, expected ')'", position=start)
            if self.tokens[self.pos] == ")":
                self.pos += 1
                break
            items.append(self._parse_expr())

        if not items:
            return SExp("")

        head = items[0]
        if isinstance(head, SExp):
            return SExp("", items)
        # Numeric heads (e.g. layer numbers) are kept as tag text
        return SExp(str(head), items[1:])


def parse_sexp(text: str) -> Optional[SExpValue]:
    """
    Parse S-expression text into a tree.

    Returns:
        The root node, or None when the text is empty or malformed
    """
    if not isinstance(text, str):
        return None
    try:
        return SExpParser(text).parse()
    except ParseError as e:
        logger.debug(f"S-expression parse failed: {e.message}")
        return None
