"""Tests for the S-expression tokenizer and parser."""

import pytest

from symbol_tools.exceptions import ParseError
from symbol_tools.sexp import SExp, SExpParser, parse_atom, parse_sexp, tokenize


class TestTokenize:
    """Tokenizer tests."""

    def test_parens_and_atoms(self):
        """Parentheses are standalone tokens."""
        assert tokenize("(at 1 2.5)") == ["(", "at", "1", "2.5", ")"]

    def test_quoted_string_keeps_quotes(self):
        """A quoted run is one token including its quotes."""
        assert tokenize('(name "Hello World")') == ["(", "name", '"Hello World"', ")"]

    def test_escaped_quote_does_not_close(self):
        """Escapes are copied through verbatim."""
        tokens = tokenize(r'(v "say \"hi\"")')
        assert tokens[2] == r'"say \"hi\""'

    def test_whitespace_variants(self):
        """Tabs and newlines separate tokens."""
        assert tokenize("(a\t1\n\r2)") == ["(", "a", "1", "2", ")"]

    def test_quote_inside_bare_token(self):
        """A quote after the first character belongs to the bare token."""
        assert tokenize('(a b"c d)') == ["(", "a", 'b"c', "d", ")"]

    def test_library_with_inch_mark_parses(self):
        text = '(kicad_symbol_lib (symbol "R" (property "Note" 5"x) (pin passive line)))'
        tree = parse_sexp(text)
        assert tree is not None
        assert tree.find("symbol").find("property").values == ["Note", '5"x']

    def test_unterminated_string_raises(self):
        """An unterminated quote is flagged."""
        with pytest.raises(ParseError):
            tokenize('(name "open')


class TestParseAtom:
    """Atom classification tests."""

    def test_integer(self):
        assert parse_atom("42") == 42
        assert isinstance(parse_atom("-7"), int)

    def test_float(self):
        assert parse_atom("2.54") == pytest.approx(2.54)
        assert isinstance(parse_atom("1e3"), float)

    def test_quoted_string_unquoted(self):
        assert parse_atom('"10k"') == "10k"

    def test_quoted_number_stays_string(self):
        """Quoted digits are string atoms."""
        assert parse_atom('"1"') == "1"

    def test_non_numeric_symbols(self):
        """nan, inf and underscore separators are plain strings."""
        assert parse_atom("nan") == "nan"
        assert parse_atom("inf") == "inf"
        assert parse_atom("1_000") == "1_000"


class TestParseSexp:
    """Parser tests."""

    def test_nested_structure(self):
        """Nested lists get tags and children."""
        tree = parse_sexp('(symbol "R" (pin passive line (at 0 3.81 270)))')
        assert tree.tag == "symbol"
        assert tree.get_string(0) == "R"
        at = tree.find("pin").find("at")
        assert at.get_float(1) == pytest.approx(3.81)
        assert at.get_int(2) == 270

    def test_find_all_and_iter_children(self):
        """Accessors skip atoms."""
        tree = parse_sexp("(pts (xy 0 0) (xy 1 1) extra (xy 2 2))")
        assert len(tree.find_all("xy")) == 3
        assert [c.tag for c in tree.iter_children()] == ["xy", "xy", "xy"]
        assert tree.get_atoms() == ["extra"]

    def test_walk_is_depth_first(self):
        """walk() yields every descendant list."""
        tree = parse_sexp("(a (b (c)) (d))")
        assert [n.tag for n in tree.walk()] == ["b", "c", "d"]

    def test_empty_list(self):
        tree = parse_sexp("()")
        assert tree.tag == ""
        assert len(tree) == 0

    def test_list_headed_by_list(self):
        """A list whose head is not an atom keeps the head in values."""
        tree = parse_sexp("((a 1) 2)")
        assert tree.tag == ""
        assert isinstance(tree.values[0], SExp)
        assert tree.values[1] == 2

    def test_bare_atom(self):
        assert parse_sexp("42") == 42

    def test_trailing_content_ignored(self):
        """Only the first complete expression is returned."""
        tree = parse_sexp("(a 1) (b 2)")
        assert tree.tag == "a"

    def test_to_list(self):
        assert parse_sexp('(at 1 "x" (y 2))').to_list() == ["at", 1, "x", ["y", 2]]

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "(a (b 1)", ")", '(a "unterminated)'],
    )
    def test_malformed_returns_none(self, text):
        """Malformed input never raises from parse_sexp."""
        assert parse_sexp(text) is None

    def test_non_string_input(self):
        assert parse_sexp(None) is None

    def test_parser_raises(self):
        """The internal parser raises ParseError with a position."""
        with pytest.raises(ParseError) as exc_info:
            SExpParser("(a (b 1)").parse()
        assert "position" in exc_info.value.context

    def test_getitem(self):
        """Indexing by int reads values, by str finds children."""
        tree = parse_sexp("(pin passive (at 1 2))")
        assert tree[0] == "passive"
        assert tree["at"].get_float(0) == 1.0
        assert tree["missing"] is None
