"""
Tests for the Thor lexer.
"""

import pytest

from thor.lexer import tokenize, format_tokens, Lexer
from thor.tokens import TokenType
from thor.errors import LexError


def token_types(source):
    """Helper to get token types from source."""
    return [t.type for t in tokenize(source)]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_whitespace_only(self):
        """Whitespace and newlines are insignificant."""
        assert token_types("   \n\t  \n  ") == [TokenType.EOF]

    def test_comment(self):
        """Comments run to the end of the line."""
        assert token_types("# nothing here\n1 # trailing") == [
            TokenType.NUMBER, TokenType.EOF,
        ]

    def test_always_ends_with_eof(self):
        """The token list is terminated by exactly one EOF."""
        tokens = tokenize("x = 1")
        assert tokens[-1].type == TokenType.EOF
        assert sum(1 for t in tokens if t.type == TokenType.EOF) == 1

    def test_iteration(self):
        """A Lexer can be iterated directly."""
        types = [t.type for t in Lexer("a + b")]
        assert types == [
            TokenType.IDENTIFIER, TokenType.PLUS, TokenType.IDENTIFIER, TokenType.EOF,
        ]


class TestLexerNumbers:
    """Test number literals."""

    def test_integer(self):
        tokens = tokenize("42")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 42.0
        assert isinstance(tokens[0].value, float)

    def test_decimal(self):
        assert tokenize("3.25")[0].value == 3.25

    def test_leading_and_trailing_dot(self):
        """'.5' and '7.' are valid literals."""
        assert tokenize(".5")[0].value == 0.5
        assert tokenize("7.")[0].value == 7.0

    def test_two_decimal_points(self):
        """A literal with two decimal points is rejected."""
        with pytest.raises(LexError) as exc_info:
            tokenize("1.2.3")
        assert exc_info.value.code == "E002"
        assert "1.2.3" in str(exc_info.value)

    def test_lone_dot(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("x = .")
        assert exc_info.value.code == "E002"

    def test_literal_too_large(self):
        """A literal beyond the float range is rejected instead of becoming inf."""
        with pytest.raises(LexError) as exc_info:
            tokenize("1" * 400)
        assert exc_info.value.code == "E002"
        assert "double-precision" in str(exc_info.value)

    def test_largest_literals_accepted(self):
        assert tokenize("1" + "0" * 300)[0].value == 1e300

    def test_minus_is_separate_token(self):
        """Negative numbers are a minus token followed by a number."""
        assert token_types("-3") == [TokenType.MINUS, TokenType.NUMBER, TokenType.EOF]


class TestLexerWords:
    """Test identifiers, keywords and booleans."""

    def test_keywords(self):
        assert token_types("fn if else return") == [
            TokenType.FN, TokenType.IF, TokenType.ELSE, TokenType.RETURN, TokenType.EOF,
        ]

    def test_booleans(self):
        tokens = tokenize("true false")
        assert tokens[0].type == TokenType.BOOLEAN
        assert tokens[0].value is True
        assert tokens[1].type == TokenType.BOOLEAN
        assert tokens[1].value is False

    def test_identifier(self):
        tokens = tokenize("my_var2")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "my_var2"

    def test_keyword_prefix_is_identifier(self):
        """Identifiers that start with a keyword are still identifiers."""
        tokens = tokenize("iffy returned")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[1].type == TokenType.IDENTIFIER


class TestLexerOperators:
    """Test operators and punctuation."""

    def test_all_single_char_tokens(self):
        assert token_types("+ - * / ^ = ( ) { } ,") == [
            TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH,
            TokenType.CARET, TokenType.ASSIGN, TokenType.LPAREN, TokenType.RPAREN,
            TokenType.LBRACE, TokenType.RBRACE, TokenType.COMMA, TokenType.EOF,
        ]

    def test_unexpected_character(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("x = 1 $ 2")
        assert exc_info.value.code == "E001"
        assert "'$'" in str(exc_info.value)


class TestLexerLocations:
    """Test source location tracking."""

    def test_line_and_column(self):
        tokens = tokenize("x\n  y")
        assert tokens[0].span.start.line == 1
        assert tokens[0].span.start.column == 1
        assert tokens[1].span.start.line == 2
        assert tokens[1].span.start.column == 3

    def test_error_shows_source_line(self):
        """Lexer errors carry the offending line and a caret."""
        with pytest.raises(LexError) as exc_info:
            tokenize("a = 1\nb = @")
        message = str(exc_info.value)
        assert "2:5" in message
        assert "b = @" in message
        assert "^" in message

    def test_filename_in_location(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("?", filename="prog.thor")
        assert "prog.thor:1:1" in str(exc_info.value)


class TestTokenRendering:
    """Test the diagnostic rendering of tokens."""

    def test_token_str(self):
        tokens = tokenize("x 2 true +")
        assert str(tokens[0]) == "IDENTIFIER('x')"
        assert str(tokens[1]) == "NUMBER(2.0)"
        assert str(tokens[2]) == "BOOLEAN(True)"
        assert str(tokens[3]) == "PLUS"

    def test_format_tokens(self):
        assert format_tokens(tokenize("1")) == "[\n  NUMBER(1.0),\n  EOF\n]"
