"""
Lexer for Thor.

Converts source text into a list of tokens for the parser.
Supports:
- Insignificant whitespace, newlines included
- Single-line comments (#)
- Number literals with at most one decimal point (42, 3.14, .5, 7.)
- Identifiers and the keywords fn, if, else, return, true, false
- Single-character operators and punctuation: + - * / ^ = ( ) { } ,
"""

from typing import List, Optional, Iterator
import math

from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, KEYWORDS, SINGLE_CHAR_TOKENS,
)
from .errors import (
    error_unexpected_character,
    error_invalid_number_literal,
)

DIGITS = "0123456789"


class Lexer:
    """
    Tokenizer for Thor source text.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        return SourceSpan(start, self._location())

    def _peek(self) -> str:
        """Look at the current character without consuming it."""
        if self.pos >= len(self.source):
            return '\0'
        return self.source[self.pos]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace_and_comments(self) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif ch == '#':
                while self._peek() != '\n' and not self._is_at_end():
                    self._advance()
            else:
                break

    def _make_token(self, token_type: TokenType, value, start: SourceLocation,
                    lexeme: Optional[str] = None) -> Token:
        span = self._span(start)
        if lexeme is None:
            lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, span)

    def _scan_number(self) -> Token:
        """Scan a numeric literal: digits with at most one decimal point."""
        start = self._location()
        dots = 0
        while self._peek() in DIGITS or self._peek() == '.':
            if self._advance() == '.':
                dots += 1

        lexeme = self.source[start.offset:self.pos]
        if dots > 1 or lexeme == '.':
            raise error_invalid_number_literal(
                lexeme, self._span(start), self.get_source_line(start.line)
            )
        value = float(lexeme)
        if math.isinf(value):
            raise error_invalid_number_literal(
                lexeme, self._span(start), self.get_source_line(start.line),
                hint="number literals must fit in a double-precision float",
            )
        return self._make_token(TokenType.NUMBER, value, start, lexeme)

    def _scan_identifier_or_keyword(self) -> Token:
        start = self._location()

        while self._peek().isalnum() or self._peek() == '_':
            self._advance()

        lexeme = self.source[start.offset:self.pos]

        if lexeme in KEYWORDS:
            token_type = KEYWORDS[lexeme]
            if token_type == TokenType.BOOLEAN:
                return self._make_token(token_type, lexeme == "true", start, lexeme)
            return self._make_token(token_type, lexeme, start, lexeme)

        return self._make_token(TokenType.IDENTIFIER, lexeme, start, lexeme)

    def _scan_token(self) -> Token:
        """Scan the next token."""
        self._skip_whitespace_and_comments()

        if self._is_at_end():
            return self._make_token(TokenType.EOF, None, self._location(), "")

        start = self._location()
        ch = self._peek()

        if ch in DIGITS or ch == '.':
            return self._scan_number()

        if ch.isalpha() or ch == '_':
            return self._scan_identifier_or_keyword()

        if ch in SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(SINGLE_CHAR_TOKENS[ch], ch, start)

        raise error_unexpected_character(
            ch, SourceSpan(start, SourceLocation(start.line, start.column + 1,
                                                 start.offset + 1, self.filename)),
            self.get_source_line(start.line)
        )

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        while True:
            token = self._scan_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens, always terminated by an EOF token

    Raises:
        LexError: If tokenization fails
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()


def format_tokens(tokens: List[Token]) -> str:
    """Render a token list one token per line, for diagnostics."""
    if not tokens:
        return "[]"
    body = ",\n  ".join(str(t) for t in tokens)
    return f"[\n  {body}\n]"
