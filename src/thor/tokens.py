"""
Token types for the Thor lexer.

Error code ranges used throughout the package:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Runtime errors
- E3xx: Configuration errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42, 3.14, .5
    BOOLEAN = auto()            # true, false

    # --- Identifiers ---
    IDENTIFIER = auto()         # user-defined names

    # --- Keywords ---
    FN = auto()                 # fn
    IF = auto()                 # if
    ELSE = auto()               # else
    RETURN = auto()             # return

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # - (binary and unary)
    STAR = auto()               # *
    SLASH = auto()              # /
    CARET = auto()              # ^ (power)

    # --- Assignment ---
    ASSIGN = auto()             # =

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACE = auto()             # {
    RBRACE = auto()             # }
    COMMA = auto()              # ,

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # float for numbers, bool for booleans, text otherwise
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.BOOLEAN, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Keyword mapping - maps string to token type
KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
    "true": TokenType.BOOLEAN,
    "false": TokenType.BOOLEAN,
}


# Single-character operators and punctuation
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '^': TokenType.CARET,
    '=': TokenType.ASSIGN,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    ',': TokenType.COMMA,
}


# Binary operator tokens and the symbol the AST records for them
OPERATOR_SYMBOLS: dict[TokenType, str] = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
    TokenType.STAR: '*',
    TokenType.SLASH: '/',
    TokenType.CARET: '^',
}


def describe(token_type: TokenType) -> str:
    """Human-readable name of a token type for error messages."""
    for symbol, kind in SINGLE_CHAR_TOKENS.items():
        if kind == token_type:
            return f"'{symbol}'"
    for word, kind in KEYWORDS.items():
        if kind == token_type and token_type != TokenType.BOOLEAN:
            return f"'{word}'"
    if token_type == TokenType.EOF:
        return "end of input"
    return token_type.name.lower()
