"""
Thor exceptions and error handling.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Runtime errors
- E3xx: Configuration errors

Every error carries a :class:`Diagnostic`, so callers get one formatted
message with a source excerpt when the location is known.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity = ErrorSeverity.ERROR
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        parts.append(header)

        # Source line with caret
        if show_source and self.source_line is not None and self.span is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            if self.span.start.line == self.span.end.line:
                end_col = self.span.end.column
            else:
                end_col = len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)


class ThorError(Exception):
    """Base exception for Thor errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def with_source(self, source: str) -> "ThorError":
        """Attach the offending source line if it is not already known."""
        diag = self.diagnostic
        if diag.source_line is None and diag.span is not None:
            lines = source.splitlines()
            if 1 <= diag.span.start.line <= len(lines):
                diag.source_line = lines[diag.span.start.line - 1]
        return self

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexError(ThorError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParseError(ThorError):
    """Error during parsing (E1xx)."""
    pass


class RuntimeError(ThorError):
    """Error during evaluation (E2xx)."""
    pass


class NameError(RuntimeError):
    """Reference to an unbound identifier."""
    pass


class TypeError(RuntimeError):
    """Operation applied to a value of the wrong kind."""
    pass


class ArityError(RuntimeError):
    """Argument count does not match the parameter count."""
    pass


class DivisionError(RuntimeError):
    """Division by zero."""
    pass


class StackOverflow(RuntimeError):
    """Call depth or source nesting depth exceeded."""
    pass


class ConfigurationError(ThorError):
    """Invalid global environment or configuration file (E3xx)."""
    pass


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source_line: str = None) -> LexError:
    """E001: Unexpected character."""
    diag = Diagnostic(
        code="E001",
        message=f"unexpected character '{char}'",
        span=span,
        source_line=source_line,
    )
    return LexError(diag)


def error_invalid_number_literal(text: str, span: SourceSpan, source_line: str = None,
                                 hint: str = None) -> LexError:
    """E002: Malformed or out-of-range number literal."""
    if hint is None:
        hint = "number literals contain digits and at most one decimal point"
    diag = Diagnostic(
        code="E002",
        message=f"invalid number literal '{text}'",
        span=span,
        source_line=source_line,
        hints=[hint],
    )
    return LexError(diag)


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source_line: str = None) -> ParseError:
    """E101: Unexpected token."""
    diag = Diagnostic(
        code="E101",
        message=f"expected {expected}, found {found}",
        span=span,
        source_line=source_line,
    )
    return ParseError(diag)


def error_unexpected_eof(expected: str, span: SourceSpan) -> ParseError:
    """E102: Unexpected end of input."""
    diag = Diagnostic(
        code="E102",
        message=f"unexpected end of input, expected {expected}",
        span=span,
    )
    return ParseError(diag)


# --- Runtime error codes ---

def error_undefined_identifier(name: str, span: Optional[SourceSpan] = None) -> NameError:
    """E201: Undefined identifier."""
    return NameError(Diagnostic(
        code="E201",
        message=f"{name} is not defined",
        span=span,
    ))


def error_not_callable(name: str, kind: str, span: Optional[SourceSpan] = None) -> TypeError:
    """E202: Call of a value that is not a function."""
    return TypeError(Diagnostic(
        code="E202",
        message=f"{name} is not a function (found {kind})",
        span=span,
    ))


def error_not_a_number(context: str, kind: str, span: Optional[SourceSpan] = None) -> TypeError:
    """E203: Arithmetic on a non-numeric value."""
    return TypeError(Diagnostic(
        code="E203",
        message=f"{context} requires a number, found {kind}",
        span=span,
    ))


def error_arity_mismatch(name: str, expected: str, found: int,
                         span: Optional[SourceSpan] = None) -> ArityError:
    """E204: Wrong number of arguments."""
    plural = "" if expected == "1" else "s"
    return ArityError(Diagnostic(
        code="E204",
        message=f"{name} expects {expected} argument{plural}, got {found}",
        span=span,
    ))


def error_division_by_zero(span: Optional[SourceSpan] = None) -> DivisionError:
    """E205: Division by zero."""
    return DivisionError(Diagnostic(
        code="E205",
        message="division by zero",
        span=span,
    ))


def error_stack_overflow(limit: int, span: Optional[SourceSpan] = None) -> StackOverflow:
    """E206: Call depth exceeded."""
    return StackOverflow(Diagnostic(
        code="E206",
        message=f"maximum call depth of {limit} exceeded",
        span=span,
        hints=["check for recursion without a base case"],
    ))


def error_nesting_too_deep(span: Optional[SourceSpan] = None) -> StackOverflow:
    """E207: Source nested deeper than the host stack allows."""
    return StackOverflow(Diagnostic(
        code="E207",
        message="program is nested too deeply",
        span=span,
        hints=["split deeply nested expressions into separate assignments"],
    ))


# --- Configuration error codes ---

def error_configuration(message: str) -> ConfigurationError:
    """E301: Invalid configuration."""
    return ConfigurationError(Diagnostic(code="E301", message=message))
