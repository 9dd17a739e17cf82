"""
Recursive descent parser for Thor.

Converts a token list into an Abstract Syntax Tree (AST) rooted at a
StatementsNode.
"""

from typing import List, Optional
from .tokens import Token, TokenType, SourceSpan, OPERATOR_SYMBOLS, describe
from .ast import (
    Node, NumberNode, BooleanNode, IdentifierNode, AssignmentNode,
    UnaryOpNode, BinaryOpNode, StatementsNode, FuncDefNode, FuncCallNode,
    IfNode, ReturnNode,
)
from .errors import (
    error_unexpected_token,
    error_unexpected_eof,
)


class Parser:
    """
    Recursive descent parser for Thor.

    Usage:
        parser = Parser(tokens)
        program = parser.parse_program()

    The parser implements precedence climbing for expressions:
        Lowest:  + -
                 * /
                 ^ (power, right-associative)
        Highest: unary -

    Statements need no terminator. Newlines are plain whitespace to the
    lexer, and a single optional comma may follow any statement, so
    ``x = 1, y = 2`` and ``x = 1\\ny = 2`` parse identically.
    The one place a newline matters is after ``return``: a value has to
    start on the same line, so a bare ``return`` can end a line.
    """

    # Operator precedence levels (higher = tighter binding)
    PRECEDENCE = {
        TokenType.PLUS: 1,
        TokenType.MINUS: 1,
        TokenType.STAR: 2,
        TokenType.SLASH: 2,
        TokenType.CARET: 3,
    }

    # Right-associative operators
    RIGHT_ASSOCIATIVE = {TokenType.CARET}

    def __init__(self, tokens: List[Token], filename: Optional[str] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.filename = filename
        self.pos = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 0) -> Token:
        """Peek at token at current position + offset."""
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _check_any(self, *token_types: TokenType) -> bool:
        return self._current().type in token_types

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _error(self, expected: str) -> None:
        token = self._current()
        if token.type == TokenType.EOF:
            raise error_unexpected_eof(expected, token.span)
        found = f"{describe(token.type)} '{token.lexeme}'" \
            if token.type in (TokenType.NUMBER, TokenType.BOOLEAN, TokenType.IDENTIFIER) \
            else describe(token.type)
        raise error_unexpected_token(expected, found, token.span)

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to the last consumed token."""
        end_token = self.tokens[max(0, self.pos - 1)]
        return SourceSpan(start.span.start, end_token.span.end)

    # =========================================================================
    # Expression Parsing (Precedence Climbing)
    # =========================================================================

    def _parse_expression(self) -> Node:
        return self._parse_binary_expr(0)

    def _parse_binary_expr(self, min_precedence: int) -> Node:
        """Parse binary expressions with precedence climbing."""
        start = self._current()
        left = self._parse_unary_expr()

        while True:
            op_token = self._current()
            precedence = self.PRECEDENCE.get(op_token.type)

            if precedence is None or precedence < min_precedence:
                break

            self._advance()  # consume operator

            # Right-associative operators use same precedence, others use precedence + 1
            next_precedence = precedence if op_token.type in self.RIGHT_ASSOCIATIVE else precedence + 1
            right = self._parse_binary_expr(next_precedence)

            left = BinaryOpNode(
                left=left,
                operator=OPERATOR_SYMBOLS[op_token.type],
                right=right,
                span=self._span_from(start),
            )

        return left

    def _parse_unary_expr(self) -> Node:
        """Parse unary negation, which binds tighter than '^'."""
        if self._check(TokenType.MINUS):
            op = self._advance()
            operand = self._parse_unary_expr()
            return UnaryOpNode(operator="-", node=operand, span=self._span_from(op))

        return self._parse_primary_expr()

    def _parse_primary_expr(self) -> Node:
        """Parse literals, identifiers, calls and grouped expressions."""
        token = self._current()

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberNode(value=token.value, span=token.span)

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return BooleanNode(value=token.value, span=token.span)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._check(TokenType.LPAREN):
                return self._parse_call(token)
            return IdentifierNode(name=token.value, span=token.span)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._consume(TokenType.RPAREN, "')'")
            return expr

        self._error("expression")

    def _parse_call(self, name: Token) -> FuncCallNode:
        """Parse the argument list of a call; the name is already consumed."""
        self._consume(TokenType.LPAREN, "'('")

        args = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())

        self._consume(TokenType.RPAREN, "')'")
        return FuncCallNode(name=name.value, args=tuple(args), span=self._span_from(name))

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> Node:
        token = self._current()

        if token.type == TokenType.FN:
            return self._parse_function_def()

        if token.type == TokenType.IF:
            return self._parse_if_statement()

        if token.type == TokenType.RETURN:
            return self._parse_return_statement()

        if token.type == TokenType.IDENTIFIER and self._peek(1).type == TokenType.ASSIGN:
            return self._parse_assignment()

        if not self._check_any(TokenType.NUMBER, TokenType.BOOLEAN, TokenType.IDENTIFIER,
                               TokenType.LPAREN, TokenType.MINUS):
            self._error("statement")

        return self._parse_expression()

    def _parse_assignment(self) -> AssignmentNode:
        """Parse ``name = value``; the value may itself be an assignment."""
        start = self._advance()  # identifier
        self._consume(TokenType.ASSIGN, "'='")
        if self._check(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.ASSIGN:
            value = self._parse_assignment()
        else:
            value = self._parse_expression()
        return AssignmentNode(identifier=start.value, node=value, span=self._span_from(start))

    def _parse_function_def(self) -> FuncDefNode:
        start = self._advance()  # consume 'fn'
        name = self._consume(TokenType.IDENTIFIER, "function name").value
        self._consume(TokenType.LPAREN, "'('")

        arg_names = []
        if not self._check(TokenType.RPAREN):
            arg_names.append(self._consume(TokenType.IDENTIFIER, "parameter name").value)
            while self._match(TokenType.COMMA):
                arg_names.append(self._consume(TokenType.IDENTIFIER, "parameter name").value)
        self._consume(TokenType.RPAREN, "')'")

        body = self._parse_block()
        return FuncDefNode(
            name=name,
            arg_names=tuple(arg_names),
            body=body,
            span=self._span_from(start),
        )

    def _parse_if_statement(self) -> IfNode:
        """Parse ``if (cond) { ... }`` with an optional else or else-if chain."""
        start = self._advance()  # consume 'if'
        self._consume(TokenType.LPAREN, "'('")
        condition = self._parse_expression()
        self._consume(TokenType.RPAREN, "')'")
        body = self._parse_block()

        else_case = None
        if self._match(TokenType.ELSE):
            if self._check(TokenType.IF):
                else_case = self._parse_if_statement()
            else:
                else_case = self._parse_block()

        return IfNode(
            condition=condition,
            body=body,
            else_case=else_case,
            span=self._span_from(start),
        )

    def _parse_return_statement(self) -> ReturnNode:
        """Parse ``return [value]``; the value must start on the same line."""
        start = self._advance()  # consume 'return'

        value = None
        same_line = self._current().span.start.line == start.span.end.line
        if same_line and not self._check_any(TokenType.RBRACE, TokenType.COMMA, TokenType.EOF):
            value = self._parse_expression()

        return ReturnNode(node=value, span=self._span_from(start))

    def _parse_statements(self, terminator: TokenType) -> List[Node]:
        """Parse statements up to (not including) the terminator token."""
        statements = []
        while not self._check(terminator) and not self._is_at_end():
            statements.append(self._parse_statement())
            self._match(TokenType.COMMA)
        return statements

    def _parse_block(self) -> StatementsNode:
        """Parse a brace-delimited block."""
        start = self._consume(TokenType.LBRACE, "'{'")
        statements = self._parse_statements(TokenType.RBRACE)
        self._consume(TokenType.RBRACE, "'}'")
        return StatementsNode(nodes=tuple(statements), span=self._span_from(start))

    def parse_program(self) -> StatementsNode:
        """Parse the whole token list; every token up to EOF must be consumed."""
        start = self._current()
        statements = self._parse_statements(TokenType.EOF)
        self._consume(TokenType.EOF, "end of input")
        return StatementsNode(nodes=tuple(statements), span=self._span_from(start))


def parse(tokens: List[Token], filename: Optional[str] = None) -> StatementsNode:
    """
    Convenience function to parse tokens into a program.

    Args:
        tokens: List of tokens from the lexer
        filename: Optional filename for error messages

    Returns:
        The program root as a StatementsNode

    Raises:
        ParseError: If parsing fails
    """
    parser = Parser(tokens, filename)
    return parser.parse_program()
