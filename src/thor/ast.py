"""
Abstract Syntax Tree (AST) node definitions for Thor.

The node set is closed: the parser only ever produces the classes defined
here and the interpreter handles each of them explicitly.

Each node renders to a canonical source form with ``str(node)``. The
rendering is reparsable: lexing and parsing it yields a tree that
evaluates to the same value.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple
from abc import ABC
import math

from .tokens import SourceSpan


def format_number(value: float) -> str:
    """Shortest positional decimal for a float (``2``, ``0.5``, ``0.0000001``)."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _indent(text: str) -> str:
    return "\n".join(f"  {line}" if line else line for line in text.splitlines())


def _block(body: "StatementsNode") -> str:
    if not body.nodes:
        return "{ }"
    return "{\n" + _indent(str(body)) + "\n}"


# =============================================================================
# Base Class
# =============================================================================

@dataclass(frozen=True)
class Node(ABC):
    """Base class for all AST nodes."""


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberNode(Node):
    """A numeric literal."""
    value: float
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        if self.value < 0:
            return f"(-{format_number(-self.value)})"
        return format_number(self.value)


@dataclass(frozen=True)
class BooleanNode(Node):
    """A boolean literal (``true`` or ``false``)."""
    value: bool
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class IdentifierNode(Node):
    """A variable reference."""
    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class UnaryOpNode(Node):
    """Arithmetic negation (``-x``)."""
    operator: str
    node: Node
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"({self.operator}{self.node})"


@dataclass(frozen=True)
class BinaryOpNode(Node):
    """A binary arithmetic operation (``+ - * / ^``)."""
    left: Node
    operator: str
    right: Node
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class FuncCallNode(Node):
    """A call of a named function, e.g. ``add(x, 1)``."""
    name: str
    args: Tuple[Node, ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(a) for a in self.args)})"


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class AssignmentNode(Node):
    """Bind the value of ``node`` to ``identifier`` in the current scope."""
    identifier: str
    node: Node
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.identifier} = {self.node}"


@dataclass(frozen=True)
class StatementsNode(Node):
    """A block of statements executed in order.

    The program root is a StatementsNode, as is the body of every
    function and ``if`` branch.
    """
    nodes: Tuple[Node, ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))

    def __str__(self) -> str:
        return ",\n".join(str(n) for n in self.nodes)


@dataclass(frozen=True)
class FuncDefNode(Node):
    """A named function definition.

    Syntax:
        fn name(a, b) {
          return a + b
        }
    """
    name: str
    arg_names: Tuple[str, ...]
    body: StatementsNode
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "arg_names", tuple(self.arg_names))

    def __str__(self) -> str:
        return f"fn {self.name}({', '.join(self.arg_names)}) {_block(self.body)}"


@dataclass(frozen=True)
class IfNode(Node):
    """A conditional.

    ``else_case`` is either a StatementsNode (``else { ... }``) or another
    IfNode (``else if (...) { ... }``).
    """
    condition: Node
    body: StatementsNode
    else_case: Optional[Node] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        text = f"if ({self.condition}) {_block(self.body)}"
        if isinstance(self.else_case, IfNode):
            text += f" else {self.else_case}"
        elif isinstance(self.else_case, StatementsNode):
            text += f" else {_block(self.else_case)}"
        elif self.else_case is not None:
            text += f" else {_block(StatementsNode((self.else_case,)))}"
        return text


@dataclass(frozen=True)
class ReturnNode(Node):
    """Early exit from the enclosing function (or program)."""
    node: Optional[Node] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        if self.node is None:
            return "return"
        return f"return {self.node}"
