"""
Runtime values for the Thor interpreter.

The value set is closed: Number, Boolean, Function and BuiltInFunction.
Values are immutable; calling a function never mutates its arguments.
"""

from dataclasses import dataclass, field
from typing import Tuple

from ..ast import StatementsNode, format_number


@dataclass(frozen=True)
class Value:
    """Base class for runtime values."""

    @property
    def kind(self) -> str:
        """Name of the value variant, used in error messages."""
        return type(self).__name__


@dataclass(frozen=True)
class Number(Value):
    """A floating-point number."""
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class Boolean(Value):
    """A boolean."""
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Function(Value):
    """
    A user-defined function.

    Holds the parameter names and body only. Calls run in a fresh scope
    whose parent is the global scope, never the defining or calling scope.
    """
    name: str
    arg_names: Tuple[str, ...]
    body: StatementsNode = field(repr=False)

    def __post_init__(self):
        object.__setattr__(self, "arg_names", tuple(self.arg_names))

    @property
    def arity(self) -> int:
        return len(self.arg_names)

    def __str__(self) -> str:
        return f"<fn {self.name}>"


@dataclass(frozen=True)
class BuiltInFunction(Value):
    """
    A native function, identified by its registered name.

    Create these with :func:`thor.runtime.builtins.builtin_function`, which
    rejects names that have no registered implementation.
    """
    name: str

    def __str__(self) -> str:
        return f"<builtin {self.name}>"


ZERO = Number(0.0)
TRUE = Boolean(True)
FALSE = Boolean(False)


def is_truthy(value: Value) -> bool:
    """Booleans use their value, numbers are truthy iff nonzero, functions are truthy."""
    if isinstance(value, Boolean):
        return value.value
    if isinstance(value, Number):
        return value.value != 0
    return True


def is_callable(value: Value) -> bool:
    return isinstance(value, (Function, BuiltInFunction))
