"""
Built-in function registry for the Thor interpreter.

The registry is closed: every native function is registered once in
``BuiltinRegistry._register_all``. A ``BuiltInFunction`` value can only be
created for a registered name (see :func:`builtin_function`), so unknown
names fail when the global scope is populated rather than at call time.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import math

from .values import Value, Number, BuiltInFunction, ZERO
from ..errors import (
    error_not_a_number,
    error_arity_mismatch,
    error_configuration,
)


@dataclass
class Builtin:
    """
    A built-in function with its implementation and arity.

    ``max_args`` of None means the function is variadic.
    """
    name: str
    implementation: Callable[..., Value]
    min_args: int = 1
    max_args: Optional[int] = 1

    def check_arity(self, count: int) -> None:
        if self.max_args is None:
            if count < self.min_args:
                raise error_arity_mismatch(self.name, f"at least {self.min_args}", count)
        elif not self.min_args <= count <= self.max_args:
            if self.min_args == self.max_args:
                expected = str(self.min_args)
            else:
                expected = f"{self.min_args} to {self.max_args}"
            raise error_arity_mismatch(self.name, expected, count)

    def __call__(self, args: List[Value]) -> Value:
        self.check_arity(len(args))
        return self.implementation(*args)


def _number(name: str, value: Value) -> float:
    """Extract a float argument or raise a Thor TypeError."""
    if not isinstance(value, Number):
        raise error_not_a_number(f"{name}()", value.kind)
    return value.value


class BuiltinRegistry:
    """
    Registry of all built-in functions.

    Functions are registered by name and looked up for execution.
    """

    def __init__(self):
        self._functions: Dict[str, Builtin] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[Builtin]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: Builtin) -> None:
        self._functions[func.name] = func

    @property
    def names(self) -> List[str]:
        return sorted(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        """Register all built-in functions."""
        self._register_io_functions()
        self._register_math_functions()

    # --- I/O Functions ---

    def _register_io_functions(self) -> None:

        def _print(*args: Value) -> Value:
            """Print the rendering of each argument, separated by spaces."""
            print(" ".join(str(a) for a in args))
            return ZERO

        self.register(Builtin("print", _print, min_args=0, max_args=None))

    # --- Math Functions ---

    def _register_math_functions(self) -> None:
        """Register mathematical functions.

        Results follow IEEE floats: domain errors give nan and infinite
        inputs pass through instead of raising.
        """

        def _abs(x: Value) -> Value:
            return Number(abs(_number("abs", x)))

        def _sqrt(x: Value) -> Value:
            n = _number("sqrt", x)
            return Number(math.sqrt(n) if n >= 0 else math.nan)

        def _floor(x: Value) -> Value:
            n = _number("floor", x)
            return Number(math.floor(n) if math.isfinite(n) else n)

        def _ceil(x: Value) -> Value:
            n = _number("ceil", x)
            return Number(math.ceil(n) if math.isfinite(n) else n)

        def _round(x: Value) -> Value:
            # Halves round away from zero: round(2.5) is 3, round(-2.5) is -3
            n = _number("round", x)
            if not math.isfinite(n):
                return Number(n)
            return Number(math.copysign(math.floor(abs(n) + 0.5), n))

        def _trig(name: str, fn: Callable[[float], float]) -> Callable[[Value], Value]:
            def impl(x: Value) -> Value:
                n = _number(name, x)
                return Number(fn(n) if math.isfinite(n) else math.nan)
            return impl

        def _min(*args: Value) -> Value:
            return Number(min(_number("min", a) for a in args))

        def _max(*args: Value) -> Value:
            return Number(max(_number("max", a) for a in args))

        math_funcs = [
            ("abs", _abs),
            ("sqrt", _sqrt),
            ("floor", _floor),
            ("ceil", _ceil),
            ("round", _round),
            ("sin", _trig("sin", math.sin)),
            ("cos", _trig("cos", math.cos)),
            ("tan", _trig("tan", math.tan)),
        ]

        for name, impl in math_funcs:
            self.register(Builtin(name, impl))

        # Variadic min/max
        self.register(Builtin("min", _min, min_args=1, max_args=None))
        self.register(Builtin("max", _max, min_args=1, max_args=None))


# Global singleton registry
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in function registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry


def builtin_function(name: str) -> BuiltInFunction:
    """
    Create the runtime value for a registered built-in.

    Raises ConfigurationError if no built-in of that name exists.
    """
    if name not in get_builtin_registry():
        raise error_configuration(f"unknown builtin function '{name}'")
    return BuiltInFunction(name)


def call_builtin(func: BuiltInFunction, args: List[Value]) -> Value:
    """Invoke a built-in function value with evaluated arguments."""
    builtin = get_builtin_registry().get_function(func.name)
    if builtin is None:
        raise error_configuration(f"unknown builtin function '{func.name}'")
    return builtin(args)
