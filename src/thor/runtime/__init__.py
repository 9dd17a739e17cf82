"""
Thor runtime - tree-walking interpreter.

This module provides:
- Interpreter: Evaluates AST nodes against a Scope
- Values: Number, Boolean, Function, BuiltInFunction
- Scope: Symbol tables for the global and per-call environments
- BuiltinRegistry: Built-in function implementations
"""

from .values import (
    Value,
    Number,
    Boolean,
    Function,
    BuiltInFunction,
    ZERO,
    TRUE,
    FALSE,
    is_truthy,
    is_callable,
)

from .scope import Scope

from .builtins import (
    Builtin,
    BuiltinRegistry,
    get_builtin_registry,
    builtin_function,
    call_builtin,
)

from .interpreter import (
    Interpreter,
    Signal,
    ExecutionResult,
    DEFAULT_MAX_CALL_DEPTH,
    run,
)

__all__ = [
    # Values
    'Value',
    'Number',
    'Boolean',
    'Function',
    'BuiltInFunction',
    'ZERO',
    'TRUE',
    'FALSE',
    'is_truthy',
    'is_callable',

    # Scope
    'Scope',

    # Builtins
    'Builtin',
    'BuiltinRegistry',
    'get_builtin_registry',
    'builtin_function',
    'call_builtin',

    # Interpreter
    'Interpreter',
    'Signal',
    'ExecutionResult',
    'DEFAULT_MAX_CALL_DEPTH',
    'run',
]
