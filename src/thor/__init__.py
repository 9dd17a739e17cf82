"""
Thor - a minimal scripting language.

This package provides:
- Lexer: Tokenizes source text
- Parser: Builds the AST from tokens
- Interpreter: Evaluates the AST against a global Scope
- Config: Run options, YAML configuration and global environment setup

Usage:
    from thor import run, RunOptions

    result = run('''
        x = 2
        y = 3
        fn add(a, b) { return a + b }
        print(add(x, y))
    ''', RunOptions(log_ast=True))
    if not result.success:
        print(result.error_message)

Or step by step:
    from thor import tokenize, parse, Interpreter, create_global_scope

    program = parse(tokenize("return 2 + 3 * 4"))
    value = Interpreter().evaluate(program, create_global_scope())
"""

import logging

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
    format_tokens,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    Node,
    NumberNode,
    BooleanNode,
    IdentifierNode,
    AssignmentNode,
    UnaryOpNode,
    BinaryOpNode,
    StatementsNode,
    FuncDefNode,
    FuncCallNode,
    IfNode,
    ReturnNode,
    format_number,
)

from .errors import (
    ThorError,
    LexError,
    ParseError,
    RuntimeError,
    NameError,
    TypeError,
    ArityError,
    DivisionError,
    StackOverflow,
    ConfigurationError,
    Diagnostic,
    ErrorSeverity,
)

from .runtime import (
    Value,
    Number,
    Boolean,
    Function,
    BuiltInFunction,
    is_truthy,
    Scope,
    BuiltinRegistry,
    get_builtin_registry,
    builtin_function,
    Interpreter,
    ExecutionResult,
    run,
)

from .config import (
    RunOptions,
    ThorConfig,
    load_config,
    create_global_scope,
)

logging.getLogger("thor").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',
    # Lexer
    'Lexer',
    'tokenize',
    'format_tokens',
    # Parser
    'Parser',
    'parse',
    # AST
    'Node',
    'NumberNode',
    'BooleanNode',
    'IdentifierNode',
    'AssignmentNode',
    'UnaryOpNode',
    'BinaryOpNode',
    'StatementsNode',
    'FuncDefNode',
    'FuncCallNode',
    'IfNode',
    'ReturnNode',
    'format_number',
    # Errors
    'ThorError',
    'LexError',
    'ParseError',
    'RuntimeError',
    'NameError',
    'TypeError',
    'ArityError',
    'DivisionError',
    'StackOverflow',
    'ConfigurationError',
    'Diagnostic',
    'ErrorSeverity',
    # Runtime
    'Value',
    'Number',
    'Boolean',
    'Function',
    'BuiltInFunction',
    'is_truthy',
    'Scope',
    'BuiltinRegistry',
    'get_builtin_registry',
    'builtin_function',
    'Interpreter',
    'ExecutionResult',
    'run',
    # Config
    'RunOptions',
    'ThorConfig',
    'load_config',
    'create_global_scope',
]
