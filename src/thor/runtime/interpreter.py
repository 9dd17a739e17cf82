"""
Tree-walking interpreter for Thor.

Evaluates AST nodes against a Scope to produce runtime Values.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, List, Optional
import logging
import math

from .values import (
    Value, Number, Function, BuiltInFunction, ZERO, TRUE, FALSE,
    is_truthy, is_callable,
)
from .scope import Scope
from .builtins import call_builtin

from ..ast import (
    Node, NumberNode, BooleanNode, IdentifierNode, AssignmentNode,
    UnaryOpNode, BinaryOpNode, StatementsNode, FuncDefNode, FuncCallNode,
    IfNode, ReturnNode,
)
from ..errors import (
    ThorError,
    error_undefined_identifier,
    error_not_callable,
    error_not_a_number,
    error_arity_mismatch,
    error_division_by_zero,
    error_stack_overflow,
    error_nesting_too_deep,
)
from ..tokens import SourceSpan

logger = logging.getLogger("thor.interpreter")

DEFAULT_MAX_CALL_DEPTH = 64


@dataclass(frozen=True)
class Signal:
    """
    Outcome of executing a statement.

    ``returning`` is set when a return statement ran, so enclosing blocks
    stop and hand the value to the function call (or the program).
    """
    value: Value
    returning: bool = False


@dataclass
class ExecutionResult:
    """Result of running a program with :func:`run`."""
    success: bool
    value: Optional[Value] = None
    error_message: Optional[str] = None
    error: Optional[ThorError] = None
    tokens: Optional[str] = None    # token rendering, when requested
    ast: Optional[str] = None       # AST rendering, when requested


class Interpreter:
    """
    Tree-walking interpreter for Thor.

    Dispatches on the node class; every node type in the AST has an
    explicit branch in :meth:`evaluate`.

    Args:
        propagate_returns: When True (the default) a return inside an
            ``if`` ends the enclosing function. When False only a return
            that is a direct child of a block ends that block, and a
            return inside an ``if`` branch only ends the branch.
        max_call_depth: Nesting limit for user function calls.
    """

    def __init__(self, propagate_returns: bool = True,
                 max_call_depth: int = DEFAULT_MAX_CALL_DEPTH):
        self.propagate_returns = propagate_returns
        self.max_call_depth = max_call_depth
        self._depth = 0

    def evaluate(self, node: Node, scope: Scope) -> Value:
        """Evaluate a node to produce a Value."""
        if isinstance(node, NumberNode):
            return Number(node.value)
        elif isinstance(node, BooleanNode):
            return TRUE if node.value else FALSE
        elif isinstance(node, IdentifierNode):
            return self._eval_identifier(node, scope)
        elif isinstance(node, AssignmentNode):
            return self._eval_assignment(node, scope)
        elif isinstance(node, UnaryOpNode):
            return self._eval_unary_op(node, scope)
        elif isinstance(node, BinaryOpNode):
            return self._eval_binary_op(node, scope)
        elif isinstance(node, StatementsNode):
            return self._execute_block(node, scope).value
        elif isinstance(node, IfNode):
            return self._execute_if(node, scope).value
        elif isinstance(node, FuncDefNode):
            return self._eval_function_def(node, scope)
        elif isinstance(node, FuncCallNode):
            return self._eval_function_call(node, scope)
        elif isinstance(node, ReturnNode):
            return self._eval_return_value(node, scope)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    # =========================================================================
    # Statements
    # =========================================================================

    def _execute(self, node: Node, scope: Scope) -> Signal:
        """Execute a node in statement position."""
        if isinstance(node, ReturnNode):
            return Signal(self._eval_return_value(node, scope), returning=True)
        elif isinstance(node, StatementsNode):
            return self._execute_block(node, scope)
        elif isinstance(node, IfNode):
            return self._execute_if(node, scope)
        return Signal(self.evaluate(node, scope))

    def _execute_block(self, block: StatementsNode, scope: Scope) -> Signal:
        """Run statements in order; a block that does not return yields 0."""
        for node in block.nodes:
            signal = self._execute(node, scope)
            if signal.returning and (self.propagate_returns or isinstance(node, ReturnNode)):
                return signal
        return Signal(ZERO)

    def _execute_if(self, node: IfNode, scope: Scope) -> Signal:
        condition = self.evaluate(node.condition, scope)
        if is_truthy(condition):
            return self._execute(node.body, scope)
        if node.else_case is not None:
            return self._execute(node.else_case, scope)
        return Signal(ZERO)

    def _eval_return_value(self, node: ReturnNode, scope: Scope) -> Value:
        if node.node is None:
            return ZERO
        return self.evaluate(node.node, scope)

    def _eval_assignment(self, node: AssignmentNode, scope: Scope) -> Value:
        value = self.evaluate(node.node, scope)
        scope.set(node.identifier, value)
        return value

    def _eval_function_def(self, node: FuncDefNode, scope: Scope) -> Function:
        func = Function(node.name, node.arg_names, node.body)
        scope.set(node.name, func)
        logger.debug("Defined function %s(%s) in %s",
                     node.name, ", ".join(node.arg_names), scope.name)
        return func

    # =========================================================================
    # Expressions
    # =========================================================================

    def _eval_identifier(self, node: IdentifierNode, scope: Scope) -> Value:
        value = scope.get(node.name)
        if value is None:
            raise error_undefined_identifier(node.name, node.span)
        return value

    def _eval_unary_op(self, node: UnaryOpNode, scope: Scope) -> Number:
        operand = self._number(self.evaluate(node.node, scope), node.operator, node.node)
        if node.operator == "-":
            return Number(-operand)
        raise ValueError(f"Unknown unary operator: {node.operator}")

    def _eval_binary_op(self, node: BinaryOpNode, scope: Scope) -> Number:
        left = self._number(self.evaluate(node.left, scope), node.operator, node.left)
        right = self._number(self.evaluate(node.right, scope), node.operator, node.right)

        if node.operator == "+":
            return Number(left + right)
        elif node.operator == "-":
            return Number(left - right)
        elif node.operator == "*":
            return Number(left * right)
        elif node.operator == "/":
            if right == 0:
                raise error_division_by_zero(node.span)
            return Number(left / right)
        elif node.operator == "^":
            return Number(_power(left, right, node.span))
        raise ValueError(f"Unknown binary operator: {node.operator}")

    def _number(self, value: Value, operator: str, node: Node) -> float:
        if not isinstance(value, Number):
            raise error_not_a_number(f"operator '{operator}'", value.kind, node.span)
        return value.value

    # =========================================================================
    # Calls
    # =========================================================================

    def _eval_function_call(self, node: FuncCallNode, scope: Scope) -> Value:
        callee = scope.get(node.name)
        if callee is None:
            raise error_undefined_identifier(node.name, node.span)
        if not is_callable(callee):
            raise error_not_callable(node.name, callee.kind, node.span)

        # Arguments are evaluated in the caller's scope, left to right
        args = [self.evaluate(arg, scope) for arg in node.args]

        with _located(node.span):
            if isinstance(callee, BuiltInFunction):
                return call_builtin(callee, args)
            return self._call_function(callee, args, scope, node.span)

    def _call_function(self, func: Function, args: List[Value], scope: Scope,
                       span: Optional[SourceSpan]) -> Value:
        """Run a user function in a fresh child of the global scope."""
        if len(args) != func.arity:
            raise error_arity_mismatch(func.name, str(func.arity), len(args), span)
        if self._depth >= self.max_call_depth:
            raise error_stack_overflow(self.max_call_depth, span)

        call_scope = scope.globals.child(func.name)
        for name, value in zip(func.arg_names, args):
            call_scope.set(name, value)

        logger.debug("Calling %s with %d argument(s) at depth %d",
                     func.name, len(args), self._depth + 1)
        self._depth += 1
        try:
            return self._execute_block(func.body, call_scope).value
        except RecursionError:
            raise error_stack_overflow(self.max_call_depth, span) from None
        finally:
            self._depth -= 1


@contextmanager
def _located(span: Optional[SourceSpan]):
    """Attach ``span`` to Thor errors raised without a location."""
    try:
        yield
    except ThorError as err:
        if err.diagnostic.span is None:
            err.diagnostic.span = span
        raise


def _power(base: float, exponent: float, span: Optional[SourceSpan]) -> float:
    """IEEE power, except that zero to a negative power is a division error."""
    if base == 0 and exponent < 0:
        raise error_division_by_zero(span)
    try:
        return math.pow(base, exponent)
    except ValueError:
        # Negative base with a fractional exponent
        return math.nan
    except OverflowError:
        odd = exponent.is_integer() and exponent % 2 == 1
        return -math.inf if base < 0 and odd else math.inf


def run(
    source: str,
    options=None,
    scope: Optional[Scope] = None,
    interpreter: Optional[Interpreter] = None,
    filename: Optional[str] = None,
    on_log: Optional[Callable[[str, str], None]] = None,
) -> ExecutionResult:
    """
    Lex, parse and evaluate a program in one call.

    This is the simplest way to execute Thor code:

        from thor import run

        result = run('''
            fn add(a, b) { return a + b }
            return add(2, 3)
        ''')

        if result.success:
            print(result.value)
        else:
            print(f"Error: {result.error_message}")

    Errors never escape: a failing program yields ``success=False`` and
    the formatted message. Source nested too deeply for the host stack
    fails with a StackOverflow (E207).

    Args:
        source: Thor source code
        options: RunOptions; defaults to ``RunOptions()``
        scope: Global scope to run in; a fresh one from
            ``create_global_scope()`` when omitted
        interpreter: Interpreter to use; built from ``options`` when omitted
        filename: Optional filename for error messages
        on_log: Called as ``on_log("tokens", text)`` and ``on_log("ast", text)``
            when the matching option is set, before the program is evaluated

    Returns:
        ExecutionResult with the program value or the error
    """
    from ..lexer import tokenize, format_tokens
    from ..parser import parse
    from ..config import RunOptions, create_global_scope

    if options is None:
        options = RunOptions()
    result = ExecutionResult(success=False)

    def emit(stage: str, text: str) -> None:
        logger.debug("%s: %s", stage, text)
        if on_log is not None:
            on_log(stage, text)

    try:
        tokens = tokenize(source, filename)
        if options.log_tokens:
            result.tokens = format_tokens(tokens)
            emit("tokens", result.tokens)

        program = parse(tokens, filename)
        if options.log_ast:
            result.ast = str(program)
            emit("ast", result.ast)

        if scope is None:
            scope = create_global_scope()
        if interpreter is None:
            interpreter = Interpreter(
                propagate_returns=options.propagate_returns,
                max_call_depth=options.max_call_depth,
            )
        value = interpreter.evaluate(program, scope)
    except RecursionError:
        return _failed(result, error_nesting_too_deep(), source)
    except ThorError as err:
        return _failed(result, err, source)

    result.success = True
    result.value = value
    return result


def _failed(result: ExecutionResult, err: ThorError, source: str) -> ExecutionResult:
    err.with_source(source)
    logger.info("Program failed: %s", err.diagnostic.message)
    result.error = err
    result.error_message = str(err)
    return result
