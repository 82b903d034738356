"""Side-effect-free arithmetic over already-rolled expressions.

Supports + - * / % with the usual precedence, unary +/-, parentheses, named
parameters and a fixed table of functions. The expression is parsed with
`ast` and only whitelisted nodes are evaluated; nothing is ever exec'd.
"""
from __future__ import annotations

import ast
import math
import operator
from typing import Any, Callable, Mapping

from dice_eval.errors import ExpressionError, InvalidArgCountError, NotEnoughArgsError


def _mod(left: float, right: float) -> float:
    # Truncated remainder: the sign follows the dividend.
    return math.fmod(left, right)


BINARY_OPERATORS: dict[type, Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: _mod,
}

UNARY_OPERATORS: dict[type, Callable[[float], float]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _one_arg(name: str, args: tuple[float, ...]) -> float:
    if len(args) != 1:
        raise InvalidArgCountError(f"{name}() takes exactly 1 argument ({len(args)} given)")
    return args[0]


def abs_(*args: float) -> float:
    return abs(_one_arg("abs", args))


def ceil(*args: float) -> float:
    x = _one_arg("ceil", args)
    if not math.isfinite(x):
        return x
    return float(math.ceil(x))


def floor(*args: float) -> float:
    x = _one_arg("floor", args)
    if not math.isfinite(x):
        return x
    return float(math.floor(x))


def round_(*args: float) -> float:
    """Round half away from zero: round(2.5) == 3, round(-2.5) == -3."""
    x = _one_arg("round", args)
    if not math.isfinite(x):
        return x
    return math.copysign(math.floor(abs(x) + 0.5), x)


def max_(*args: float) -> float:
    if not args:
        raise NotEnoughArgsError("max() requires at least 1 argument")
    return max(args)


def min_(*args: float) -> float:
    if not args:
        raise NotEnoughArgsError("min() requires at least 1 argument")
    return min(args)


FUNCTIONS: dict[str, Callable[..., float]] = {
    "abs": abs_,
    "ceil": ceil,
    "floor": floor,
    "max": max_,
    "min": min_,
    "round": round_,
}


def list_functions() -> list[str]:
    return sorted(FUNCTIONS)


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ExpressionError(f"parameter {name!r} is not a number: {value!r}")
    try:
        return float(value)
    except OverflowError:
        raise ExpressionError(f"parameter {name!r} is too large to evaluate") from None


def _eval(node: ast.AST, params: Mapping[str, Any]) -> float:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ExpressionError(f"unsupported literal: {node.value!r}")
        try:
            return float(node.value)
        except OverflowError:
            raise ExpressionError("integer literal too large to evaluate") from None

    if isinstance(node, ast.BinOp):
        op = BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise ExpressionError(f"unsupported operator: {type(node.op).__name__}")
        left = _eval(node.left, params)
        right = _eval(node.right, params)
        try:
            return op(left, right)
        except ZeroDivisionError:
            raise ExpressionError("division by zero") from None
        except OverflowError:
            raise ExpressionError("numeric overflow") from None
        except ValueError as exc:
            # math.fmod(x, 0) raises ValueError rather than ZeroDivisionError
            raise ExpressionError(f"invalid operation: {exc}") from None

    if isinstance(node, ast.UnaryOp):
        op = UNARY_OPERATORS.get(type(node.op))
        if op is None:
            raise ExpressionError(f"unsupported operator: {type(node.op).__name__}")
        return op(_eval(node.operand, params))

    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in FUNCTIONS:
            raise ExpressionError(f"unknown function: {ast.unparse(node.func)}")
        if node.keywords or any(isinstance(a, ast.Starred) for a in node.args):
            raise ExpressionError(f"{node.func.id}() takes positional arguments only")
        args = [_eval(arg, params) for arg in node.args]
        try:
            return FUNCTIONS[node.func.id](*args)
        except OverflowError:
            raise ExpressionError(f"numeric overflow in {node.func.id}()") from None

    if isinstance(node, ast.Name):
        if node.id not in params:
            raise ExpressionError(f"unknown name: {node.id!r}")
        return _number(params[node.id], node.id)

    raise ExpressionError(f"unsupported expression: {type(node).__name__}")


def evaluate_arithmetic(expression: str, params: Mapping[str, Any] | None = None) -> float:
    """Evaluate an arithmetic expression to a float.

    Raises:
        ExpressionError: for invalid syntax, unsupported constructs, unknown
            names, division by zero or numeric overflow.
        InvalidArgCountError, NotEnoughArgsError: for bad function calls.
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as exc:
        raise ExpressionError(f"invalid expression {expression!r}: {exc.msg}") from None
    return float(_eval(tree.body, params or {}))
