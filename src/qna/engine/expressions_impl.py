"""
Restricted evaluator for condition and mapping-source expressions.

Expressions are parsed with the ``ast`` module and walked explicitly; nothing
is passed to eval(). Bundles are usually written with C-style operators, so
``!``, ``&&``, ``||``, ``===``, ``!==``, ``true``, ``false`` and ``null`` are
translated before parsing.

Allowed:
  - Parameter names (unknown names resolve to None)
  - Literals: numbers, strings, booleans, None, lists/tuples
  - Logical: and, or, not
  - Arithmetic: + - * / // %, unary + and -
  - Comparisons: == != < <= > >= in, not in
  - Conditional: a if b else c
"""

from __future__ import annotations

import ast
import operator
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from ..errors import ExpressionError
from .expressions import ExpressionEvaluator

_C_STYLE = re.compile(
    r"""("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')"""  # string literals pass through
    r"|(===|!==|&&|\|\||!(?!=)|\btrue\b|\bfalse\b|\bnull\b)"
)

_REPLACEMENTS = {
    "===": "==",
    "!==": "!=",
    "&&": " and ",
    "||": " or ",
    "!": " not ",
    "true": "True",
    "false": "False",
    "null": "None",
}

_BIN_OPS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
}

_CMP_OPS: dict[type, Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
}


def translate_c_style(expression: str) -> str:
    def _sub(m: re.Match[str]) -> str:
        if m.group(1) is not None:
            return m.group(1)
        return _REPLACEMENTS[m.group(2)]

    return _C_STYLE.sub(_sub, expression).strip()


def parse_expression(expression: str) -> ast.expr:
    try:
        tree = ast.parse(translate_c_style(expression), mode="eval")
    except SyntaxError as e:
        raise ExpressionError(
            f"Syntax error in expression '{expression}': {e.msg}",
            data={"expression": expression},
        ) from e
    return tree.body


def _eval(node: ast.AST, params: Mapping[str, Any], expression: str) -> Any:
    if isinstance(node, ast.Constant):
        if not isinstance(node.value, (int, float, str, bool, type(None))):
            raise ExpressionError(f"Disallowed constant in '{expression}'.", data={"expression": expression})
        return node.value

    if isinstance(node, ast.Name):
        return params.get(node.id)

    if isinstance(node, ast.BoolOp):
        if isinstance(node.op, ast.And):
            result: Any = True
            for v in node.values:
                result = _eval(v, params, expression)
                if not result:
                    return result
            return result
        result = False
        for v in node.values:
            result = _eval(v, params, expression)
            if result:
                return result
        return result

    if isinstance(node, ast.UnaryOp):
        operand = _eval(node.operand, params, expression)
        if isinstance(node.op, ast.Not):
            return not operand
        if isinstance(node.op, (ast.USub, ast.UAdd)):
            if isinstance(operand, (int, float)):
                return -operand if isinstance(node.op, ast.USub) else +operand
            raise ExpressionError(
                f"Cannot negate non-numeric value {operand!r} in '{expression}'.",
                data={"expression": expression},
            )

    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        left = _eval(node.left, params, expression)
        right = _eval(node.right, params, expression)
        try:
            return _BIN_OPS[type(node.op)](left, right)
        except (TypeError, ZeroDivisionError) as e:
            raise ExpressionError(
                f"Cannot evaluate '{expression}' with {left!r} and {right!r}: {e}",
                data={"expression": expression},
            ) from e

    if isinstance(node, ast.Compare):
        left = _eval(node.left, params, expression)
        for op, comparator in zip(node.ops, node.comparators):
            fn = _CMP_OPS.get(type(op))
            if fn is None:
                break
            right = _eval(comparator, params, expression)
            try:
                ok = fn(left, right)
            except TypeError as e:
                raise ExpressionError(
                    f"Cannot compare {left!r} and {right!r} in '{expression}'.",
                    data={"expression": expression},
                ) from e
            if not ok:
                return False
            left = right
        else:
            return True

    if isinstance(node, (ast.List, ast.Tuple)):
        return [_eval(elt, params, expression) for elt in node.elts]

    if isinstance(node, ast.IfExp):
        if _eval(node.test, params, expression):
            return _eval(node.body, params, expression)
        return _eval(node.orelse, params, expression)

    raise ExpressionError(
        f"Unsupported element {type(node).__name__} in expression '{expression}'.",
        data={"expression": expression, "node_type": type(node).__name__},
    )


@dataclass(frozen=True)
class DefaultExpressionEvaluator(ExpressionEvaluator):
    """
    Evaluates bundle expressions against a parameter mapping.
    No string-eval; all logic is explicit and auditable.
    """

    def evaluate(self, expression: str, parameters: Mapping[str, Any]) -> Any:
        return _eval(parse_expression(expression), parameters, expression)

    def eval_truth(self, expression: str, parameters: Mapping[str, Any]) -> bool:
        return bool(self.evaluate(expression, parameters))

    def eval_number(self, expression: str, parameters: Mapping[str, Any]) -> int | float:
        result = self.evaluate(expression, parameters)
        if isinstance(result, bool):
            return int(result)
        if isinstance(result, (int, float)):
            return result
        raise ExpressionError(
            f"Expression '{expression}' did not produce a number (got {result!r}).",
            data={"expression": expression},
        )
