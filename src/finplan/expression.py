"""Restricted arithmetic evaluator used by the experimental formula.

Only numbers, known parameter names, ``+ - * /``, exponentiation (``^`` or
``**``), unary signs and parentheses are accepted. The expression is parsed
with :mod:`ast` and walked by hand, never handed to ``eval``.
"""

import ast
import operator
import re
from typing import Dict, Mapping, Union

from .errors import InvalidExpression
from .utils import format_number

Number = Union[int, float]

MAX_EXPRESSION_LENGTH = 500

BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Pow: operator.pow,
}

UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

NAME_RE = re.compile(r"\b[A-Za-z_][A-Za-z0-9_]*\b")


def parse_expression(expression: str) -> ast.AST:
    """Parse ``expression`` into an AST, rejecting anything that is not arithmetic."""
    if not isinstance(expression, str) or not expression.strip():
        raise InvalidExpression(expression, "'generated_formula' is required for experimental formula.")
    if len(expression) > MAX_EXPRESSION_LENGTH:
        raise InvalidExpression(expression[:40] + "...", f"longer than {MAX_EXPRESSION_LENGTH} characters")
    # '^' is exponentiation in the formulas the plan generator writes
    source = expression.replace("^", "**")
    try:
        tree = ast.parse(source.strip(), mode="eval")
    except (SyntaxError, ValueError, RecursionError) as e:
        raise InvalidExpression(expression, f"cannot parse ({e.__class__.__name__})") from e
    return tree.body


def _eval_node(node: ast.AST, variables: Mapping[str, Number], expression: str) -> float:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise InvalidExpression(expression, f"unsupported literal {node.value!r}")
        # floats keep huge powers bounded: they overflow instead of growing
        return float(node.value)
    if isinstance(node, ast.Name):
        if node.id not in variables:
            raise InvalidExpression(expression, f"unknown name '{node.id}'")
        value = variables[node.id]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidExpression(expression, f"'{node.id}' is not numeric")
        return float(value)
    if isinstance(node, ast.BinOp) and type(node.op) in BINARY_OPERATORS:
        left = _eval_node(node.left, variables, expression)
        right = _eval_node(node.right, variables, expression)
        return BINARY_OPERATORS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in UNARY_OPERATORS:
        return UNARY_OPERATORS[type(node.op)](_eval_node(node.operand, variables, expression))
    raise InvalidExpression(expression, f"unsupported syntax {node.__class__.__name__}")


def evaluate_expression(expression: str, variables: Mapping[str, Number]) -> float:
    """
    Evaluate an arithmetic expression over named numeric variables.

    Arithmetic faults (ZeroDivisionError, OverflowError) propagate to the caller,
    which decides how to report them.
    """
    tree = parse_expression(expression)
    try:
        return _eval_node(tree, variables, expression)
    except RecursionError as e:
        raise InvalidExpression(expression, "nested too deeply") from e


def substitute_names(expression: str, variables: Dict[str, object]) -> str:
    """Replace each whole-word variable name in ``expression`` with its value."""

    def replace(match: "re.Match[str]") -> str:
        name = match.group(0)
        if name in variables:
            return format_number(variables[name])
        return name

    return NAME_RE.sub(replace, expression)
