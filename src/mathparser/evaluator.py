"""
Expression interpreter: evaluation and inventory of expression trees.

This module walks the immutable trees from mathparser.expressions:
    - calc(): numeric value (None for an "=" that does not hold)
    - evaluate(): truth value of comparisons (1.0 / 0.0)
    - used_variables(): names of referenced variables
    - used_freeform_functions(): definitions of referenced custom functions

Arithmetic is done on numpy.float64 with floating point warnings silenced,
so division by zero, log of a non-positive number and similar cases give
inf / nan instead of raising.
"""

from typing import Callable, Dict, Mapping, Optional, Set

import numpy as np

from mathparser.errors import ExpressionTooDeepError
from mathparser.expressions import (
    BinaryExpression,
    BinaryOperator,
    Comparison,
    ComparisonOperator,
    Constant,
    Expression,
    FreeformCall,
    Node,
    UnaryExpression,
    UnaryOperator,
    Variable,
)
from mathparser.model import CustomFunctions, FunctionDefinition, VariableValues


_UNARY: Dict[UnaryOperator, Callable[[np.float64], np.float64]] = {
    UnaryOperator.NEGATE: np.negative,
    UnaryOperator.SIN: np.sin,
    UnaryOperator.COS: np.cos,
    UnaryOperator.TAN: np.tan,
    UnaryOperator.COT: lambda v: 1 / np.tan(v),
    UnaryOperator.ASIN: np.arcsin,
    UnaryOperator.ACOS: np.arccos,
    UnaryOperator.ATAN: np.arctan,
    UnaryOperator.ACOT: lambda v: np.arctan(1 / v),
    UnaryOperator.EXP: np.exp,
}

_BINARY: Dict[BinaryOperator, Callable[[np.float64, np.float64], np.float64]] = {
    BinaryOperator.ADD: np.add,
    BinaryOperator.SUBTRACT: np.subtract,
    BinaryOperator.MULTIPLY: np.multiply,
    BinaryOperator.DIVIDE: np.divide,
    BinaryOperator.POWER: np.power,
    BinaryOperator.LOG: lambda base, arg: np.log(arg) / np.log(base),
}

_INEQUALITIES: Dict[ComparisonOperator, Callable[[float, float], bool]] = {
    ComparisonOperator.GREATER: lambda a, b: a > b,
    ComparisonOperator.LESS: lambda a, b: a < b,
    ComparisonOperator.GREATER_EQUAL: lambda a, b: a >= b,
    ComparisonOperator.LESS_EQUAL: lambda a, b: a <= b,
}


def _environment(values: Optional[Mapping[str, float]]) -> VariableValues:
    if isinstance(values, VariableValues):
        return values
    return VariableValues(values)


def _calc_node(node: Node, values: VariableValues, functions: CustomFunctions) -> np.float64:
    """Recursively compute a numeric node."""
    if isinstance(node, Constant):
        return np.float64(node.value)

    if isinstance(node, Variable):
        return np.float64(values[node.name])

    if isinstance(node, UnaryExpression):
        return _UNARY[node.operator](_calc_node(node.operand, values, functions))

    if isinstance(node, BinaryExpression):
        left = _calc_node(node.left, values, functions)
        right = _calc_node(node.right, values, functions)
        return _BINARY[node.operator](left, right)

    if isinstance(node, FreeformCall):
        definition = node.definition
        if not definition.is_implemented:
            definition = functions[definition]
        return np.float64(definition.implementation(node.arguments, values, functions))

    raise TypeError(f"Unsupported Node type: {type(node)}")


def _sides(expr: Comparison, values: VariableValues, functions: CustomFunctions):
    left = _calc(expr.left, values, functions)
    right = _calc(expr.right, values, functions)
    return left, right


def _compare(expr: Comparison, values: VariableValues, functions: CustomFunctions) -> Optional[float]:
    """
    Value of a comparison.

    EQUALS yields the shared value, or None when the sides differ (a side
    without result never equals a number). Inequalities yield the winning
    side: the left value when the relation holds, the right one otherwise,
    and None when a side has no result.
    """
    left, right = _sides(expr, values, functions)
    if expr.operator is ComparisonOperator.EQUALS:
        return left if left == right else None
    if left is None or right is None:
        return None
    if _INEQUALITIES[expr.operator](left, right):
        return left
    return right


def _truth(expr: Comparison, values: VariableValues, functions: CustomFunctions) -> Optional[float]:
    left, right = _sides(expr, values, functions)
    if expr.operator is ComparisonOperator.EQUALS:
        return 1.0 if left == right else 0.0
    if left is None or right is None:
        return None
    return 1.0 if _INEQUALITIES[expr.operator](left, right) else 0.0


def _calc(expr: Expression, values: VariableValues, functions: CustomFunctions) -> Optional[float]:
    if isinstance(expr, Node):
        return float(_calc_node(expr, values, functions))

    if isinstance(expr, Comparison):
        return _compare(expr, values, functions)

    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def calc(
    expr: Expression,
    values: Optional[Mapping[str, float]] = None,
    custom_functions: Optional[CustomFunctions] = None,
) -> Optional[float]:
    """
    Compute the value of an expression.

    Args:
        expr: Node or Comparison
        values: Variable values
        custom_functions: Implementations for freeform functions that were
            declared without one

    Returns:
        float for nodes. For "=" the shared value if both sides are equal,
        else None. For inequalities the left value if the relation holds,
        else the right value.

    Raises:
        UndefinedVariableError: If a variable has no value
        UndefinedFunctionError: If a freeform function has no implementation
        ExpressionTooDeepError: If the tree is too deep to walk
    """
    try:
        with np.errstate(all="ignore"):
            return _calc(expr, _environment(values), custom_functions or CustomFunctions())
    except RecursionError as exc:
        raise ExpressionTooDeepError() from exc


def evaluate(
    expr: Expression,
    values: Optional[Mapping[str, float]] = None,
    custom_functions: Optional[CustomFunctions] = None,
) -> Optional[float]:
    """
    Compute the truth value of an expression.

    Comparisons give 1.0 when the relation holds and 0.0 when it does not.
    An inequality with a side that has no result gives None; for "=" such
    a side simply differs from the other one. Nodes give their calc() value.
    """
    if not isinstance(expr, Comparison):
        return calc(expr, values, custom_functions)

    try:
        with np.errstate(all="ignore"):
            return _truth(expr, _environment(values), custom_functions or CustomFunctions())
    except RecursionError as exc:
        raise ExpressionTooDeepError() from exc




def _used_variables(expr: Expression) -> Set[str]:
    """Recursively collect variable names."""
    if isinstance(expr, Variable):
        return {expr.name}
    if isinstance(expr, Constant):
        return set()
    if isinstance(expr, UnaryExpression):
        return _used_variables(expr.operand)
    if isinstance(expr, (BinaryExpression, Comparison)):
        return _used_variables(expr.left) | _used_variables(expr.right)
    if isinstance(expr, FreeformCall):
        names: Set[str] = set()
        for argument in expr.arguments:
            names.update(_used_variables(argument))
        return names
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def _used_freeform_functions(expr: Expression) -> Set[FunctionDefinition]:
    """Recursively collect custom function definitions."""
    if isinstance(expr, (Variable, Constant)):
        return set()
    if isinstance(expr, UnaryExpression):
        return _used_freeform_functions(expr.operand)
    if isinstance(expr, (BinaryExpression, Comparison)):
        return _used_freeform_functions(expr.left) | _used_freeform_functions(expr.right)
    if isinstance(expr, FreeformCall):
        definitions = {expr.definition}
        for argument in expr.arguments:
            definitions.update(_used_freeform_functions(argument))
        return definitions
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def used_variables(expr: Expression) -> Set[str]:
    """Names of all variables referenced by the tree."""
    try:
        return _used_variables(expr)
    except RecursionError as exc:
        raise ExpressionTooDeepError() from exc


def used_freeform_functions(expr: Expression) -> Set[FunctionDefinition]:
    """Definitions of all custom functions referenced by the tree."""
    try:
        return _used_freeform_functions(expr)
    except RecursionError as exc:
        raise ExpressionTooDeepError() from exc


__all__ = ["calc", "evaluate", "used_variables", "used_freeform_functions"]
