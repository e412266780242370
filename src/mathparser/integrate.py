"""
Numerical definite integrals of parsed expressions.

Every helper samples node.calc() at points generated with numpy, binding
the integration variable (x by default), and combines the samples with a
classic quadrature rule.

    n: number of sub-intervals (precision), a positive integer
"""

from typing import Optional

import numpy as np

from mathparser.expressions import Node
from mathparser.model import CustomFunctions, VariableValues


def _check_steps(n: int) -> None:
    if not isinstance(n, (int, np.integer)) or n < 1:
        raise ValueError(f"Precision must be a positive integer, got {n!r}")


def _sample(node: Node, points: np.ndarray, variable: str,
            custom_functions: Optional[CustomFunctions]) -> np.ndarray:
    return np.array(
        [node.calc(VariableValues({variable: float(p)}), custom_functions) for p in points],
        dtype=float,
    )


def definite_integral_by_left_rectangles(
    node: Node,
    n: int,
    lower_limit: float,
    upper_limit: float,
    variable: str = "x",
    custom_functions: Optional[CustomFunctions] = None,
) -> float:
    """Rectangles sampled at the left end of each sub-interval."""
    _check_steps(n)
    points = np.linspace(lower_limit, upper_limit, n + 1)[:-1]
    values = _sample(node, points, variable, custom_functions)
    return float((upper_limit - lower_limit) / n * values.sum())


def definite_integral_by_right_rectangles(
    node: Node,
    n: int,
    lower_limit: float,
    upper_limit: float,
    variable: str = "x",
    custom_functions: Optional[CustomFunctions] = None,
) -> float:
    """Rectangles sampled at the right end of each sub-interval."""
    _check_steps(n)
    points = np.linspace(lower_limit, upper_limit, n + 1)[1:]
    values = _sample(node, points, variable, custom_functions)
    return float((upper_limit - lower_limit) / n * values.sum())


def definite_integral_by_middle_rectangles(
    node: Node,
    n: int,
    lower_limit: float,
    upper_limit: float,
    variable: str = "x",
    custom_functions: Optional[CustomFunctions] = None,
) -> float:
    """Rectangles sampled at the midpoint of each sub-interval."""
    _check_steps(n)
    step = (upper_limit - lower_limit) / n
    points = lower_limit + step / 2 + step * np.arange(n)
    values = _sample(node, points, variable, custom_functions)
    return float(step * values.sum())


def definite_integral_by_trapezoids(
    node: Node,
    n: int,
    lower_limit: float,
    upper_limit: float,
    variable: str = "x",
    custom_functions: Optional[CustomFunctions] = None,
) -> float:
    """Trapezoid rule over n equal sub-intervals."""
    _check_steps(n)
    points = np.linspace(lower_limit, upper_limit, n + 1)
    values = _sample(node, points, variable, custom_functions)
    total = (values[0] + values[-1]) / 2 + values[1:-1].sum()
    return float(total * (upper_limit - lower_limit) / n)


def definite_integral_by_simpson(
    node: Node,
    n: int,
    lower_limit: float,
    upper_limit: float,
    variable: str = "x",
    custom_functions: Optional[CustomFunctions] = None,
) -> float:
    """
    Simpson's rule over n sub-intervals.

    Interior samples are weighted 4 (odd index) and 2 (even index); n
    should be even for the rule to be exact on cubics.
    """
    _check_steps(n)
    points = np.linspace(lower_limit, upper_limit, n + 1)
    values = _sample(node, points, variable, custom_functions)
    weights = np.where(np.arange(1, n) % 2 == 1, 4.0, 2.0)
    total = values[0] + values[-1] + (weights * values[1:-1]).sum()
    return float(total * (upper_limit - lower_limit) / n / 3)


__all__ = [
    "definite_integral_by_left_rectangles",
    "definite_integral_by_right_rectangles",
    "definite_integral_by_middle_rectangles",
    "definite_integral_by_trapezoids",
    "definite_integral_by_simpson",
]
