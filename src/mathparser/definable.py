"""
Heuristic detection of names a user still has to declare.

Scans a raw expression for identifiers so an application can ask for
variable values or function definitions before parsing.

LIMITATION:
    The scan assumes implicit multiplication is off. With it on, "xy" may
    be one variable or x times y, and "f(x)" may be a call or f times (x);
    the scanner always reads "xy" as one name and "f(" as a function.
"""

import re
from dataclasses import dataclass, field
from typing import FrozenSet, Set

from mathparser.names import BUILT_IN_FUNCTIONS, BUILT_IN_VARIABLES, IDENTIFIER_PATTERN


_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)
_FUNCTION_RE = re.compile(rf"({IDENTIFIER_PATTERN})\(")


@dataclass(frozen=True)
class Definable:
    """Names found in an expression."""
    variables: FrozenSet[str] = field(default_factory=frozenset)
    functions: FrozenSet[str] = field(default_factory=frozenset)


def potential_function_names(expression: str, hide_built_ins: bool = False) -> Set[str]:
    """
    Identifiers immediately followed by "(".

    Args:
        expression: Raw expression text
        hide_built_ins: Drop built-in functions like sin or log

    Returns:
        Set of candidate function names
    """
    found: Set[str] = set()
    for m in _FUNCTION_RE.finditer(expression):
        name = m.group(1)
        if hide_built_ins and name in BUILT_IN_FUNCTIONS:
            continue
        found.add(name)
    return found


def detect_definable(expression: str, hide_built_ins: bool = False) -> Definable:
    """
    Guess variable and function names used in an expression.

    Functions are identifiers followed by "(" (built-ins included).
    Variables are the remaining identifiers that are not built-in function
    keywords. With hide_built_ins, the constants e, pi and π are left out
    as well.

    Example:
        "f(x) + sin(y) + e" ->
            Definable(variables={"x", "y", "e"}, functions={"f", "sin"})
    """
    functions = potential_function_names(expression, hide_built_ins=False)

    variables: Set[str] = set()
    for m in _IDENTIFIER_RE.finditer(expression):
        name = m.group(0)
        if name in BUILT_IN_FUNCTIONS:
            continue
        if hide_built_ins and name in BUILT_IN_VARIABLES:
            continue
        if name in functions:
            continue
        variables.add(name)

    return Definable(variables=frozenset(variables), functions=frozenset(functions))


__all__ = ["Definable", "potential_function_names", "detect_definable"]
