"""
Identifier rules and built-in keyword tables.

A name is valid when it:
    - starts with a Latin or Greek letter, or an underscore (functions only)
    - continues with letters, digits, underscores or periods
    - does not end with a period
    - optionally ends with apostrophes (y', y'')

Variable names may not shadow built-in functions. Custom function names
may, which overrides the built-in.
"""

import re
from typing import Iterable

from mathparser.errors import (
    DuplicateDeclarationError,
    InvalidFunctionArgumentsDeclarationError,
    InvalidFunctionNameError,
    InvalidVariableNameError,
)
from mathparser.model import FunctionDefinition


BUILT_IN_VARIABLES = frozenset({"e", "pi", "π"})

BUILT_IN_FUNCTIONS = frozenset({
    "sin", "cos", "tan", "tg", "cot", "ctg",
    "sqrt", "√",
    "ln", "lg", "log",
    "asin", "acos", "atan", "acot",
    "arcsin", "arccos", "arctg", "arcctg",
})

_LETTER = "a-zA-Zα-ωΑ-Ω"
IDENTIFIER_PATTERN = rf"[{_LETTER}_](?:[{_LETTER}0-9_.]*[{_LETTER}0-9_])?'*"

_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)


def is_name_valid(name: str, is_function: bool = False) -> bool:
    """
    Check whether the parser can use `name` as a variable or function name.

    Args:
        name: Candidate identifier
        is_function: Validate as a custom function name

    Returns:
        True if the name can be declared
    """
    if not isinstance(name, str) or not _IDENTIFIER_RE.fullmatch(name):
        return False
    if is_function:
        return True
    return not name.startswith("_") and name not in BUILT_IN_FUNCTIONS


def check_name(name: str, is_function: bool = False) -> None:
    """Raise InvalidVariableNameError / InvalidFunctionNameError for bad names."""
    if is_name_valid(name, is_function=is_function):
        return
    if is_function:
        raise InvalidFunctionNameError(name)
    raise InvalidVariableNameError(name)


def check_declarations(
    variable_names: Iterable[str],
    custom_functions: Iterable[FunctionDefinition],
) -> None:
    """
    Validate everything a caller declares before parsing.

    Raises:
        InvalidVariableNameError: Bad variable name
        InvalidFunctionNameError: Bad function name
        InvalidFunctionArgumentsDeclarationError: min_args < 0 or max_args < min_args
        DuplicateDeclarationError: Function name also declared as a variable
    """
    variable_names = set(variable_names)
    for name in variable_names:
        check_name(name)

    for definition in custom_functions:
        check_name(definition.name, is_function=True)

        if definition.min_args < 0 or definition.max_args < definition.min_args:
            raise InvalidFunctionArgumentsDeclarationError(str(definition))

        if definition.name in variable_names:
            raise DuplicateDeclarationError(str(definition))


__all__ = [
    "BUILT_IN_VARIABLES",
    "BUILT_IN_FUNCTIONS",
    "IDENTIFIER_PATTERN",
    "is_name_valid",
    "check_name",
    "check_declarations",
]
