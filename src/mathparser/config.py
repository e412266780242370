"""
Parser configuration.

ParseOptions bundles every switch that changes how a string is read.
It is immutable so one instance can be reused across parse calls.
"""

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable, Optional, Union

from mathparser.model import CustomFunctions, FunctionDefinition


DEFAULT_MAX_DEPTH = 100


@dataclass(frozen=True)
class ParseOptions:
    """
    Settings for parse() and parse_extended().

    Properties:
        is_minus_negative_function:
            Read X - Y as X + (-Y)
        is_implicit_multiplication:
            Allow omitting "*" between two operands (2x, (a)(b))
        variable_names:
            Tokens that become variables. Defaults to {"x"}.
            Declaring "e" or "pi" overrides the built-in constant.
        custom_functions:
            Declared freeform functions (CustomFunctions or an iterable
            of FunctionDefinition)
        max_depth:
            Deepest allowed bracket nesting
    """

    is_minus_negative_function: bool = False
    is_implicit_multiplication: bool = True
    variable_names: FrozenSet[str] = frozenset({"x"})
    custom_functions: Union[CustomFunctions, Iterable[FunctionDefinition]] = field(
        default_factory=CustomFunctions
    )
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        names = self.variable_names
        if isinstance(names, str):
            names = [names]
        object.__setattr__(self, "variable_names", frozenset(names))

        if not isinstance(self.custom_functions, CustomFunctions):
            object.__setattr__(self, "custom_functions", CustomFunctions(self.custom_functions))

        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    def with_settings(self, **settings: Any) -> "ParseOptions":
        """Copy of these options with some fields replaced."""
        if not settings:
            return self
        return replace(self, **settings)


def resolve_options(options: Optional[ParseOptions] = None, **settings: Any) -> ParseOptions:
    """Combine an optional ParseOptions with keyword overrides."""
    if options is None:
        return ParseOptions(**settings)
    return options.with_settings(**settings)


__all__ = ["ParseOptions", "DEFAULT_MAX_DEPTH", "resolve_options"]
