"""
Evaluation Environment Objects

Defines the data handed to the parser and to calc() alongside an
expression tree:
    - VariableValues (variable name -> number)
    - FunctionDefinition (a declared custom function)
    - CustomFunctions (a set of declared custom functions)

ARCHITECTURAL RULE:
    These objects:
        - Are immutable once created
        - Know nothing about parsing
        - Are shared freely between parse and calc calls
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, Iterator, Optional

from mathparser.errors import UndefinedFunctionError, UndefinedVariableError


class VariableValues(Mapping):
    """
    Immutable mapping of variable names to numeric values.

    Looking up a missing name raises UndefinedVariableError instead of
    KeyError.

    Examples:
        - VariableValues({"x": 2, "y": 0.5})
        - VariableValues.x(20)
        - VariableValues.empty()
    """

    def __init__(self, values: Optional[Mapping[str, float]] = None):
        self._values: Dict[str, float] = dict(values or {})

    @classmethod
    def empty(cls) -> "VariableValues":
        """Environment without any variables."""
        return cls()

    @classmethod
    def x(cls, value: float) -> "VariableValues":
        """Environment defining only x."""
        return cls({"x": value})

    def __getitem__(self, name: str) -> float:
        try:
            return self._values[name]
        except KeyError:
            raise UndefinedVariableError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableValues({self._values!r})"


@dataclass(frozen=True)
class FunctionDefinition:
    """
    Declares a custom (freeform) function.

    Properties:
        name: Function identifier, may shadow a built-in like "sin"
        min_args: Smallest accepted argument count
        max_args: Largest accepted argument count
        implementation:
            Optional callable (arguments, values, custom_functions) -> number.
            Arguments are the unevaluated argument nodes, so the
            implementation decides how (and whether) to calc() them.

    IMPORTANT:
        Equality and hashing ignore the implementation. Two definitions
        with the same name and argument range are interchangeable, which
        is how calc() matches a parsed call to an implementation supplied
        later.
    """

    name: str
    min_args: int
    max_args: int
    implementation: Optional[Callable[..., float]] = field(
        default=None, compare=False, repr=False
    )

    @property
    def is_implemented(self) -> bool:
        return self.implementation is not None

    def accepts(self, count: int) -> bool:
        """Check an argument count against the declared range."""
        return self.min_args <= count <= self.max_args

    def is_compatible(self, other: "FunctionDefinition") -> bool:
        return (
            self.name == other.name
            and self.min_args == other.min_args
            and self.max_args == other.max_args
        )

    def __str__(self) -> str:
        return f"{self.name}({self.min_args}:{self.max_args})"


class CustomFunctions:
    """
    An immutable collection of custom function definitions.

    Used twice:
        - At parse time, to recognise function names
        - At calc time, to find implementations for parsed calls

    Definitions keep their declaration order; by_name() returns the first
    match.
    """

    def __init__(self, definitions: Iterable[FunctionDefinition] = ()):
        self._definitions = tuple(dict.fromkeys(definitions))

    @property
    def definitions(self) -> FrozenSet[FunctionDefinition]:
        return frozenset(self._definitions)

    @property
    def names(self) -> FrozenSet[str]:
        return frozenset(d.name for d in self._definitions)

    def by_name(self, name: str) -> Optional[FunctionDefinition]:
        """
        Retrieve a definition by function name.

        Returns:
            FunctionDefinition or None if not declared
        """
        for definition in self._definitions:
            if definition.name == name:
                return definition
        return None

    def __getitem__(self, key: FunctionDefinition) -> FunctionDefinition:
        """
        Retrieve the implemented definition compatible with `key`.

        Raises:
            UndefinedFunctionError: If no compatible implementation exists
        """
        for definition in self._definitions:
            if definition.is_implemented and definition.is_compatible(key):
                return definition
        raise UndefinedFunctionError(key)

    def __iter__(self) -> Iterator[FunctionDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CustomFunctions):
            return NotImplemented
        return self.definitions == other.definitions

    def __hash__(self) -> int:
        return hash(self.definitions)

    def __repr__(self) -> str:
        return f"CustomFunctions({list(self._definitions)!r})"


__all__ = ["VariableValues", "FunctionDefinition", "CustomFunctions"]
