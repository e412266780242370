"""
Exceptions raised by the math parser.

Two families:
    - EvaluationError: raised from calc() while walking a tree
    - ParseError: raised from parse() / parse_extended()

Every error keeps its context (token, name, position) as attributes so
callers can build their own messages or re-prompt the user.
"""

from typing import Any, Sequence


class MathError(Exception):
    """Base class for all math parser errors."""
    pass


class EvaluationError(MathError):
    """Raised when an expression tree cannot be evaluated."""
    pass


class UndefinedVariableError(EvaluationError):
    """A referenced variable was not passed to calc()."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f'Variable "{name}" was not defined in calc(). '
            f"Variable names are case-sensitive"
        )


class UndefinedFunctionError(EvaluationError):
    """A referenced custom function has no compatible implementation."""

    def __init__(self, definition: Any):
        self.definition = definition
        super().__init__(f"Function {definition} has no implementation available")


class ExpressionTooDeepError(EvaluationError):
    """The tree is nested too deeply to be walked recursively."""

    def __init__(self):
        super().__init__(
            "Expression tree is too deep to evaluate. "
            "Very long chains of operators produce deeply nested trees"
        )


class ParseError(MathError):
    """Raised when a string cannot be turned into an expression tree."""
    pass


class MissingOperatorOperandError(ParseError):
    """An operator lacks its left or right operand."""

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f'"{operator}" has insufficient neighboring expressions')


class OutOfRangeFunctionArgumentListError(ParseError):
    """A function received fewer or more arguments than it accepts."""

    def __init__(self, function: str):
        self.function = function
        super().__init__(f'"{function}" received an unsupported number of arguments')


class UnknownOperationError(ParseError):
    """The parser met a part it can't use in the given context."""

    def __init__(self, operation: Any):
        self.operation = operation
        super().__init__(f'"{operation}" is an unknown operation in given context')


class CantProcessExpressionError(ParseError):
    """Some parts of the expression were left unprocessed."""

    def __init__(self, parts: Sequence[Any]):
        self.parts = list(parts)
        super().__init__(
            f"Some parts of the expression were left unprocessed: {self.parts}. "
            f"This often happens if the multiplication operator is omitted "
            f"while implicit multiplication is turned off"
        )


class UnexpectedClosingBracketError(ParseError):
    """A closing bracket does not match the last opened one."""

    def __init__(self, kind: str, position: int):
        self.kind = kind
        self.position = position
        super().__init__(
            f'A bracket of type "{kind}" was found in unexpected context '
            f"at position {position}"
        )


class BracketsNotClosedError(ParseError):
    """An opened bracket was never closed."""

    def __init__(self, kind: str, start: int, end: int):
        self.kind = kind
        self.start = start
        self.end = end
        super().__init__(
            f'A bracket of type "{kind}" opened at position {start} was not '
            f"closed before position {end}"
        )


class InvalidVariableNameError(ParseError):
    """A declared variable name is not a valid identifier."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'"{name}" is not a valid variable name')


class InvalidFunctionNameError(ParseError):
    """A declared custom function name is not a valid identifier."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'"{name}" is not a valid function name')


class DuplicateDeclarationError(ParseError):
    """The same name was declared both as a variable and as a function."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'"{name}" is declared both as a variable and a function')


class InvalidFunctionArgumentsDeclarationError(ParseError):
    """A custom function declares an impossible argument range."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'"{name}" declares an invalid argument count range')


class NestingTooDeepError(ParseError):
    """Brackets are nested deeper than the configured limit."""

    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"Bracket nesting depth {depth} exceeds the limit of {limit}")


class ParsingFailedError(ParseError):
    """Parsing failed for a reason not covered by the other errors."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Parsing failed: {cause!r}")


__all__ = [
    "MathError",
    "EvaluationError",
    "UndefinedVariableError",
    "UndefinedFunctionError",
    "ExpressionTooDeepError",
    "ParseError",
    "MissingOperatorOperandError",
    "OutOfRangeFunctionArgumentListError",
    "UnknownOperationError",
    "CantProcessExpressionError",
    "UnexpectedClosingBracketError",
    "BracketsNotClosedError",
    "InvalidVariableNameError",
    "InvalidFunctionNameError",
    "DuplicateDeclarationError",
    "InvalidFunctionArgumentsDeclarationError",
    "NestingTooDeepError",
    "ParsingFailedError",
]
