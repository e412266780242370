"""
Expression System for the math parser

Every parsed formula is represented as an Abstract Syntax Tree (AST) made of
the immutable node classes below.

Two families:
    - Node: guaranteed-numeric expressions (constants, variables,
      operators, built-in and custom functions)
    - Comparison: relations between two expressions, which may yield
      no result

ARCHITECTURAL RULE:
    Node classes hold structure only.
    Evaluation lives in the interpreter layer (mathparser.evaluator);
    the methods on Expression are thin entry points into it.
"""

import math
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Set, Tuple

from mathparser.errors import OutOfRangeFunctionArgumentListError
from mathparser.model import CustomFunctions, FunctionDefinition


class Expression(ABC):
    """
    Base class for all AST expressions.

    Anything that can be evaluated against a variable environment and an
    optional custom function table.

    DO NOT:
        - Put evaluation logic in subclasses (belongs in evaluator)
        - Add simplification logic (not supported)
    """

    def calc(
        self,
        values: Optional[Mapping[str, float]] = None,
        custom_functions: Optional[CustomFunctions] = None,
    ) -> Optional[float]:
        """
        Evaluate the expression.

        Args:
            values: Variable values (a VariableValues or any mapping)
            custom_functions: Implementations for freeform functions

        Returns:
            The numeric result. An "=" that does not hold returns None,
            an inequality returns its winning side.

        Raises:
            UndefinedVariableError: If a variable has no value
            UndefinedFunctionError: If a freeform function has no implementation
        """
        from mathparser.evaluator import calc
        return calc(self, values, custom_functions)

    def evaluate(
        self,
        values: Optional[Mapping[str, float]] = None,
        custom_functions: Optional[CustomFunctions] = None,
    ) -> Optional[float]:
        """
        Evaluate the truth of the expression.

        Comparisons yield 1.0 or 0.0 (None if a side of an inequality has
        no result),
        nodes yield the same value as calc().
        """
        from mathparser.evaluator import evaluate
        return evaluate(self, values, custom_functions)

    def get_used_variables(self) -> Set[str]:
        """Names of all variables referenced by the tree."""
        from mathparser.evaluator import used_variables
        return used_variables(self)

    def get_used_freeform_functions(self) -> Set[FunctionDefinition]:
        """Definitions of all custom functions referenced by the tree."""
        from mathparser.evaluator import used_freeform_functions
        return used_freeform_functions(self)


class Node(Expression):
    """
    Base class for numeric expressions.

    calc() on a Node always returns a float (possibly inf or nan).
    """
    pass


@dataclass(frozen=True)
class Constant(Node):
    """
    A constant numeric value.

    Examples:
        - 2
        - 3.5
        - PI
    """

    value: float


@dataclass(frozen=True)
class Variable(Node):
    """
    References a variable whose value is given to calc().

    IMPORTANT:
        The parser only creates variables for declared names.
        Existence of a value is checked at evaluation time.
    """

    name: str


class UnaryOperator(Enum):
    """
    Single-operand operations.

    EXP is the natural exponent e^operand.
    """

    NEGATE = "neg"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    COT = "cot"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    ACOT = "acot"
    EXP = "exp"


@dataclass(frozen=True)
class UnaryExpression(Node):
    """
    Represents a unary operation.

    Example:
        sin(2x)

    Becomes:
        UnaryExpression(
            operator=UnaryOperator.SIN,
            operand=BinaryExpression(
                operator=BinaryOperator.MULTIPLY,
                left=Constant(2),
                right=Variable("x")
            )
        )
    """

    operator: UnaryOperator
    operand: Node


class BinaryOperator(Enum):
    """
    Two-operand operations.

    For LOG the left operand is the base and the right operand is the
    argument.
    """

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"
    LOG = "log"


@dataclass(frozen=True)
class BinaryExpression(Node):
    """
    Represents a binary arithmetic operation.

    Example:
        (2 + x) ^ 3

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.POWER,
            left=BinaryExpression(
                operator=BinaryOperator.ADD,
                left=Constant(2),
                right=Variable("x")
            ),
            right=Constant(3)
        )

    Properties:
        operator: BinaryOperator enum
        left: Left operand (Node)
        right: Right operand (Node)
    """

    operator: BinaryOperator
    left: Node
    right: Node


@dataclass(frozen=True)
class FreeformCall(Node):
    """
    A call to a user-defined function.

    Example:
        f(x, 2)  with FunctionDefinition("f", 1, 2)

    Becomes:
        FreeformCall(
            definition=FunctionDefinition("f", 1, 2),
            arguments=(Variable("x"), Constant(2))
        )

    IMPORTANT:
        The argument count is checked against the definition on
        construction. The implementation is looked up at calc() time.
    """

    definition: FunctionDefinition
    arguments: Tuple[Node, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "arguments", tuple(self.arguments))
        if not self.definition.accepts(len(self.arguments)):
            raise OutOfRangeFunctionArgumentListError(str(self.definition))


class ComparisonOperator(Enum):
    """Relational operators recognised by parse_extended()."""

    EQUALS = "="
    GREATER = ">"
    LESS = "<"
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="


@dataclass(frozen=True)
class Comparison(Expression):
    """
    Represents a relation between two expressions.

    Example:
        2x = 4 = y

    Becomes (chained left to right):
        Comparison(
            operator=ComparisonOperator.EQUALS,
            left=Comparison(
                operator=ComparisonOperator.EQUALS,
                left=<2x>,
                right=Constant(4)
            ),
            right=Variable("y")
        )

    IMPORTANT:
        calc() of "=" returns the shared value, or None when the sides
        differ. calc() of an inequality returns the winning side: the left
        value when the relation holds, the right value otherwise.
        evaluate() returns 1.0 / 0.0.
    """

    operator: ComparisonOperator
    left: Expression
    right: Expression


E = UnaryExpression(UnaryOperator.EXP, Constant(1))
PI = Constant(math.pi)


__all__ = [
    "Expression",
    "Node",
    "Constant",
    "Variable",
    "UnaryOperator",
    "UnaryExpression",
    "BinaryOperator",
    "BinaryExpression",
    "FreeformCall",
    "ComparisonOperator",
    "Comparison",
    "E",
    "PI",
]
