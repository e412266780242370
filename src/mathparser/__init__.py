"""
Math Expression Parser Package

Parses textual math expressions like "(2x)^(e^3 + 4)" into immutable
expression trees and evaluates them with given variable values and
optional custom functions.

    >>> from mathparser import parse
    >>> parse("2x + 1").calc({"x": 3})
    7.0

No grammar library or parser generator is involved: strings are resolved
by a recursive bracket scanner followed by a fixed ladder of reduction
passes (see mathparser.parser).

Numerical integration lives in mathparser.integrate, dict/JSON/YAML
round-trip in mathparser.serialization.
"""

from mathparser.config import ParseOptions
from mathparser.definable import Definable, detect_definable, potential_function_names
from mathparser.equations import parse_extended
from mathparser.errors import (
    BracketsNotClosedError,
    CantProcessExpressionError,
    DuplicateDeclarationError,
    EvaluationError,
    ExpressionTooDeepError,
    InvalidFunctionArgumentsDeclarationError,
    InvalidFunctionNameError,
    InvalidVariableNameError,
    MathError,
    MissingOperatorOperandError,
    NestingTooDeepError,
    OutOfRangeFunctionArgumentListError,
    ParseError,
    ParsingFailedError,
    UndefinedFunctionError,
    UndefinedVariableError,
    UnexpectedClosingBracketError,
    UnknownOperationError,
)
from mathparser.expressions import (
    E,
    PI,
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
from mathparser.names import BUILT_IN_FUNCTIONS, BUILT_IN_VARIABLES, is_name_valid
from mathparser.parser import ExpressionParser, parse

__version__ = "0.1.0"

__all__ = [
    "parse",
    "parse_extended",
    "ExpressionParser",
    "ParseOptions",
    "detect_definable",
    "potential_function_names",
    "Definable",
    "is_name_valid",
    "BUILT_IN_FUNCTIONS",
    "BUILT_IN_VARIABLES",
    "VariableValues",
    "FunctionDefinition",
    "CustomFunctions",
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
