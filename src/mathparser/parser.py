"""
Expression Parser (raw string -> Node tree).

Resolution of a string happens in two stages:

1. Bracket groups are resolved recursively and plain spans are tokenized,
   giving a flat list of parts: pending tokens, resolved nodes and argument
   lists (brackets holding several comma-separated expressions).

2. Reduction passes fold the parts, strictly in this order:
    1. Variables and constants (declared names, e, pi / π)
    2. Functions (custom functions, then built-ins)
    3. Unary minus
    4. Power (^)
    5. Implicit multiplication (2x, (a)(b)) when enabled
    6. Division (/) and multiplication (*)
    7. Subtraction (-) and addition (+)

Each pass is a pure function from a part list to a new part list. Exactly
one node must remain at the end.

Built-in functions (case-sensitive):
    - sin, cos, tan (tg), cot (ctg)
    - sqrt (√), read as power of 1/2
    - ln (base e), lg (base 2), log(x) (base 10), log(base, x)
    - asin (arcsin), acos (arccos), atan (arctg), acot (arcctg)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Collection, Dict, List, Optional, Tuple, Union

from mathparser.brackets import PlainSpan, scan_brackets, split_arguments
from mathparser.config import ParseOptions, resolve_options
from mathparser.errors import (
    CantProcessExpressionError,
    MathError,
    MissingOperatorOperandError,
    NestingTooDeepError,
    OutOfRangeFunctionArgumentListError,
    ParsingFailedError,
    UnknownOperationError,
)
from mathparser.expressions import (
    E,
    PI,
    BinaryExpression,
    BinaryOperator,
    Constant,
    FreeformCall,
    Node,
    UnaryExpression,
    UnaryOperator,
    Variable,
)
from mathparser.model import CustomFunctions
from mathparser.names import BUILT_IN_FUNCTIONS, check_declarations
from mathparser.tokenizer import TokenKind, Vocabulary, tokenize


logger = logging.getLogger("mathparser.parser")


@dataclass(frozen=True)
class Pending:
    """A token not resolved yet (operator, keyword or unknown fragment)."""
    text: str


@dataclass(frozen=True)
class ArgumentList:
    """A bracket group holding zero or several comma-separated expressions."""
    nodes: Tuple[Node, ...]


Part = Union[Pending, ArgumentList, Node]


_UNARY_FUNCTIONS: Dict[str, UnaryOperator] = {
    "sin": UnaryOperator.SIN,
    "cos": UnaryOperator.COS,
    "tan": UnaryOperator.TAN,
    "tg": UnaryOperator.TAN,
    "cot": UnaryOperator.COT,
    "ctg": UnaryOperator.COT,
    "asin": UnaryOperator.ASIN,
    "arcsin": UnaryOperator.ASIN,
    "acos": UnaryOperator.ACOS,
    "arccos": UnaryOperator.ACOS,
    "atan": UnaryOperator.ATAN,
    "arctg": UnaryOperator.ATAN,
    "acot": UnaryOperator.ACOT,
    "arcctg": UnaryOperator.ACOT,
}

_PRIORITY_POWER = {"^"}
_PRIORITY_PRODUCT = {"/", "*"}
_PRIORITY_SUM = {"-", "+"}


def _is_token(part: Part, texts: Collection[str]) -> bool:
    return isinstance(part, Pending) and part.text in texts


# =========================================================================
# REDUCTION PASSES
# =========================================================================


def substitute_variables(parts: List[Part], variable_names: Collection[str]) -> List[Part]:
    """
    Turn declared names and built-in constants into leaves.

    Declared variables win over the built-ins, so declaring "e" or "pi"
    overrides the constant.
    """
    result: List[Part] = []
    for part in parts:
        if isinstance(part, Pending):
            if part.text in variable_names:
                part = Variable(part.text)
            elif part.text == "e":
                part = E
            elif part.text in ("pi", "π"):
                part = PI
        result.append(part)
    return result


def _built_in_call(name: str, arguments: Tuple[Node, ...]) -> Node:
    if name == "log":
        if len(arguments) == 2:
            return BinaryExpression(BinaryOperator.LOG, arguments[0], arguments[1])
        if len(arguments) == 1:
            return BinaryExpression(BinaryOperator.LOG, Constant(10), arguments[0])
        raise OutOfRangeFunctionArgumentListError(name)

    if len(arguments) != 1:
        raise OutOfRangeFunctionArgumentListError(name)

    argument = arguments[0]
    if name in ("sqrt", "√"):
        return BinaryExpression(BinaryOperator.POWER, argument, Constant(0.5))
    if name == "ln":
        return BinaryExpression(BinaryOperator.LOG, E, argument)
    if name == "lg":
        return BinaryExpression(BinaryOperator.LOG, Constant(2), argument)
    if name in _UNARY_FUNCTIONS:
        return UnaryExpression(_UNARY_FUNCTIONS[name], argument)
    raise UnknownOperationError(name)


def apply_functions(parts: List[Part], custom_functions: CustomFunctions) -> List[Part]:
    """
    Apply function names to the node or argument list right after them.

    Custom functions take precedence over built-ins with the same name.
    A custom function without a following operand is called with no
    arguments, which is only valid when its min_args is 0.

    Raises:
        OutOfRangeFunctionArgumentListError: Wrong argument count
    """
    result: List[Part] = []
    i = 0
    while i < len(parts):
        part = parts[i]
        following = parts[i + 1] if i + 1 < len(parts) else None

        arguments: Optional[Tuple[Node, ...]] = None
        if isinstance(following, Node):
            arguments = (following,)
        elif isinstance(following, ArgumentList):
            arguments = following.nodes

        if isinstance(part, Pending):
            definition = custom_functions.by_name(part.text)
            if definition is not None:
                result.append(FreeformCall(definition, arguments or ()))
                i += 1 if arguments is None else 2
                continue

            if part.text in BUILT_IN_FUNCTIONS:
                if arguments is None:
                    raise OutOfRangeFunctionArgumentListError(part.text)
                result.append(_built_in_call(part.text, arguments))
                i += 2
                continue

        result.append(part)
        i += 1

    # "()" that no function consumed carries nothing
    return [p for p in result if not (isinstance(p, ArgumentList) and not p.nodes)]


def apply_unary_minus(parts: List[Part]) -> List[Part]:
    """
    Negate the node after a "-" that has no resolved left operand.

    Raises:
        UnknownOperationError: The part after "-" is not a node
    """
    result: List[Part] = []
    i = 0
    while i < len(parts):
        part = parts[i]
        if (
            _is_token(part, {"-"})
            and i + 1 < len(parts)
            and (not result or not isinstance(result[-1], Node))
        ):
            operand = parts[i + 1]
            if not isinstance(operand, Node):
                raise UnknownOperationError(operand)
            result.append(UnaryExpression(UnaryOperator.NEGATE, operand))
            i += 2
            continue

        result.append(part)
        i += 1
    return result


def _fold_binary(
    parts: List[Part],
    operators: Collection[str],
    build: Callable[[str, Node, Node], Node],
) -> List[Part]:
    """Left-to-right pairwise fold of the given operators."""
    result: List[Part] = []
    i = 0
    while i < len(parts):
        part = parts[i]
        if not _is_token(part, operators):
            result.append(part)
            i += 1
            continue

        if not result or i + 1 == len(parts):
            raise MissingOperatorOperandError(part.text)

        left = result.pop()
        right = parts[i + 1]
        if not isinstance(left, Node):
            raise UnknownOperationError(left)
        if not isinstance(right, Node):
            raise UnknownOperationError(right)

        result.append(build(part.text, left, right))
        i += 2
    return result


def fold_power(parts: List[Part]) -> List[Part]:
    """
    Fold "^" left to right.

    The bare constant e as a base becomes the natural exponent of the right
    operand rather than a generic power.
    """
    def build(_: str, left: Node, right: Node) -> Node:
        if left == E:
            return UnaryExpression(UnaryOperator.EXP, right)
        return BinaryExpression(BinaryOperator.POWER, left, right)

    return _fold_binary(parts, _PRIORITY_POWER, build)


def fold_implicit_multiplication(parts: List[Part]) -> List[Part]:
    """Multiply every run of adjacent resolved nodes, left to right."""
    result: List[Part] = []
    for part in parts:
        if isinstance(part, Node) and result and isinstance(result[-1], Node):
            result[-1] = BinaryExpression(BinaryOperator.MULTIPLY, result[-1], part)
        else:
            result.append(part)
    return result


def fold_products(parts: List[Part]) -> List[Part]:
    """Fold "/" and "*" left to right with equal precedence."""
    def build(op: str, left: Node, right: Node) -> Node:
        if op == "/":
            return BinaryExpression(BinaryOperator.DIVIDE, left, right)
        return BinaryExpression(BinaryOperator.MULTIPLY, left, right)

    return _fold_binary(parts, _PRIORITY_PRODUCT, build)


def fold_sums(parts: List[Part], is_minus_negative_function: bool = False) -> List[Part]:
    """
    Fold "-" and "+" left to right with equal precedence.

    With is_minus_negative_function, X - Y becomes X + (-Y).
    """
    def build(op: str, left: Node, right: Node) -> Node:
        if op == "+":
            return BinaryExpression(BinaryOperator.ADD, left, right)
        if is_minus_negative_function:
            return BinaryExpression(
                BinaryOperator.ADD,
                left,
                UnaryExpression(UnaryOperator.NEGATE, right),
            )
        return BinaryExpression(BinaryOperator.SUBTRACT, left, right)

    return _fold_binary(parts, _PRIORITY_SUM, build)


def reduce_parts(parts: List[Part], options: ParseOptions) -> Node:
    """
    Run every reduction pass over a part list.

    Raises:
        CantProcessExpressionError: Anything but a single node is left
    """
    parts = substitute_variables(parts, options.variable_names)
    parts = apply_functions(parts, options.custom_functions)
    parts = apply_unary_minus(parts)
    parts = fold_power(parts)
    if options.is_implicit_multiplication:
        parts = fold_implicit_multiplication(parts)
    parts = fold_products(parts)
    parts = fold_sums(parts, options.is_minus_negative_function)

    if len(parts) != 1 or not isinstance(parts[0], Node):
        raise CantProcessExpressionError(parts)
    return parts[0]


# =========================================================================
# PARSER
# =========================================================================


class ExpressionParser:
    """
    Parses strings with one fixed configuration.

    Declarations are validated and the tokenizer vocabulary is built once,
    on construction.

    Raises (on construction):
        InvalidVariableNameError, InvalidFunctionNameError,
        InvalidFunctionArgumentsDeclarationError, DuplicateDeclarationError
    """

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = options or ParseOptions()
        check_declarations(self.options.variable_names, self.options.custom_functions)
        self.vocabulary = Vocabulary.build(
            self.options.variable_names,
            self.options.custom_functions.names,
        )

    def parse(self, expression: str) -> Node:
        """
        Parse a string into a Node.

        Raises:
            ParseError: Any parse failure. Unexpected internal errors are
                wrapped into ParsingFailedError.
        """
        logger.debug("Parsing %r", expression)
        try:
            node = self._resolve(expression, 0)
        except MathError:
            raise
        except Exception as exc:
            raise ParsingFailedError(exc) from exc
        logger.debug("Parsed %r into %r", expression, node)
        return node

    def _resolve(self, text: str, depth: int) -> Node:
        if depth > self.options.max_depth:
            raise NestingTooDeepError(depth, self.options.max_depth)

        parts: List[Part] = []
        for segment in scan_brackets(text):
            if isinstance(segment, PlainSpan):
                for token in tokenize(segment.text, self.vocabulary):
                    if token.kind is TokenKind.NUMBER:
                        parts.append(Constant(float(token.text)))
                    else:
                        parts.append(Pending(token.text))
                continue

            arguments = [self._resolve(piece, depth + 1) for piece in split_arguments(segment.text)]
            if len(arguments) == 1:
                parts.append(arguments[0])
            else:
                parts.append(ArgumentList(tuple(arguments)))

        return reduce_parts(parts, self.options)


def parse(expression: str, options: Optional[ParseOptions] = None, **settings: Any) -> Node:
    """
    Parse a math expression string into a Node tree.

    Args:
        expression: The expression, e.g. "(2x)^(e^3 + 4)"
        options: ParseOptions to use (defaults if omitted)
        **settings: ParseOptions fields overriding `options`, e.g.
            variable_names={"x", "y"}, is_implicit_multiplication=False

    Returns:
        Node

    Raises:
        ParseError: If the expression or the declarations are invalid

    Example:
        >>> parse("2x + 1").calc({"x": 3})
        7.0
    """
    return ExpressionParser(resolve_options(options, **settings)).parse(expression)


__all__ = [
    "Pending",
    "ArgumentList",
    "substitute_variables",
    "apply_functions",
    "apply_unary_minus",
    "fold_power",
    "fold_implicit_multiplication",
    "fold_products",
    "fold_sums",
    "reduce_parts",
    "ExpressionParser",
    "parse",
]
