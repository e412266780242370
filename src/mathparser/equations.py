"""
Equations and inequalities on top of the arithmetic parser.

parse_extended() splits an expression on the relational operators
=, <, >, <= and >= found outside brackets, parses every side with
parse() and chains the sides into Comparison nodes from left to right:

    a = b = c   ->   Comparison(=, Comparison(=, a, b), c)

The chain is NOT a simultaneous three-way test: the second comparison
receives the result of the first one as its left operand.
"""

import logging
from typing import Any, List, Optional, Union

from mathparser.brackets import BRACKET_PAIRS
from mathparser.config import ParseOptions, resolve_options
from mathparser.errors import MissingOperatorOperandError
from mathparser.expressions import Comparison, ComparisonOperator, Expression
from mathparser.parser import ExpressionParser


logger = logging.getLogger("mathparser.equations")

_RELATION_CHARS = frozenset("=<>")
_TWO_CHAR_RELATIONS = ("<=", ">=")
_CLOSING = frozenset(BRACKET_PAIRS.values())

Piece = Union[str, ComparisonOperator]


def split_relations(expression: str) -> List[Piece]:
    """
    Split on relational operators at bracket depth zero.

    Whitespace-only sides are dropped, so a leading or trailing operator
    stays visible as the first or last piece.

    Relational operators inside brackets are not split, so such a piece
    later fails to parse as arithmetic.

    Example:
        "2x <= (x+1)" -> ["2x ", ComparisonOperator.LESS_EQUAL, " (x+1)"]
    """
    pieces: List[Piece] = []
    depth = 0
    start = 0
    pos = 0

    while pos < len(expression):
        char = expression[pos]
        if char in BRACKET_PAIRS:
            depth += 1
        elif char in _CLOSING:
            depth -= 1
        elif depth == 0 and char in _RELATION_CHARS:
            symbol = expression[pos:pos + 2]
            if symbol not in _TWO_CHAR_RELATIONS:
                symbol = char

            side = expression[start:pos]
            if side.strip():
                pieces.append(side)
            pieces.append(ComparisonOperator(symbol))

            pos += len(symbol)
            start = pos
            continue
        pos += 1

    side = expression[start:]
    if side.strip():
        pieces.append(side)
    return pieces


def parse_extended(
    expression: str,
    options: Optional[ParseOptions] = None,
    **settings: Any,
) -> Expression:
    """
    Parse an expression that may contain =, <, >, <= or >=.

    Args:
        expression: e.g. "2x - x = 8x/2x - x = 2"
        options: ParseOptions shared by every side
        **settings: ParseOptions fields overriding `options`

    Returns:
        A Comparison, or a plain Node when no relational operator is present

    Raises:
        MissingOperatorOperandError: An operator has no expression on one side
        ParseError: A side failed to parse
    """
    parser = ExpressionParser(resolve_options(options, **settings))
    pieces = split_relations(expression)

    if not any(isinstance(piece, ComparisonOperator) for piece in pieces):
        return parser.parse(expression)

    logger.debug("Split %r into %r", expression, pieces)

    for index, piece in enumerate(pieces):
        if not isinstance(piece, ComparisonOperator):
            continue
        if (
            index == 0
            or index == len(pieces) - 1
            or isinstance(pieces[index - 1], ComparisonOperator)
        ):
            raise MissingOperatorOperandError(piece.value)

    result: Expression = parser.parse(pieces[0])
    for index in range(1, len(pieces), 2):
        result = Comparison(pieces[index], result, parser.parse(pieces[index + 1]))

    return result


__all__ = ["split_relations", "parse_extended"]
