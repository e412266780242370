"""
Bracket scanning.

Splits an expression into top-level segments:
    - PlainSpan: text outside any bracket
    - BracketGroup: text strictly inside a matched top-level () or [] pair

Round and square brackets both group; the kind must match when closing.
Group contents are left untouched here and resolved recursively by the
parser.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union

from mathparser.errors import BracketsNotClosedError, UnexpectedClosingBracketError


BRACKET_PAIRS = {"(": ")", "[": "]"}
_CLOSING = {close: open_ for open_, close in BRACKET_PAIRS.items()}


@dataclass(frozen=True)
class PlainSpan:
    """Text outside brackets, starting at `position` in the scanned string."""
    text: str
    position: int


@dataclass(frozen=True)
class BracketGroup:
    """Contents of a top-level bracket pair opened at `position`."""
    text: str
    position: int
    kind: str


Segment = Union[PlainSpan, BracketGroup]


def scan_brackets(expression: str) -> List[Segment]:
    """
    Partition a string into plain spans and top-level bracket groups.

    Args:
        expression: Raw expression text

    Returns:
        Segments in source order. Empty plain spans are omitted.

    Raises:
        UnexpectedClosingBracketError: A closing bracket has no matching opener
        BracketsNotClosedError: A bracket is still open at the end
    """
    segments: List[Segment] = []
    stack: List[Tuple[str, int]] = []
    span_start = 0

    for pos, char in enumerate(expression):
        if char in BRACKET_PAIRS:
            if not stack:
                if pos > span_start:
                    segments.append(PlainSpan(expression[span_start:pos], span_start))
                span_start = pos + 1
            stack.append((char, pos))

        elif char in _CLOSING:
            if not stack or stack[-1][0] != _CLOSING[char]:
                raise UnexpectedClosingBracketError(char, pos)

            kind, opened_at = stack.pop()
            if not stack:
                segments.append(BracketGroup(expression[span_start:pos], opened_at, kind))
                span_start = pos + 1

    if stack:
        kind, opened_at = stack[-1]
        raise BracketsNotClosedError(kind, opened_at, len(expression))

    if span_start < len(expression):
        segments.append(PlainSpan(expression[span_start:], span_start))

    return segments


def split_arguments(text: str) -> List[str]:
    """
    Split bracket contents on top-level commas.

    Commas inside nested brackets do not split. Pieces that are empty after
    trimming are dropped, so "()" and "( )" give no arguments.

    Example:
        "g(a, b), c" -> ["g(a, b)", " c"]
    """
    pieces: List[str] = []
    depth = 0
    start = 0

    for pos, char in enumerate(text):
        if char in BRACKET_PAIRS:
            depth += 1
        elif char in _CLOSING:
            depth -= 1
        elif char == "," and depth == 0:
            pieces.append(text[start:pos])
            start = pos + 1
    pieces.append(text[start:])

    return [piece for piece in pieces if piece.strip()]


__all__ = ["PlainSpan", "BracketGroup", "Segment", "scan_brackets", "split_arguments"]
