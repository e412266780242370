"""
Tokenizer for bracket-free spans.

The vocabulary (declared variables, custom functions, built-in keywords)
changes with every parse configuration, so matching is done by an explicit
longest-first scan instead of a regular expression assembled from names.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from mathparser.names import BUILT_IN_FUNCTIONS, BUILT_IN_VARIABLES


OPERATORS = frozenset("+-^/*")
DIGITS = frozenset("0123456789")


class TokenKind(Enum):
    NUMBER = "number"
    WORD = "word"
    OPERATOR = "operator"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Token:
    """A piece of a plain span."""
    kind: TokenKind
    text: str


@dataclass(frozen=True)
class Vocabulary:
    """
    Known words, longest first.

    Sorting by length prevents a short name from matching as the prefix of
    a longer one ("x" inside "x_1", "sin" inside "sinh" if declared).
    """

    words: Tuple[str, ...]

    @classmethod
    def build(cls, variable_names: Iterable[str], function_names: Iterable[str]) -> "Vocabulary":
        words = set(variable_names) | set(function_names) | BUILT_IN_VARIABLES | BUILT_IN_FUNCTIONS
        return cls(tuple(sorted(words, key=lambda w: (-len(w), w))))

    def match(self, text: str, pos: int) -> str:
        """Longest vocabulary word starting at `pos`, or "" if none."""
        for word in self.words:
            if text.startswith(word, pos):
                return word
        return ""


def _match_number(text: str, pos: int) -> int:
    """End of the numeric literal \\d+(\\.\\d+)? starting at `pos` (== pos if none)."""
    end = pos
    while end < len(text) and text[end] in DIGITS:
        end += 1
    if end == pos:
        return pos
    if end + 1 < len(text) and text[end] == "." and text[end + 1] in DIGITS:
        end += 1
        while end < len(text) and text[end] in DIGITS:
            end += 1
    return end


def tokenize(span: str, vocabulary: Vocabulary) -> List[Token]:
    """
    Split a bracket-free span into tokens.

    Whitespace is removed first. Characters that start no known token are
    collected into UNKNOWN fragments, which the parser reports if they are
    never consumed.

    Example:
        "2x_1+sin" with variables {x, x_1} ->
            NUMBER "2", WORD "x_1", OPERATOR "+", WORD "sin"
    """
    text = "".join(span.split())
    tokens: List[Token] = []
    unknown_start = -1
    pos = 0

    while pos < len(text):
        kind = None
        end = pos

        word = vocabulary.match(text, pos)
        if word:
            kind, end = TokenKind.WORD, pos + len(word)
        else:
            number_end = _match_number(text, pos)
            if number_end > pos:
                kind, end = TokenKind.NUMBER, number_end
            elif text[pos] in OPERATORS:
                kind, end = TokenKind.OPERATOR, pos + 1

        if kind is None:
            if unknown_start < 0:
                unknown_start = pos
            pos += 1
            continue

        if unknown_start >= 0:
            tokens.append(Token(TokenKind.UNKNOWN, text[unknown_start:pos]))
            unknown_start = -1
        tokens.append(Token(kind, text[pos:end]))
        pos = end

    if unknown_start >= 0:
        tokens.append(Token(TokenKind.UNKNOWN, text[unknown_start:]))

    return tokens


__all__ = ["OPERATORS", "TokenKind", "Token", "Vocabulary", "tokenize"]
