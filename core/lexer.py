"""
G-code lexer for tokenizing raw G-code text.

The lexer is a small character-classification state machine. It walks the
input exactly once and emits WORD tokens for every letter/number pair plus a
NEWLINE token per line break and a final EOF token, so the parser can rebuild
line structure without looking at the text again.
"""
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union
from utils.errors import ParseError, ParseErrorReason

logger = logging.getLogger(__name__)

Number = Union[int, float]

# Characters accepted while reading a value. Placement of '-' and '.' is not
# checked here; a malformed run is rejected by parse_number().
VALUE_CHARACTERS = frozenset('0123456789.-')
WHITESPACE = frozenset(' \t')

# Integer words share the signed 64-bit range of machine controllers
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


class Letter(Enum):
    """The legal G-code command letters (A-Z without E, N and O)."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"
    G = "G"
    H = "H"
    I = "I"
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"
    Y = "Y"
    Z = "Z"

    @property
    def ordinal(self) -> int:
        """Stable position of this letter, used to index state tables."""
        return _ORDINALS[self]

    @classmethod
    def from_char(cls, char: str) -> Optional['Letter']:
        """Classify a single character, case-insensitively."""
        return _BY_CHAR.get(char.upper())


_ORDINALS: Dict[Letter, int] = {letter: i for i, letter in enumerate(Letter)}
_BY_CHAR: Dict[str, Letter] = {letter.value: letter for letter in Letter}


@dataclass(frozen=True)
class Word:
    """One parsed letter/number pair, e.g. G1 or X-2.5."""
    letter: Letter
    number: Number

    @property
    def value(self) -> float:
        """The number widened to float for motion math."""
        return float(self.number)

    def __str__(self):
        return f"{self.letter.value}{self.number}"


class TokenType(Enum):
    WORD = "WORD"
    NEWLINE = "NEWLINE"
    EOF = "EOF"


@dataclass
class Token:
    """Represents a single token in G-code."""
    type: TokenType
    line_number: int
    char_start: int
    char_end: int
    word: Optional[Word] = None

    def __str__(self):
        if self.word is not None:
            return f"{self.type.value}:{self.word}"
        return self.type.value


class LexerState(Enum):
    IDLE = "idle"
    READING_VALUE = "reading_value"
    IN_COMMENT = "in_comment"


def parse_number(text: str) -> Optional[Number]:
    """
    Parse a value buffer as an int, falling back to float.

    Integers outside the signed 64-bit range are read as floats, so an
    overlong literal widens to inf instead of failing later.
    """
    try:
        number = int(text)
    except ValueError:
        pass
    else:
        if INT_MIN <= number <= INT_MAX:
            return number
    try:
        return float(text)
    except ValueError:
        return None


class GCodeLexer:
    """Tokenizes G-code text into a stream of tokens."""

    def tokenize(self, characters: Iterable[str]) -> List[Token]:
        """
        Tokenize an iterable of characters.

        Raises ParseError at the first character that cannot be classified.
        Columns in tokens and errors are 1-based positions within the line.
        """
        tokens: List[Token] = []
        state = LexerState.IDLE
        letter: Optional[Letter] = None
        value: List[str] = []
        line_number = 1
        column = 0
        word_start = 0
        word_end = 0

        stream = iter(characters)
        char: Optional[str] = None
        replay = False

        while True:
            if replay:
                # Delimiter that closed a word is processed again as idle input
                replay = False
            else:
                char = next(stream, None)
                column += 1
                if char == '\r':
                    char = ' '

            if char in WHITESPACE:
                continue

            if state is LexerState.IDLE:
                if char is None or char == '\n':
                    token_type = TokenType.EOF if char is None else TokenType.NEWLINE
                    tokens.append(Token(token_type, line_number, column, column))
                    if char is None:
                        break
                    line_number += 1
                    column = 0
                elif char == '(':
                    state = LexerState.IN_COMMENT
                else:
                    letter = Letter.from_char(char)
                    if letter is None:
                        raise ParseError(ParseErrorReason.EXPECTED_LETTER, line_number, column)
                    state = LexerState.READING_VALUE
                    value = []
                    word_start = word_end = column

            elif state is LexerState.IN_COMMENT:
                if char is None or char == '\n':
                    raise ParseError(ParseErrorReason.EXPECTED_END_OF_COMMENT, line_number, column)
                if char == ')':
                    state = LexerState.IDLE

            else:
                if char is not None and char in VALUE_CHARACTERS:
                    value.append(char)
                    word_end = column
                    continue

                if not value:
                    raise ParseError(ParseErrorReason.EXPECTED_NUMBER, line_number, column)

                number = parse_number(''.join(value))
                if number is None:
                    raise ParseError(ParseErrorReason.EXPECTED_NUMBER, line_number, word_start)

                tokens.append(Token(TokenType.WORD, line_number, word_start, word_end,
                                    Word(letter, number)))
                state = LexerState.IDLE
                replay = True

        logger.debug("Tokenized %d lines into %d tokens", line_number, len(tokens))
        return tokens
