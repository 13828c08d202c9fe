"""
G-code parser for creating line records from token streams.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
from core.lexer import GCodeLexer, Letter, Number, Token, TokenType, Word

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Line:
    """
    The words found on one line of input.

    Every input line produces a Line, including blank and comment-only lines,
    so that line_number always matches the editor's 1-based line numbering.
    """
    line_number: int
    words: Tuple[Word, ...] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        return not self.words

    def has_letter(self, letter: Letter) -> bool:
        """Check if any word on this line uses the given letter."""
        return any(word.letter is letter for word in self.words)

    def get_words(self) -> Dict[Letter, Number]:
        """Letter to number mapping for this line; later duplicates win."""
        return {word.letter: word.number for word in self.words}

    def __str__(self):
        return ' '.join(str(word) for word in self.words)


class GCodeParser:
    """Groups lexer tokens into one Line per input line."""

    def parse(self, tokens: Iterable[Token]) -> List[Line]:
        """Parse tokens into lines."""
        lines: List[Line] = []
        words: List[Word] = []

        for token in tokens:
            if token.type is TokenType.WORD:
                words.append(token.word)
                continue

            lines.append(Line(token.line_number, tuple(words)))
            words = []

            if token.type is TokenType.EOF:
                break

        return lines


def parse(characters: Iterable[str], lexer: Optional[GCodeLexer] = None) -> List[Line]:
    """
    Parse G-code text into a list of lines.

    Args:
        characters: Program text, or any iterable of single characters.
        lexer: Optional lexer instance to reuse.

    Returns:
        One Line per input line, in order.

    Raises:
        ParseError: On the first syntax error.
    """
    tokens = (lexer or GCodeLexer()).tokenize(characters)
    lines = GCodeParser().parse(tokens)
    logger.debug("Parsed %d lines", len(lines))
    return lines
