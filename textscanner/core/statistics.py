"""Paragraph, word and character counts for a text."""

import re
from dataclasses import asdict, dataclass
from typing import Optional

from textscanner.core.errors import InvalidInputError
from textscanner.core.text import WORD_PATTERN

# A blank line: newline directly followed by another (bare LF or CRLF).
_PARAGRAPH_BREAK = re.compile(r"\r?\n\r?\n")
_COUNTED_WHITESPACE = str.maketrans("", "", " \t\n\r")


@dataclass(frozen=True)
class TextStatistics:
    paragraphs: int
    words: int
    chars: int
    chars_no_spaces: int

    def as_dict(self) -> dict:
        return asdict(self)


def count_paragraphs(text: str) -> int:
    """Number of non-blank segments between blank lines."""
    return sum(1 for segment in _PARAGRAPH_BREAK.split(text) if segment.strip())


def calculate_statistics(text: Optional[str]) -> TextStatistics:
    """
    Count paragraphs, words and characters.

    Whitespace-only text has no paragraphs or words but still reports its raw length
    in ``chars``. Only space, tab, LF and CR are excluded from ``chars_no_spaces``.
    """
    if text is None:
        raise InvalidInputError("text is required")
    return TextStatistics(
        paragraphs=count_paragraphs(text),
        words=len(WORD_PATTERN.findall(text)),
        chars=len(text),
        chars_no_spaces=len(text.translate(_COUNTED_WHITESPACE)),
    )
