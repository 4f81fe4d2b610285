"""Jaccard similarity between the word sets of two texts."""

from dataclasses import dataclass
from typing import Optional, Set

from textscanner.core.errors import InvalidInputError
from textscanner.core.text import word_set

# Ratios this close to 1.0 count as identical.
IDENTICAL_TOLERANCE = 0.001
SIMILARITY_PRECISION = 3


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing two texts. Recomputed on every request, never stored."""

    identical: bool
    similarity: float


def jaccard(words_a: Set[str], words_b: Set[str]) -> float:
    """|A & B| / |A | B| as an exact ratio of integer counts. Two empty sets are fully similar."""
    if not words_a and not words_b:
        return 1.0
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / len(words_a | words_b)


def compare_texts(text_a: Optional[str], text_b: Optional[str]) -> ComparisonResult:
    """
    Compare two texts by the Jaccard index of their normalized word sets.

    ``""`` is a valid empty document; ``None`` is rejected with InvalidInputError.
    The result is symmetric in its arguments. Similarity is rounded to three
    decimals; ``identical`` is decided on the unrounded ratio.
    """
    if text_a is None:
        raise InvalidInputError("text_a is required")
    if text_b is None:
        raise InvalidInputError("text_b is required")

    words_a = word_set(text_a)
    words_b = word_set(text_b)
    if not words_a and not words_b:
        return ComparisonResult(identical=True, similarity=1.0)
    if not words_a or not words_b:
        return ComparisonResult(identical=False, similarity=0.0)

    ratio = jaccard(words_a, words_b)
    return ComparisonResult(
        identical=abs(ratio - 1.0) < IDENTICAL_TOLERANCE,
        similarity=round(ratio, SIMILARITY_PRECISION),
    )
