"""Word tokenization shared by statistics, comparison and word clouds.

A word is a maximal run of word characters (Unicode letters, digits, underscore).
Every counter in the project goes through ``WORD_PATTERN`` so that statistics and
similarity never disagree on what a word is.
"""

import re
from collections import Counter
from typing import List, Set

WORD_PATTERN = re.compile(r"\w+")


def decode_text(body: bytes) -> str:
    """Decode uploaded bytes as UTF-8, dropping a leading BOM and replacing invalid bytes."""
    return body.decode("utf-8-sig", errors="replace")


def extract_words(text: str) -> List[str]:
    """All word tokens in order of appearance, case preserved."""
    return WORD_PATTERN.findall(text)


def word_set(text: str) -> Set[str]:
    """Unique lower-cased word tokens (punctuation and case are never significant)."""
    return {word.lower() for word in extract_words(text)}


def word_frequencies(text: str) -> Counter:
    """Lower-cased token counts; insertion order follows first appearance."""
    return Counter(word.lower() for word in extract_words(text))
