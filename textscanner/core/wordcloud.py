"""Word-cloud URL for the external QuickChart renderer. Rendering happens outside the system."""

import logging
from typing import List, Tuple
from urllib.parse import quote

from textscanner.core.errors import InvalidInputError
from textscanner.core.text import word_frequencies

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://quickchart.io/wordcloud"
NO_WORDS_URL = (
    "https://quickchart.io/chart?c={type:'bar',data:{labels:['No words found'],"
    "datasets:[{label:'Count',data:[0]}]}}"
)
_RENDER_PARAMS = "format=png&width=600&height=600&fontScale=15&scale=linear"


def top_words(text: str, max_words: int = 60, min_length: int = 4) -> List[Tuple[str, int]]:
    """Most frequent lower-cased words of at least ``min_length`` chars; ties keep first appearance."""
    counts = word_frequencies(text)
    ranked = [(word, n) for word, n in counts.most_common() if len(word) >= min_length]
    return ranked[:max_words]


def build_word_cloud_url(
    text: str,
    base_url: str = DEFAULT_BASE_URL,
    max_words: int = 60,
    min_length: int = 4,
) -> str:
    """Build the renderer URL with ``word:count`` pairs in the ``text`` query parameter."""
    if not text:
        raise InvalidInputError("Text must not be empty")
    words = top_words(text, max_words=max_words, min_length=min_length)
    if not words:
        log.warning("No words of length >= %d found for word cloud", min_length)
        return NO_WORDS_URL
    payload = " ".join(f"{word}:{count}" for word, count in words)
    log.debug("word cloud built from %d words", len(words))
    return f"{base_url}?text={quote(payload, safe='')}&{_RENDER_PARAMS}"
