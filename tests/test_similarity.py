"""Tests for Jaccard comparison of texts."""

import pytest

from textscanner.core.errors import ErrorKind, InvalidInputError
from textscanner.core.similarity import ComparisonResult, compare_texts, jaccard


@pytest.mark.parametrize(
    "text",
    ["hello world", "One.\n\nTwo, three!", "a", "   ", ""],
)
def test_text_compared_with_itself_is_identical(text: str) -> None:
    result = compare_texts(text, text)
    assert result == ComparisonResult(identical=True, similarity=1.0)


def test_compare_is_symmetric() -> None:
    a = "the quick brown fox jumps"
    b = "the lazy brown dog sleeps all day"
    assert compare_texts(a, b) == compare_texts(b, a)


def test_both_empty_is_identical() -> None:
    """Two empty documents agree vacuously."""
    assert compare_texts("", "") == ComparisonResult(identical=True, similarity=1.0)


def test_punctuation_only_counts_as_empty() -> None:
    assert compare_texts("!!! ...", "") == ComparisonResult(identical=True, similarity=1.0)


def test_one_empty_is_zero() -> None:
    assert compare_texts("x", "") == ComparisonResult(identical=False, similarity=0.0)
    assert compare_texts("", "x") == ComparisonResult(identical=False, similarity=0.0)


def test_case_and_punctuation_are_ignored() -> None:
    result = compare_texts("Hello, world!", "hello world")
    assert result.similarity == 1.0
    assert result.identical is True


def test_jaccard_rounded_to_three_decimals() -> None:
    """2 shared words out of 6 distinct words."""
    result = compare_texts("apple banana cherry date", "apple banana grape lemon")
    assert result.similarity == 0.333
    assert result.identical is False


def test_repeated_words_do_not_add_weight() -> None:
    result = compare_texts("apple apple banana banana", "apple banana")
    assert result.similarity == 1.0
    assert result.identical is True


def test_disjoint_texts() -> None:
    assert compare_texts("red green", "blue yellow") == ComparisonResult(identical=False, similarity=0.0)


def test_near_identical_is_not_identical() -> None:
    """999 of 1000 words shared rounds to 0.999 and stays below the identity tolerance."""
    words = [f"w{i}" for i in range(999)]
    result = compare_texts(" ".join(words), " ".join(words + ["extra"]))
    assert result.similarity == 0.999
    assert result.identical is False


def test_none_is_invalid_input() -> None:
    with pytest.raises(InvalidInputError) as exc:
        compare_texts(None, "text")
    assert exc.value.kind is ErrorKind.INVALID_INPUT
    with pytest.raises(InvalidInputError):
        compare_texts("text", None)


def test_jaccard_exact_ratio() -> None:
    assert jaccard({"a", "b", "c"}, {"b", "c", "d"}) == 0.5
    assert jaccard(set(), set()) == 1.0
    assert jaccard({"a"}, set()) == 0.0
