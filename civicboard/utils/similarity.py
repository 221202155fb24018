"""Issue title similarity scoring.

Two metrics are computed on normalized titles and combined with a fixed
weighted sum:

- word overlap (Jaccard index of significant words), which ignores word order
  so "ban plastic bags" still matches "plastic bags should be banned"
- edit-distance similarity (normalized Levenshtein), which catches near
  identical titles with small typos

Word overlap carries 70% of the score and edit distance 30%.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .normalize import normalize, significant_words

logger = logging.getLogger(__name__)

WORD_WEIGHT = 0.7
EDIT_WEIGHT = 0.3

# Comparisons at or below this combined score are not worth logging
SCORE_LOG_THRESHOLD = 0.3


@dataclass(frozen=True)
class SimilarityWeights:
    """Weights of the two metrics in the combined score."""

    word: float = WORD_WEIGHT
    edit: float = EDIT_WEIGHT

    def __post_init__(self) -> None:
        if self.word < 0 or self.edit < 0:
            raise ValueError(f"Similarity weights must be non-negative: {self}")
        if abs(self.word + self.edit - 1.0) > 1e-9:
            raise ValueError(f"Similarity weights must sum to 1.0: {self}")


DEFAULT_WEIGHTS = SimilarityWeights()


@dataclass(frozen=True)
class SimilarityScore:
    """Breakdown of a single comparison."""

    word: float
    edit: float
    combined: float


ScoreListener = Callable[[str, str, SimilarityScore], None]


def word_similarity(str1: str | None, str2: str | None) -> float:
    """Calculate word-based (Jaccard) similarity between two strings.

    Returns 0 when either string has no significant words.
    """
    words1 = significant_words(str1)
    words2 = significant_words(str2)

    if not words1 or not words2:
        return 0.0

    return len(words1 & words2) / len(words1 | words2)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate the Levenshtein (edit) distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def edit_similarity(str1: str | None, str2: str | None) -> float:
    """Calculate normalized Levenshtein similarity (0-1, 1 is identical)."""
    norm1 = normalize(str1)
    norm2 = normalize(str2)

    # Equal after normalization, including two empty strings
    if norm1 == norm2:
        return 1.0

    if not norm1 or not norm2:
        return 0.0

    distance = levenshtein_distance(norm1, norm2)
    return 1 - distance / max(len(norm1), len(norm2))


def score(
    str1: str | None,
    str2: str | None,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
) -> SimilarityScore:
    """Score two strings with both metrics and their weighted combination."""
    word = word_similarity(str1, str2)
    edit = edit_similarity(str1, str2)
    return SimilarityScore(
        word=word,
        edit=edit,
        combined=weights.word * word + weights.edit * edit,
    )


def similarity(
    str1: str | None,
    str2: str | None,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
    listener: ScoreListener | None = None,
) -> float:
    """Calculate the combined similarity of two strings (0-1).

    Args:
        str1: First string
        str2: Second string
        weights: Metric weights, 70/30 word/edit by default
        listener: Optional callable invoked with both strings and the score
            breakdown after the comparison

    Returns:
        Combined similarity score
    """
    result = score(str1, str2, weights)
    if listener is not None:
        listener(str1 or "", str2 or "", result)
    return result.combined


class ScoreLogger:
    """Score listener that logs comparisons above a noise floor."""

    def __init__(self, min_score: float = SCORE_LOG_THRESHOLD, log: logging.Logger | None = None):
        self.min_score = min_score
        self.log = log or logger

    def __call__(self, str1: str, str2: str, result: SimilarityScore) -> None:
        if result.combined > self.min_score:
            self.log.debug(
                f"Similarity between '{str1}' and '{str2}': "
                f"word={result.word:.1%} char={result.edit:.1%} combined={result.combined:.1%}"
            )
