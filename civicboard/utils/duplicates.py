"""Duplicate issue detection.

Ranks existing issues against a new title so likely duplicates can be shown
before the issue is posted. Candidate lists are supplied by the caller,
already scoped to one city and bounded in size; nothing here fetches or
caches issues.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, NamedTuple, TypeVar

from .similarity import DEFAULT_WEIGHTS, ScoreListener, SimilarityWeights, similarity

# Strict threshold for saying two issues are the same
DUPLICATE_THRESHOLD = 0.65

# Looser threshold for showing an issue as a suggestion
SUGGESTION_THRESHOLD = 0.5

MAX_RESULTS = 5

T = TypeVar("T")
C = TypeVar("C")


@dataclass(frozen=True)
class Candidate(Generic[T]):
    """An existing issue eligible for comparison, with caller-defined payload."""

    id: Any
    title: str
    payload: T | None = field(default=None, compare=False)


class _Scored(NamedTuple):
    candidate: Any
    score: float


def candidate_title(candidate: Any) -> str:
    """Read the title of a mapping or attribute-style candidate."""
    if isinstance(candidate, Mapping):
        return candidate.get("title") or ""
    return getattr(candidate, "title", None) or ""


def is_duplicate(
    title1: str | None,
    title2: str | None,
    threshold: float = DUPLICATE_THRESHOLD,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
    listener: ScoreListener | None = None,
) -> bool:
    """Check if two issue titles are similar enough to be duplicates.

    Args:
        title1: First title
        title2: Second title
        threshold: Score that must be exceeded, default 0.65

    Returns:
        True if the combined similarity is strictly above the threshold
    """
    return similarity(title1, title2, weights, listener) > threshold


def _rank(
    query: str,
    candidates: Sequence[C],
    keep: Callable[[float], bool],
    limit: int,
    key: Callable[[C], str] | None,
    weights: SimilarityWeights,
    listener: ScoreListener | None,
) -> list[C]:
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
    if not query.strip() or not candidates:
        return []

    title_of = key or candidate_title
    scored = [
        _Scored(candidate, similarity(query, title_of(candidate), weights, listener))
        for candidate in candidates
    ]

    # sorted() is stable, so equal scores keep their input order
    ranked = sorted(
        (item for item in scored if keep(item.score)),
        key=lambda item: item.score,
        reverse=True,
    )
    return [item.candidate for item in ranked[:limit]]


def find_similar(
    query: str | None,
    candidates: Sequence[C],
    threshold: float = SUGGESTION_THRESHOLD,
    *,
    limit: int = MAX_RESULTS,
    key: Callable[[C], str] | None = None,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
    listener: ScoreListener | None = None,
) -> list[C]:
    """Find the candidates most similar to a query title.

    Args:
        query: Title being typed
        candidates: Existing issues (mappings or objects with a ``title``)
        threshold: Minimum combined score to keep a candidate, default 0.5
        limit: Maximum number of results, default 5
        key: Optional function returning a candidate's title
        weights: Metric weights
        listener: Optional score listener called for every comparison

    Returns:
        The original candidate objects, best match first

    Raises:
        ValueError: If limit is less than 1
    """
    return _rank(
        query or "",
        candidates,
        lambda value: value >= threshold,
        limit,
        key,
        weights,
        listener,
    )


def find_duplicates(
    query: str | None,
    candidates: Sequence[C],
    threshold: float = DUPLICATE_THRESHOLD,
    *,
    limit: int = MAX_RESULTS,
    key: Callable[[C], str] | None = None,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
    listener: ScoreListener | None = None,
) -> list[C]:
    """Find the candidates that count as duplicates of a query title.

    Keeps exactly the candidates for which ``is_duplicate`` holds, ranked
    like ``find_similar``.
    """
    return _rank(
        query or "",
        candidates,
        lambda value: value > threshold,
        limit,
        key,
        weights,
        listener,
    )
