"""Utility modules for Civicboard."""

from .duplicates import Candidate, find_duplicates, find_similar, is_duplicate
from .normalize import extract_keywords, normalize
from .similarity import ScoreLogger, SimilarityScore, SimilarityWeights, similarity

__all__ = [
    "Candidate",
    "ScoreLogger",
    "SimilarityScore",
    "SimilarityWeights",
    "extract_keywords",
    "find_duplicates",
    "find_similar",
    "is_duplicate",
    "normalize",
    "similarity",
]
