"""Text normalization for issue title comparison.

Titles are compared in a canonical form: lower case, no punctuation, single
spaces between words. Normalization is cheap and recomputed on every
comparison; nothing here is stored.
"""

import re


# Anything that is not a word character or whitespace, plus the underscore
# (which Python counts as a word character).
_PUNCTUATION_RE = re.compile(r"[^\w\s]|_")

# Words of this length or shorter are noise for word overlap ("a", "to", "in")
MIN_WORD_LENGTH = 3

COMMON_WORDS = frozenset(
    [
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "be", "been",
        "being", "have", "has", "had", "do", "does", "did", "will", "would",
        "should", "could", "can", "may", "might", "must", "shall",
    ]
)


def normalize(text: str | None) -> str:
    """Normalize text for comparison.

    - Convert to lowercase
    - Remove punctuation (every character that is not alphanumeric or whitespace)
    - Collapse whitespace and trim

    Args:
        text: The text to normalize

    Returns:
        Normalized text string, empty for empty input
    """
    if not text:
        return ""

    text = text.lower()
    text = _PUNCTUATION_RE.sub("", text)

    # Collapse whitespace
    return " ".join(text.split())


def significant_words(text: str | None) -> set[str]:
    """Return the set of normalized words long enough to carry meaning."""
    return {word for word in normalize(text).split(" ") if len(word) >= MIN_WORD_LENGTH}


def extract_keywords(title: str | None) -> list[str]:
    """Extract keywords from an issue title.

    Drops short words and common English function words, keeping the
    remaining words in the order they appear.

    Args:
        title: Issue title

    Returns:
        List of keywords
    """
    return [
        word
        for word in normalize(title).split(" ")
        if len(word) >= MIN_WORD_LENGTH and word not in COMMON_WORDS
    ]
