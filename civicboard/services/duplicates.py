"""Duplicate issue lookup against the issue store."""

import logging
from typing import Any

from ..config import Settings, get_settings
from ..db import Database
from ..models import DuplicateCheckResponse, Issue
from ..utils.duplicates import find_duplicates, find_similar
from ..utils.similarity import ScoreLogger, score

logger = logging.getLogger(__name__)


class DuplicateService:
    """Service for finding existing issues that resemble a new title.

    Candidates are always limited to one city and to the most recent
    ``candidate_limit`` issues; the scoring itself is done by
    ``civicboard.utils.duplicates``.
    """

    def __init__(self, db: Database, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.weights = self.settings.similarity_weights
        self.listener = ScoreLogger(min_score=self.settings.similarity_log_threshold)

    async def fetch_candidates(
        self, city: str, limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Get the most recent issues posted in a city.

        Args:
            city: City name, matched case-insensitively
            limit: Maximum number of issues, defaults to ``candidate_limit``

        Returns:
            Issue rows as dictionaries, newest first
        """
        rows = await self.db.fetchall(
            """
            SELECT * FROM issues
            WHERE city = ? COLLATE NOCASE
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
            """,
            (city.strip(), self.settings.candidate_limit if limit is None else limit),
        )
        return [dict(row) for row in rows]

    async def suggest(
        self, title: str, city: str, threshold: float | None = None
    ) -> list[Issue]:
        """Find issues in the same city similar enough to show as suggestions."""
        candidates = await self.fetch_candidates(city)
        matches = find_similar(
            title,
            candidates,
            self.settings.suggestion_threshold if threshold is None else threshold,
            limit=self.settings.max_suggestions,
            weights=self.weights,
            listener=self.listener,
        )
        logger.info(
            f"Similar issue lookup for '{title}' in {city}: "
            f"{len(matches)} of {len(candidates)} candidates matched"
        )
        return [Issue(**row) for row in matches]

    async def duplicates_of(self, title: str, city: str) -> list[Issue]:
        """Find issues in the same city that count as duplicates of a title."""
        candidates = await self.fetch_candidates(city)
        matches = find_duplicates(
            title,
            candidates,
            self.settings.duplicate_threshold,
            limit=self.settings.max_suggestions,
            weights=self.weights,
            listener=self.listener,
        )
        if matches:
            logger.info(
                f"Found {len(matches)} likely duplicate(s) of '{title}' in {city}"
            )
        return [Issue(**row) for row in matches]

    def compare(self, title_a: str, title_b: str) -> DuplicateCheckResponse:
        """Score two titles and judge whether they are duplicates."""
        result = score(title_a, title_b, self.weights)
        self.listener(title_a, title_b, result)
        return DuplicateCheckResponse(
            is_duplicate=result.combined > self.settings.duplicate_threshold,
            score=result.combined,
            word_similarity=result.word,
            edit_similarity=result.edit,
            threshold=self.settings.duplicate_threshold,
        )
