#!/usr/bin/env python
"""Report likely duplicate issues within a city.

Usage:
    python scripts/find_duplicates.py --city Springfield
    python scripts/find_duplicates.py --city Springfield --threshold 0.5
    python scripts/find_duplicates.py --city Springfield --limit 50
"""

import argparse
import asyncio
import logging
from itertools import combinations

from civicboard.config import get_settings
from civicboard.db import Database
from civicboard.services.duplicates import DuplicateService
from civicboard.utils.similarity import DEFAULT_WEIGHTS, SimilarityWeights, score

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def duplicate_pairs(
    issues: list[dict], threshold: float, weights: SimilarityWeights = DEFAULT_WEIGHTS
) -> list[tuple[dict, dict, float]]:
    """Return every pair of issues whose titles count as duplicates.

    Pairs are ordered by score, highest first.
    """
    pairs = []
    for first, second in combinations(issues, 2):
        result = score(first["title"], second["title"], weights)
        if result.combined > threshold:
            pairs.append((first, second, result.combined))
    pairs.sort(key=lambda pair: pair[2], reverse=True)
    return pairs


async def find_duplicates(city: str, threshold: float | None = None, limit: int | None = None):
    """Audit the most recent issues of a city for duplicates.

    Args:
        city: City to audit.
        threshold: Duplicate threshold. Defaults to the configured one.
        limit: Maximum number of issues to compare. Defaults to candidate_limit.
    """
    settings = get_settings()
    db = Database(settings.database_path)
    await db.connect()

    try:
        service = DuplicateService(db, settings)
        issues = await service.fetch_candidates(city, limit)
    finally:
        await db.disconnect()

    if len(issues) < 2:
        logger.info(f"Not enough issues in {city} to compare.")
        return

    threshold = settings.duplicate_threshold if threshold is None else threshold
    logger.info(f"Comparing {len(issues)} issues in {city} (threshold {threshold:.0%})...")

    pairs = duplicate_pairs(issues, threshold, settings.similarity_weights)
    for first, second, value in pairs:
        logger.info(
            f"  {value:.0%}  '{first['title']}' ({first['id']}) ~ "
            f"'{second['title']}' ({second['id']})"
        )

    logger.info(f"Done! Found {len(pairs)} likely duplicate pair(s)")


def main():
    parser = argparse.ArgumentParser(description="Find likely duplicate issues in a city")
    parser.add_argument(
        "--city",
        required=True,
        help="City whose issues should be compared"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Similarity above which two issues count as duplicates"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of recent issues to compare"
    )
    args = parser.parse_args()

    asyncio.run(find_duplicates(args.city, threshold=args.threshold, limit=args.limit))


if __name__ == "__main__":
    main()
