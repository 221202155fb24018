#!/usr/bin/env python3
"""Seed the database with sample issues."""

import asyncio
import uuid

from civicboard.db import get_database

SAMPLE_ISSUES = [
    # Springfield
    {"title": "Ban plastic bags in stores", "city": "Springfield", "category": "Environment",
     "description": "Single-use bags end up in the river every spring."},
    {"title": "Improve bike lanes downtown", "city": "Springfield", "category": "Transportation",
     "description": "Painted lanes on Main St disappear under parked cars."},
    {"title": "Fix potholes on Main St", "city": "Springfield", "category": "Infrastructure",
     "description": "Several deep potholes between 3rd and 5th avenue."},
    {"title": "More streetlights in Riverside Park", "city": "Springfield", "category": "Safety",
     "description": "The park path is completely dark after 6pm in winter."},
    # Shelbyville
    {"title": "Extend library opening hours", "city": "Shelbyville", "category": "Education",
     "description": "The library closes at 5pm, before most people finish work."},
    {"title": "Fix potholes on Main Street", "city": "Shelbyville", "category": "Infrastructure",
     "description": "The road surface near the station is breaking up."},
]


async def seed_issues():
    """Insert sample issues into the database."""
    db = await get_database()

    await db.executemany(
        """
        INSERT INTO issues (id, title, description, category, city)
        VALUES (?, ?, ?, ?, ?)
        """,
        [
            (
                uuid.uuid4().hex[:16],
                issue["title"],
                issue["description"],
                issue["category"],
                issue["city"],
            )
            for issue in SAMPLE_ISSUES
        ],
    )

    await db.commit()
    print(f"Seeded {len(SAMPLE_ISSUES)} issues")


if __name__ == "__main__":
    asyncio.run(seed_issues())
