"""Issue routes for CRUD operations, search and duplicate detection."""

import logging
import uuid
from typing import Annotated

from litestar import Controller, delete, get, post
from litestar.di import Provide
from litestar.exceptions import ClientException, NotFoundException
from litestar.params import Parameter
from litestar.status_codes import HTTP_409_CONFLICT

from ..config import get_settings
from ..db import Database, db_dependency
from ..models import (
    CityList,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    Issue,
    IssueCategory,
    IssueCreate,
    IssueList,
    IssueStatus,
    KeywordsResponse,
    MAX_TITLE_LENGTH,
    MessageResponse,
    SimilarIssuesResponse,
)
from ..services.duplicates import DuplicateService
from ..utils.normalize import extract_keywords

logger = logging.getLogger(__name__)


def generate_issue_id() -> str:
    """Generate a new random issue ID."""
    return uuid.uuid4().hex[:16]


class IssueController(Controller):
    """Controller for issue-related endpoints."""

    path = "/api/issues"
    dependencies = {"db": Provide(db_dependency)}

    @get("/")
    async def list_issues(
        self,
        db: Database,
        city: Annotated[str | None, Parameter(query="city")] = None,
        category: Annotated[IssueCategory | None, Parameter(query="category")] = None,
        status: Annotated[IssueStatus | None, Parameter(query="status")] = None,
        page: Annotated[int, Parameter(query="page", ge=1)] = 1,
        page_size: Annotated[int, Parameter(query="page_size", ge=1, le=100)] = 20,
    ) -> IssueList:
        """List issues with optional filters, most voted first."""
        conditions = []
        params: list = []

        if city:
            conditions.append("city = ? COLLATE NOCASE")
            params.append(city.strip())
        if category:
            conditions.append("category = ?")
            params.append(category)
        if status:
            conditions.append("status = ?")
            params.append(status)

        where_clause = " AND ".join(conditions) if conditions else "1=1"

        count_row = await db.fetchone(
            f"SELECT COUNT(*) FROM issues WHERE {where_clause}", tuple(params)
        )
        total = count_row[0] if count_row else 0

        offset = (page - 1) * page_size
        rows = await db.fetchall(
            f"""
            SELECT * FROM issues
            WHERE {where_clause}
            ORDER BY vote_count DESC, created_at DESC, rowid DESC
            LIMIT ? OFFSET ?
            """,
            tuple(params + [page_size, offset]),
        )

        items = [Issue(**dict(row)) for row in rows]
        return IssueList(items=items, total=total, page=page, page_size=page_size)

    @get("/cities")
    async def list_cities(self, db: Database) -> CityList:
        """List the distinct cities that have issues."""
        rows = await db.fetchall(
            "SELECT DISTINCT city FROM issues ORDER BY city COLLATE NOCASE"
        )
        return CityList(cities=[row["city"] for row in rows])

    @get("/{issue_id:str}")
    async def get_issue(self, db: Database, issue_id: str) -> Issue:
        """Get a single issue by ID."""
        row = await db.fetchone("SELECT * FROM issues WHERE id = ?", (issue_id,))
        if not row:
            raise NotFoundException(f"Issue not found: {issue_id}")
        return Issue(**dict(row))

    @post("/")
    async def create_issue(self, db: Database, data: IssueCreate) -> Issue:
        """Create a new issue.

        Titles that look like an existing issue in the same city are rejected
        with 409 Conflict until the client confirms with
        ``confirm_not_duplicate``.
        """
        title = data.title
        city = data.city
        check_duplicates = (
            not data.confirm_not_duplicate
            and len(title) >= get_settings().min_duplicate_title_length
        )

        if check_duplicates:
            duplicates = await DuplicateService(db).duplicates_of(title, city)
            if duplicates:
                raise ClientException(
                    detail=f"Found {len(duplicates)} similar issue(s) in {city}",
                    status_code=HTTP_409_CONFLICT,
                    extra={
                        "duplicates": [issue.model_dump(mode="json") for issue in duplicates]
                    },
                )

        issue_id = generate_issue_id()
        await db.execute(
            """
            INSERT INTO issues (id, title, description, category, city, zip_code,
                                author_name, status, vote_count, comment_count)
            VALUES (?, ?, ?, ?, ?, ?, ?, 'Open', 0, 0)
            """,
            (
                issue_id,
                title,
                data.description,
                data.category,
                city,
                data.zip_code,
                data.author_name,
            ),
        )
        await db.commit()
        logger.info(f"Created issue {issue_id}: '{title}' in {city}")

        row = await db.fetchone("SELECT * FROM issues WHERE id = ?", (issue_id,))
        return Issue(**dict(row))

    @delete("/{issue_id:str}", status_code=200)
    async def delete_issue(self, db: Database, issue_id: str) -> MessageResponse:
        """Delete an issue."""
        row = await db.fetchone("SELECT id FROM issues WHERE id = ?", (issue_id,))
        if not row:
            raise NotFoundException(f"Issue not found: {issue_id}")

        await db.execute("DELETE FROM issues WHERE id = ?", (issue_id,))
        await db.commit()
        return MessageResponse(message=f"Issue {issue_id} deleted")

    @get("/search")
    async def search_issues(
        self,
        db: Database,
        q: Annotated[str, Parameter(query="q")],
        city: Annotated[str | None, Parameter(query="city")] = None,
        page: Annotated[int, Parameter(query="page", ge=1)] = 1,
        page_size: Annotated[int, Parameter(query="page_size", ge=1, le=100)] = 20,
    ) -> IssueList:
        """Full-text search issues using FTS5."""
        query = q.strip()
        if len(query) < get_settings().min_search_query_length:
            return IssueList(items=[], total=0, page=page, page_size=page_size)

        # Quote each term so user punctuation is not parsed as FTS5 syntax
        match = " ".join('"' + term.replace('"', '""') + '"' for term in query.split())

        conditions = ["issues_fts MATCH ?"]
        params: list = [match]
        if city:
            conditions.append("issues.city = ? COLLATE NOCASE")
            params.append(city.strip())
        where_clause = " AND ".join(conditions)

        count_row = await db.fetchone(
            f"""
            SELECT COUNT(*) FROM issues
            JOIN issues_fts ON issues.rowid = issues_fts.rowid
            WHERE {where_clause}
            """,
            tuple(params),
        )
        total = count_row[0] if count_row else 0

        offset = (page - 1) * page_size
        rows = await db.fetchall(
            f"""
            SELECT issues.* FROM issues
            JOIN issues_fts ON issues.rowid = issues_fts.rowid
            WHERE {where_clause}
            ORDER BY rank
            LIMIT ? OFFSET ?
            """,
            tuple(params + [page_size, offset]),
        )

        items = [Issue(**dict(row)) for row in rows]
        return IssueList(items=items, total=total, page=page, page_size=page_size)

    # --- Duplicate Detection Endpoints ---

    @get("/similar")
    async def similar_issues(
        self,
        db: Database,
        title: Annotated[str, Parameter(query="title", max_length=MAX_TITLE_LENGTH)],
        city: Annotated[str, Parameter(query="city", min_length=1)],
        threshold: Annotated[float | None, Parameter(query="threshold", ge=0, le=1)] = None,
    ) -> SimilarIssuesResponse:
        """Find existing issues in a city that resemble a title being typed."""
        query = title.strip()
        keywords = extract_keywords(query)

        # Too little typed yet to be worth a lookup
        if len(query) < get_settings().min_duplicate_title_length:
            return SimilarIssuesResponse(query=query, city=city, keywords=keywords, items=[])

        items = await DuplicateService(db).suggest(query, city, threshold)
        return SimilarIssuesResponse(query=query, city=city, keywords=keywords, items=items)

    @post("/check-duplicate", status_code=200)
    async def check_duplicate(
        self, db: Database, data: DuplicateCheckRequest
    ) -> DuplicateCheckResponse:
        """Compare two titles and report the similarity breakdown."""
        return DuplicateService(db).compare(data.title_a, data.title_b)

    @get("/keywords")
    async def keywords(
        self,
        title: Annotated[str, Parameter(query="title", max_length=MAX_TITLE_LENGTH)],
    ) -> KeywordsResponse:
        """Extract the keywords of a title."""
        return KeywordsResponse(title=title, keywords=extract_keywords(title))
