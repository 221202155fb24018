"""Pydantic models for request/response validation."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


IssueStatus = Literal["Open", "In Progress", "Resolved", "Closed"]

IssueCategory = Literal[
    "Safety",
    "Transportation",
    "Infrastructure",
    "Environment",
    "Education",
    "Recreation",
    "Quality of Life",
    "Health",
    "Economy",
    "Other",
]

# Longest title accepted anywhere a title is read
MAX_TITLE_LENGTH = 200


# --- Issue Models ---


class IssueBase(BaseModel):
    """Base issue model with common fields."""

    # Blank values must fail min_length instead of reaching the database
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field(..., min_length=1)
    category: IssueCategory | None = None
    city: str = Field(..., min_length=1)
    zip_code: str | None = Field(None, pattern=r"^[0-9]{5}$")
    author_name: str | None = None


class IssueCreate(IssueBase):
    """Model for creating a new issue."""

    # Set once the user has seen the similar issues and still wants to post
    confirm_not_duplicate: bool = False


class Issue(IssueBase):
    """Complete issue model with all fields."""

    id: str
    status: IssueStatus = "Open"
    vote_count: int = 0
    comment_count: int = 0
    created_at: datetime


class IssueList(BaseModel):
    """Paginated list of issues."""

    items: list[Issue]
    total: int
    page: int
    page_size: int


class CityList(BaseModel):
    """Distinct cities that have issues."""

    cities: list[str]


# --- Duplicate Detection Models ---


class SimilarIssuesResponse(BaseModel):
    """Existing issues that resemble a title being typed."""

    query: str
    city: str
    keywords: list[str]
    items: list[Issue]


class DuplicateCheckRequest(BaseModel):
    """Two titles to compare."""

    title_a: str = Field(..., max_length=MAX_TITLE_LENGTH)
    title_b: str = Field(..., max_length=MAX_TITLE_LENGTH)


class DuplicateCheckResponse(BaseModel):
    """Score breakdown and verdict for two titles."""

    is_duplicate: bool
    score: float
    word_similarity: float
    edit_similarity: float
    threshold: float


class KeywordsResponse(BaseModel):
    """Keywords extracted from a title."""

    title: str
    keywords: list[str]


# --- Response Models ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "unavailable"]
    database: Literal["connected", "unavailable"]
    issues: int | None = None


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
