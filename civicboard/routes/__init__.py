"""Routes module."""

from .issues import IssueController

__all__ = [
    "IssueController",
]
