"""Services module."""

from .duplicates import DuplicateService

__all__ = [
    "DuplicateService",
]
