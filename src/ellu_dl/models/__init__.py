"""Data models for ellu-dl."""

from .book import Book
from .chapter import Chapter
from .config import ElluConfig


__all__ = [
    "Book",
    "Chapter",
    "ElluConfig",
]
