# src/storyfeed/models/__init__.py
"""SQLAlchemy models for the story feed."""

from .author import Author
from .like import Like
from .story import Story
from .violation import Violation

__all__ = [
    "Author",
    "Like",
    "Story",
    "Violation",
]
