"""Data access layer."""

from .story_repo import StoryRepository

__all__ = ["StoryRepository"]
