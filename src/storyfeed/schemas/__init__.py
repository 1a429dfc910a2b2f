"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .story import (
    AuthorOut,
    FeedPage,
    LikeOut,
    StoryCreate,
    StoryElevatedOut,
    StoryOut,
    ViolationOut,
)

__all__ = [
    "AuthorOut",
    "FeedPage",
    "LikeOut",
    "StoryCreate",
    "StoryElevatedOut",
    "StoryOut",
    "ViolationOut",
]
