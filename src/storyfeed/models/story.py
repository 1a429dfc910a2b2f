# src/storyfeed/models/story.py
"""SQLAlchemy model for stories."""

from __future__ import annotations

import secrets
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from storyfeed.db.session import Base
from storyfeed.db.time import utcnow
from storyfeed.models.author import Author

# Identifiers and edit tokens only use [A-Za-z0-9_-] so they are safe in URL paths.
ID_PATTERN = r"^[0-9A-Za-z_-]+$"


def generate_id() -> str:
    """Return a new opaque, URL-safe identifier."""
    return secrets.token_urlsafe(12)


def generate_edit_token() -> str:
    """Return a new edit token secret."""
    return secrets.token_urlsafe(24)


class Story(Base):
    """Short text submitted by an author (or anonymously) for the public feed."""

    __tablename__ = "story"
    __table_args__ = (
        Index("ix_story_feed", "is_public", "is_deleted", "created_at"),
        Index("ix_story_author_content", "author_id", "is_public"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    author_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("author.id"),
        nullable=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Mirrors the number of Like rows for the story; rewritten on every like/unlike.
    like_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Soft hide: the row stays but never reaches a listing.
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    postcard: Mapped[str | None] = mapped_column(Text, nullable=True)
    edit_token: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default=generate_edit_token,
    )

    author: Mapped[Author | None] = relationship(Author, lazy="joined")

    @validates("edit_token")
    def _freeze_edit_token(self, key: str, value: str) -> str:
        current = self.__dict__.get(key)
        if current is not None and current != value:
            raise ValueError("edit_token cannot be changed once assigned")
        return value
