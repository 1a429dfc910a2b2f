# src/storyfeed/models/like.py
"""Model capturing an author's like on a story."""

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from storyfeed.db.session import Base


class Like(Base):
    """Per-author endorsement of a story.

    The composite primary key is the real guard against duplicate likes; the
    service-level existence check only produces a friendlier conflict.
    """

    __tablename__ = "story_like"
    __table_args__ = (Index("ix_story_like_story_id", "story_id"),)

    author_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("author.id", ondelete="CASCADE"),
        primary_key=True,
    )
    story_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("story.id", ondelete="CASCADE"),
        primary_key=True,
    )
