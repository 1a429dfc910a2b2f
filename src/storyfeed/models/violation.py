# src/storyfeed/models/violation.py
"""Model for violation reports filed against stories."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from storyfeed.db.session import Base
from storyfeed.db.time import utcnow


class Violation(Base):
    """Append-only report that a story breaks the rules.

    No uniqueness: the same author may report the same story repeatedly.
    """

    __tablename__ = "violation"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    story_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("story.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Anonymous reports carry no author.
    author_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("author.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
