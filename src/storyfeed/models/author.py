# src/storyfeed/models/author.py
"""SQLAlchemy model for story authors."""

from __future__ import annotations

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storyfeed.db.session import Base


class Author(Base):
    """Account that submits stories and engages with them.

    Identity itself is verified upstream; this row only carries the flags the
    feed needs (ban status, elevated role) and the profile fields whose
    visibility is decided per caller.
    """

    __tablename__ = "author"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Elevated role: sees author contact fields and may edit any story.
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
