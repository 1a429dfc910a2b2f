"""Data access helpers for stories, authors and engagement records."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storyfeed.core.errors import ConflictError, InternalStoreFailure
from storyfeed.models import Author, Like, Story, Violation

__all__ = ["StoryRepository"]

logger = logging.getLogger(__name__)


class StoryRepository:
    """Thin wrapper around database access for story entities.

    Every write goes through :meth:`flush` or :meth:`commit`, which roll the
    session back and translate driver errors into the service error taxonomy.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_story(self, story_id: str) -> Story | None:
        """Return a story by identifier."""
        return self.session.get(Story, story_id)

    def get_author(self, author_id: str) -> Author | None:
        """Return an author by identifier."""
        return self.session.get(Author, author_id)

    def get_like(self, author_id: str, story_id: str) -> Like | None:
        """Return the like for an (author, story) pair if it exists."""
        return self.session.get(Like, (author_id, story_id))

    def count_likes(self, story_id: str) -> int:
        """Count Like rows for a story."""
        stmt = select(func.count()).select_from(Like).where(Like.story_id == story_id)
        return int(self.session.scalar(stmt) or 0)

    def count_public_duplicates(self, author_id: str, content: str) -> int:
        """Count public stories by ``author_id`` with exactly ``content``.

        Soft-hidden stories are included in the count.
        """
        stmt = (
            select(func.count())
            .select_from(Story)
            .where(
                Story.author_id == author_id,
                Story.content == content,
                Story.is_public.is_(True),
            )
        )
        return int(self.session.scalar(stmt) or 0)

    def list_violations(self, story_id: str) -> list[Violation]:
        """Return violation reports filed against a story, oldest first."""
        stmt = select(Violation).where(Violation.story_id == story_id).order_by(Violation.id)
        return list(self.session.scalars(stmt))

    def fetch_page(self, stmt: Select[tuple[Story]]) -> Sequence[Story]:
        """Execute a page query built by the feed query builder."""
        return self.session.scalars(stmt).unique().all()

    def fetch_count(self, stmt: Select[tuple[int]]) -> int:
        """Execute a count query built by the feed query builder."""
        return int(self.session.scalar(stmt) or 0)

    def add(self, obj: object) -> None:
        """Stage a new row for insertion."""
        self.session.add(obj)

    def delete(self, obj: object) -> None:
        """Stage a row for deletion."""
        self.session.delete(obj)

    def flush(self) -> None:
        """Flush pending changes, translating store errors."""
        self._guard(self.session.flush)

    def commit(self) -> None:
        """Commit pending changes, translating store errors."""
        self._guard(self.session.commit)

    def _guard(self, operation) -> None:
        try:
            operation()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Integrity error from store: %s", exc.orig)
            raise ConflictError("Record conflicts with an existing one") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Store operation failed: %s", exc, exc_info=True)
            raise InternalStoreFailure() from exc
