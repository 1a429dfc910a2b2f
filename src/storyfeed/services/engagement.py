"""Likes and violation reports."""

from __future__ import annotations

import logging

from storyfeed.core.errors import ConflictError, NotFoundError
from storyfeed.models import Like, Story, Violation
from storyfeed.repositories.story_repo import StoryRepository

logger = logging.getLogger(__name__)


class EngagementLedger:
    """Record engagement and keep ``Story.like_count`` in step with Like rows.

    The counter is recomputed from the Like table on every like and unlike
    rather than incremented, so concurrent writers cannot make it drift.
    """

    def __init__(self, repo: StoryRepository) -> None:
        self.repo = repo

    def _get_story(self, story_id: str) -> Story:
        story = self.repo.get_story(story_id)
        if story is None:
            raise NotFoundError("Story not found")
        return story

    def _reconcile_like_count(self, story: Story) -> None:
        self.repo.flush()
        story.like_count = self.repo.count_likes(story.id)

    def like(self, author_id: str, story_id: str) -> Story:
        """Record that ``author_id`` likes ``story_id``.

        Raises:
            ConflictError: If the pair is already liked, including when a
                concurrent insert wins the race at the store.
            NotFoundError: If the story or the author does not exist.
        """
        if self.repo.get_like(author_id, story_id) is not None:
            raise ConflictError("Like from this author already exists")
        story = self._get_story(story_id)
        if self.repo.get_author(author_id) is None:
            raise NotFoundError("Author not found")

        self.repo.add(Like(author_id=author_id, story_id=story_id))
        try:
            self._reconcile_like_count(story)
        except ConflictError:
            logger.info("Concurrent like for story %s by %s rejected", story_id, author_id)
            raise ConflictError("Like from this author already exists") from None
        self.repo.commit()
        return story

    def unlike(self, author_id: str, story_id: str) -> Story:
        """Remove the like for the pair.

        Raises:
            NotFoundError: If no like exists for the pair.
        """
        like = self.repo.get_like(author_id, story_id)
        if like is None:
            raise NotFoundError("Like not found")
        story = self._get_story(story_id)

        self.repo.delete(like)
        self._reconcile_like_count(story)
        self.repo.commit()
        return story

    def report_violation(self, story_id: str, author_id: str | None = None) -> Violation:
        """File a violation report; anonymous reports are allowed."""
        self._get_story(story_id)
        violation = Violation(story_id=story_id, author_id=author_id)
        self.repo.add(violation)
        self.repo.commit()
        logger.info(
            "Violation %s reported on story %s by %s",
            violation.id,
            story_id,
            author_id or "anonymous",
        )
        return violation
