"""Duplicate-submission containment.

Repeating the same text as the same author is tolerated once; later copies are
stored hidden, and past the ban threshold the account is banned. None of these
outcomes is reported to the submitter: the creation flow answers every one of
them with a normal-looking story.

The count-then-act sequence is not atomic with the eventual insert, so two
concurrent duplicates may both be counted below the threshold. The heuristic
tolerates that.
"""

from __future__ import annotations

import logging
from enum import Enum

from storyfeed.core.settings import settings
from storyfeed.models import Author
from storyfeed.repositories.story_repo import StoryRepository

logger = logging.getLogger(__name__)


class Decision(Enum):
    """Outcome of evaluating a submission."""

    ACCEPT = "accept"
    # Persist with is_deleted set so it never reaches a listing.
    ACCEPT_HIDDEN = "accept_hidden"
    # Do not persist; the caller still receives an unsaved story.
    REJECT_SILENTLY = "reject_silently"

    @property
    def persists(self) -> bool:
        return self is not Decision.REJECT_SILENTLY


class AbuseGuard:
    """Evaluate submissions against the author's earlier ones."""

    def __init__(self, repo: StoryRepository, ban_threshold: int | None = None) -> None:
        self.repo = repo
        self.ban_threshold = (
            settings.abuse_ban_threshold if ban_threshold is None else ban_threshold
        )

    def evaluate(self, author: Author | None, content: str | None) -> Decision:
        """Decide how a submission of ``content`` by ``author`` is handled.

        Banning happens here: when the threshold is reached the author's
        ``is_banned`` flag is set and committed before returning.
        """
        if author is None:
            return Decision.ACCEPT
        if author.is_banned:
            logger.info("Dropping submission from banned author %s", author.id)
            return Decision.REJECT_SILENTLY
        if content is None:
            return Decision.ACCEPT

        duplicates = self.repo.count_public_duplicates(author.id, content)
        if duplicates == 0:
            return Decision.ACCEPT
        if duplicates < self.ban_threshold:
            logger.info(
                "Hiding duplicate submission %d from author %s",
                duplicates + 1,
                author.id,
            )
            return Decision.ACCEPT_HIDDEN

        author.is_banned = True
        self.repo.commit()
        logger.warning(
            "Banned author %s after %d duplicate submissions",
            author.id,
            duplicates,
        )
        return Decision.REJECT_SILENTLY
