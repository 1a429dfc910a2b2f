"""Caller capabilities and role-tiered projections of stories."""

from __future__ import annotations

import hmac
from collections.abc import Callable
from enum import Enum

from storyfeed.models import Author, Story
from storyfeed.schemas.story import AuthorOut, StoryElevatedOut, StoryOut


class CallerTier(Enum):
    """Projection tier selected for a caller."""

    PUBLIC = "public"
    ELEVATED = "elevated"


def caller_tier(caller: Author | None) -> CallerTier:
    """Return the projection tier for ``caller``.

    Only the elevated-role flag matters; owning a story does not widen the view.
    """
    if caller is not None and caller.is_admin:
        return CallerTier.ELEVATED
    return CallerTier.PUBLIC


def project_public(story: Story) -> StoryOut:
    """Project a story onto the public field set."""
    return StoryOut(
        id=story.id,
        content=story.content,
        created_at=story.created_at,
        view_count=story.view_count,
        postcard=story.postcard,
        author_id=story.author_id,
        like_count=story.like_count,
    )


def project_elevated(story: Story) -> StoryElevatedOut:
    """Project a story with author identity, contact and ban status."""
    author = story.author
    return StoryElevatedOut(
        **project_public(story).model_dump(),
        author=(
            AuthorOut(
                id=author.id,
                username=author.username,
                email=author.email,
                photo_url=author.photo_url,
                is_banned=author.is_banned,
            )
            if author is not None
            else None
        ),
    )


PROJECTIONS: dict[CallerTier, Callable[[Story], StoryOut]] = {
    CallerTier.PUBLIC: project_public,
    CallerTier.ELEVATED: project_elevated,
}


def project_story(story: Story, caller: Author | None) -> StoryOut:
    """Project ``story`` for ``caller``."""
    return PROJECTIONS[caller_tier(caller)](story)


def is_owner(caller: Author | None, story: Story) -> bool:
    """Return True when ``caller`` authored ``story``."""
    return caller is not None and story.author_id is not None and story.author_id == caller.id


def can_modify(caller: Author | None, story: Story, edit_token: str | None = None) -> bool:
    """Capability check for editing or deleting ``story``.

    Permitted for the author, for elevated callers, and for anyone presenting
    the story's edit token.
    """
    if is_owner(caller, story):
        return True
    if caller_tier(caller) is CallerTier.ELEVATED:
        return True
    if isinstance(edit_token, str) and edit_token and story.edit_token:
        return hmac.compare_digest(edit_token.encode(), story.edit_token.encode())
    return False
