"""Service-level helpers for creating, reading and editing stories."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from storyfeed.core.errors import (
    ConflictError,
    ForbiddenError,
    InternalStoreFailure,
    NotFoundError,
    PostcardFailure,
    ValidationFailure,
)
from storyfeed.db.time import utcnow
from storyfeed.models import Author, Story
from storyfeed.models.story import generate_edit_token, generate_id
from storyfeed.repositories.story_repo import StoryRepository
from storyfeed.services.abuse_guard import AbuseGuard, Decision
from storyfeed.services.permissions import can_modify
from storyfeed.services.postcard import PostcardRenderer
from storyfeed.services.validation import check_story_fields, story_field_values, validate_story

logger = logging.getLogger(__name__)

# Wire keys a patch may touch, mapped to model attributes. Everything else,
# including the edit token itself, is ignored.
PATCHABLE_FIELDS: dict[str, str] = {
    "content": "content",
    "description": "description",
    "isPublic": "is_public",
    "is_public": "is_public",
}
EDIT_TOKEN_KEY = "editToken"


def new_story(author: Author | None, content: str | None, description: str | None) -> Story:
    """Build a transient story with every server-assigned field filled in."""
    story = Story(
        id=generate_id(),
        content=content,
        description=description,
        created_at=utcnow(),
        view_count=0,
        like_count=0,
        is_public=True,
        is_deleted=False,
        edit_token=generate_edit_token(),
    )
    if author is not None:
        story.author_id = author.id
        story.author = author
    return story


async def _attach_postcard(story: Story, renderer: PostcardRenderer) -> None:
    try:
        story.postcard = await renderer.render(story)
    except OSError as exc:
        logger.error("Postcard rendering failed for story %s: %s", story.id, exc)
        raise PostcardFailure(story.id) from exc


async def create_story(
    *,
    repo: StoryRepository,
    renderer: PostcardRenderer,
    author: Author | None,
    content: str | None,
    description: str | None = None,
    guard: AbuseGuard | None = None,
) -> Story:
    """Create a story on behalf of ``author`` (``None`` for anonymous).

    Duplicate detection runs first. Silently rejected submissions still get
    a fully populated story back, with a postcard URL but no rendered card,
    and are never persisted.

    Raises:
        ValidationFailure: If an accepted submission breaks field rules.
        InternalStoreFailure: If the first insert fails.
        PostcardFailure: If the story was stored but the postcard step failed.
    """
    story = new_story(author, content, description)
    decision = (guard or AbuseGuard(repo)).evaluate(author, content)

    if not decision.persists:
        # Same URL shape as a rendered card, but nothing is written for a
        # story that will never be stored.
        story.postcard = renderer.url_for(story)
        return story

    if decision is Decision.ACCEPT_HIDDEN:
        story.is_deleted = True

    errors = validate_story(story)
    if errors:
        raise ValidationFailure(errors)

    repo.add(story)
    try:
        repo.commit()
    except ConflictError as exc:
        raise InternalStoreFailure() from exc
    logger.info("Created story %s (%s)", story.id, decision.value)

    await _attach_postcard(story, renderer)
    try:
        repo.commit()
    except InternalStoreFailure as exc:
        raise PostcardFailure(story.id) from exc
    return story


def get_story(repo: StoryRepository, story_id: str) -> Story:
    """Fetch a story and count the view.

    The view increment is a best-effort read-modify-write: concurrent reads
    may lose increments, and a failed write does not fail the read.
    """
    story = repo.get_story(story_id)
    if story is None:
        raise NotFoundError("Story not found")
    story.view_count += 1
    try:
        repo.commit()
    except InternalStoreFailure:
        logger.warning("Could not record view for story %s", story_id)
    return story


def apply_patch(story: Story, patch: Mapping[str, Any]) -> list[str]:
    """Validate and apply the patchable keys of ``patch`` to ``story``.

    Returns:
        The model attributes that were changed.

    Raises:
        ValidationFailure: If the patched story would be invalid.
    """
    values = story_field_values(story)
    touched: list[str] = []
    for key, value in patch.items():
        attribute = PATCHABLE_FIELDS.get(key)
        if attribute is None:
            if key != EDIT_TOKEN_KEY:
                logger.debug("Ignoring non-patchable key %r for story %s", key, story.id)
            continue
        values[attribute] = value
        touched.append(attribute)

    fields, errors = check_story_fields(values)
    if fields is None:
        raise ValidationFailure(errors)
    for attribute in touched:
        setattr(story, attribute, getattr(fields, attribute))
    return touched


def edit_story(
    repo: StoryRepository,
    story_id: str,
    caller: Author | None,
    patch: Mapping[str, Any],
) -> Story:
    """Apply ``patch`` to a story as ``caller``.

    Raises:
        NotFoundError: If the story does not exist.
        ForbiddenError: If the caller is not the author, not elevated and
            did not present the edit token.
        ValidationFailure: If the patched story is invalid.
        ConflictError: If the store rejects the update.
    """
    story = repo.get_story(story_id)
    if story is None:
        raise NotFoundError("Story not found")
    if not can_modify(caller, story, patch.get(EDIT_TOKEN_KEY)):
        raise ForbiddenError("Not allowed to edit this story")

    apply_patch(story, patch)
    try:
        repo.commit()
    except InternalStoreFailure as exc:
        raise ConflictError("Can't save story") from exc
    return story


def delete_story(repo: StoryRepository, story_id: str, caller: Author | None) -> None:
    """Physically delete a story. Not exposed over HTTP."""
    story = repo.get_story(story_id)
    if story is None:
        raise NotFoundError("Story not found")
    if not can_modify(caller, story):
        raise ForbiddenError("Not allowed to delete this story")
    repo.delete(story)
    repo.commit()
    logger.info("Deleted story %s", story_id)
