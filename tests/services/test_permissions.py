"""Unit tests for caller tiers, projections and the edit capability check."""

from storyfeed.db.time import utcnow
from storyfeed.models import Author, Story
from storyfeed.schemas.story import StoryElevatedOut, StoryOut
from storyfeed.services.permissions import (
    CallerTier,
    can_modify,
    caller_tier,
    project_elevated,
    project_public,
    project_story,
)


def _author(author_id="alice", **flags):
    return Author(id=author_id, username="A", email="a@example.com", **flags)


def _story(author=None):
    story = Story(
        id="s1",
        content="text",
        created_at=utcnow(),
        view_count=3,
        like_count=2,
        edit_token="secret-token",
    )
    if author is not None:
        story.author_id = author.id
        story.author = author
    return story


def test_tier_depends_only_on_role():
    assert caller_tier(None) is CallerTier.PUBLIC
    assert caller_tier(_author(is_admin=False)) is CallerTier.PUBLIC
    assert caller_tier(_author(is_admin=True)) is CallerTier.ELEVATED


def test_public_projection_has_no_author_block():
    owner = _author(is_admin=False)
    projected = project_story(_story(owner), owner)
    assert type(projected) is StoryOut
    dumped = projected.model_dump(by_alias=True)
    assert "author" not in dumped
    assert "editToken" not in dumped
    assert dumped["authorId"] == "alice"


def test_elevated_projection_attaches_author():
    writer = _author(is_banned=True, is_admin=False)
    projected = project_story(_story(writer), _author("root", is_admin=True))
    assert isinstance(projected, StoryElevatedOut)
    assert projected.author.is_banned is True
    assert projected.author.email == "a@example.com"


def test_elevated_projection_of_anonymous_story():
    projected = project_elevated(_story())
    assert projected.author is None
    assert project_public(_story()).author_id is None


def test_can_modify_rules():
    owner = _author("alice", is_admin=False)
    stranger = _author("bob", is_admin=False)
    admin = _author("root", is_admin=True)
    story = _story(owner)

    assert can_modify(owner, story)
    assert can_modify(admin, story)
    assert not can_modify(stranger, story)
    assert not can_modify(None, story)
    assert can_modify(None, story, "secret-token")
    assert can_modify(stranger, story, "secret-token")
    assert not can_modify(None, story, "wrong")
    assert not can_modify(None, story, "")
    assert not can_modify(None, story, 12345)


def test_anonymous_story_has_no_owner():
    assert not can_modify(_author("alice", is_admin=False), _story())
