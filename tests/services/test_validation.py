"""Unit tests for the story validation contract."""

from storyfeed.models import Story
from storyfeed.services.story_service import apply_patch
from storyfeed.services.validation import check_story_fields, validate_story

import pytest

from storyfeed.core.errors import ValidationFailure


def test_valid_story_has_no_errors():
    assert validate_story(Story(content="fine", description=None, is_public=True)) == []


def test_blank_and_missing_content():
    assert [e.field for e in validate_story(Story(content=" \n", is_public=True))] == ["content"]
    _, errors = check_story_fields({"description": "only"})
    assert errors[0].message == "content is required"


def test_length_limits():
    _, errors = check_story_fields({"content": "x" * 2001, "description": "y" * 501})
    assert {e.field for e in errors} == {"content", "description"}


def test_visibility_must_be_boolean():
    _, errors = check_story_fields({"content": "ok", "is_public": "yes"})
    assert [e.field for e in errors] == ["isPublic"]


def test_apply_patch_reports_touched_attributes():
    story = Story(id="s1", content="old", is_public=True)
    touched = apply_patch(story, {"content": "new", "is_public": False, "likeCount": 3})
    assert touched == ["content", "is_public"]
    assert story.content == "new"
    assert story.is_public is False


def test_apply_patch_leaves_story_untouched_on_error():
    story = Story(id="s1", content="old", is_public=True)
    with pytest.raises(ValidationFailure):
        apply_patch(story, {"description": "new", "content": None})
    assert story.content == "old"
    assert story.description is None
