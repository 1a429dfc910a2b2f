"""Story-related Pydantic schemas.

Responses use camelCase keys on the wire; Python code keeps snake_case.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StoryCreate(_CamelModel):
    """Schema for submitting a story.

    Field rules are enforced later by the validation contract so that
    duplicate detection runs before any validation error is reported.
    """

    content: str | None = Field(None, description="Story text")
    description: str | None = Field(None, description="Free-text description")


class AuthorOut(_CamelModel):
    """Author fields visible to elevated callers only."""

    id: str
    username: str | None = None
    email: str | None = None
    photo_url: str | None = None
    is_banned: bool


class StoryOut(_CamelModel):
    """Public projection of a story."""

    id: str
    content: str | None
    created_at: datetime
    view_count: int
    postcard: str | None = None
    author_id: str | None = None
    like_count: int


class StoryElevatedOut(StoryOut):
    """Story projection with the joined author record attached."""

    author: AuthorOut | None = None


class FeedPage(_CamelModel):
    """Paginated list envelope, shaped after Stripe's list objects."""

    object: Literal["list"] = "list"
    has_more: bool
    count: int
    data: list[SerializeAsAny[StoryOut]]
    # Exclusive upper bound of this page, in epoch milliseconds.
    before_date: int


class LikeOut(_CamelModel):
    """Like counter after a like or unlike."""

    id: str
    like_count: int


class ViolationOut(_CamelModel):
    """Acknowledgement of a violation report."""

    id: int
    story_id: str
