"""Field-level validation contract for stories.

Rules live in a Pydantic model; callers get plain ``FieldError`` lists so
the API layer can report them in one structured response.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, StrictBool, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from storyfeed.core.errors import FieldError
from storyfeed.core.settings import settings
from storyfeed.models import Story


class StoryFields(BaseModel):
    """User-controlled story fields and their rules."""

    content: str | None = Field(default=None, validate_default=True)
    description: str | None = None
    is_public: StrictBool = True

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("content is required")
        limit = settings.story_content_max_length
        if len(value) > limit:
            raise ValueError(f"content must be at most {limit} characters")
        return value

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str | None) -> str | None:
        limit = settings.story_description_max_length
        if value is not None and len(value) > limit:
            raise ValueError(f"description must be at most {limit} characters")
        return value


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for error in exc.errors():
        # Report wire names (isPublic), not attribute names.
        field = ".".join(to_camel(str(part)) for part in error["loc"]) or "__root__"
        message = error["msg"]
        # Pydantic prefixes messages raised from validators.
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append(FieldError(field=field, message=message))
    return errors


def check_story_fields(values: Mapping[str, Any]) -> tuple[StoryFields | None, list[FieldError]]:
    """Validate a mapping of story fields.

    Returns:
        The validated fields and an empty list, or ``None`` and the errors.
    """
    try:
        return StoryFields.model_validate(dict(values)), []
    except ValidationError as exc:
        return None, _field_errors(exc)


def story_field_values(story: Story) -> dict[str, Any]:
    """Return the user-controlled fields currently set on a story."""
    return {
        "content": story.content,
        "description": story.description,
        "is_public": story.is_public,
    }


def validate_story(story: Story) -> list[FieldError]:
    """Return the validation errors for a story; empty when valid."""
    _, errors = check_story_fields(story_field_values(story))
    return errors
