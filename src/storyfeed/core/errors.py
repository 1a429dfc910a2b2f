"""Error taxonomy raised by the service layer.

The API layer maps each class to an HTTP status in
``storyfeed.api.v1.errors``; services never build HTTP responses themselves.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation problem."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class StoryFeedError(RuntimeError):
    """Base exception for all story feed failures."""

    default_message = "Story feed error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class NotFoundError(StoryFeedError):
    """Raised when a referenced story, author or like does not exist."""

    default_message = "Not found"


class ConflictError(StoryFeedError):
    """Raised for duplicate likes and conflicting writes."""

    default_message = "Conflict"


class ForbiddenError(StoryFeedError):
    """Raised when the caller may not modify the resource."""

    default_message = "Forbidden"


class ValidationFailure(StoryFeedError):
    """Raised when submitted values break field or content rules."""

    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors)


class InternalStoreFailure(StoryFeedError):
    """Raised when the record store fails unexpectedly.

    The message is generic; the underlying driver error is only logged.
    """

    default_message = "Unable to store the record"


class PostcardFailure(InternalStoreFailure):
    """Raised when a story was stored but its postcard could not be attached."""

    default_message = "Story created, postcard rendering failed"

    def __init__(self, story_id: str, message: str | None = None) -> None:
        super().__init__(message)
        self.story_id = story_id
