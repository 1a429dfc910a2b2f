"""Tests for the service error to HTTP status mapping."""

import pytest
from fastapi import status

from storyfeed.api.v1.errors import status_for
from storyfeed.core.errors import (
    ConflictError,
    FieldError,
    ForbiddenError,
    InternalStoreFailure,
    NotFoundError,
    PostcardFailure,
    StoryFeedError,
    ValidationFailure,
)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (NotFoundError(), status.HTTP_404_NOT_FOUND),
        (ConflictError(), status.HTTP_409_CONFLICT),
        (ForbiddenError(), status.HTTP_403_FORBIDDEN),
        (ValidationFailure([FieldError("content", "bad")]), status.HTTP_400_BAD_REQUEST),
        (InternalStoreFailure(), status.HTTP_500_INTERNAL_SERVER_ERROR),
        (PostcardFailure("s1"), status.HTTP_500_INTERNAL_SERVER_ERROR),
        (StoryFeedError(), status.HTTP_500_INTERNAL_SERVER_ERROR),
    ],
)
def test_status_for(error, expected):
    assert status_for(error) == expected


def test_default_messages():
    assert NotFoundError().message == "Not found"
    assert NotFoundError("Story not found").message == "Story not found"
    assert InternalStoreFailure().message == "Unable to store the record"


def test_field_error_as_dict():
    assert FieldError("content", "required").as_dict() == {
        "field": "content",
        "message": "required",
    }
