"""Translate service errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from storyfeed.core.errors import (
    ConflictError,
    ForbiddenError,
    InternalStoreFailure,
    NotFoundError,
    PostcardFailure,
    StoryFeedError,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[StoryFeedError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ValidationFailure: status.HTTP_400_BAD_REQUEST,
    InternalStoreFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: StoryFeedError) -> int:
    """Return the HTTP status for ``exc``, honouring subclasses."""
    for error_type in type(exc).__mro__:
        code = STATUS_BY_ERROR.get(error_type)  # type: ignore[arg-type]
        if code is not None:
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def story_feed_error_handler(request: Request, exc: StoryFeedError) -> JSONResponse:
    """Render a service error as ``{"detail": ..., "errors": [...]}``."""
    body: dict[str, object] = {"detail": exc.message}
    if isinstance(exc, ValidationFailure):
        body["errors"] = [error.as_dict() for error in exc.errors]
    if isinstance(exc, PostcardFailure):
        body["storyId"] = exc.story_id
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the service error handler on ``app``."""
    app.add_exception_handler(StoryFeedError, story_feed_error_handler)  # type: ignore[arg-type]
