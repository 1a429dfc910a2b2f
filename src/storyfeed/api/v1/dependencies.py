"""Shared API dependencies for caller identity and data access."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from storyfeed.core.security import decode_subject
from storyfeed.db.session import get_db
from storyfeed.models import Author
from storyfeed.repositories.story_repo import StoryRepository
from storyfeed.services.postcard import PostcardRenderer, get_postcard_renderer

# Identity is optional on most story routes, so missing credentials are not an error here.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_repository(db: SessionDep) -> StoryRepository:
    """Return a repository bound to the request's session."""
    return StoryRepository(db)


RepositoryDep = Annotated[StoryRepository, Depends(get_repository)]
RendererDep = Annotated[PostcardRenderer, Depends(get_postcard_renderer)]


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_optional_author(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    repo: RepositoryDep,
) -> Author | None:
    """Resolve the calling author, or ``None`` for anonymous requests.

    A token that is present but invalid is rejected rather than treated as
    anonymous.

    Raises:
        HTTPException: If the token is invalid or names an unknown author.
    """
    if credentials is None:
        return None
    try:
        subject = decode_subject(credentials.credentials)
    except JWTError as err:
        raise _unauthorized() from err
    if subject is None:
        raise _unauthorized()

    author = repo.get_author(subject)
    if author is None:
        raise _unauthorized("Author not found")
    return author


OptionalAuthorDep = Annotated[Author | None, Depends(get_optional_author)]


def get_current_author(author: OptionalAuthorDep) -> Author:
    """Require an authenticated author.

    Raises:
        HTTPException: If the request carries no credentials.
    """
    if author is None:
        raise _unauthorized("Not authenticated")
    return author


CurrentAuthorDep = Annotated[Author, Depends(get_current_author)]
