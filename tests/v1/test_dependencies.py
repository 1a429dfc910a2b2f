# tests/v1/test_dependencies.py
"""Tests for caller identity resolution."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from storyfeed.api.v1.dependencies import get_current_author, get_optional_author
from storyfeed.core.security import create_access_token
from storyfeed.core.settings import settings
from storyfeed.repositories.story_repo import StoryRepository


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetOptionalAuthor:
    """Resolution of the optional caller."""

    def test_no_credentials_is_anonymous(self, db_session):
        assert get_optional_author(None, StoryRepository(db_session)) is None

    def test_valid_token_resolves_author(self, db_session, author):
        caller = get_optional_author(
            _credentials(create_access_token(author.id)),
            StoryRepository(db_session),
        )
        assert caller.id == author.id

    def test_malformed_token_is_rejected(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_optional_author(_credentials("not.a.valid.jwt"), StoryRepository(db_session))
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unknown_author_is_rejected(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_optional_author(
                _credentials(create_access_token("ghost")),
                StoryRepository(db_session),
            )
        assert exc_info.value.detail == "Author not found"

    def test_token_without_subject_is_rejected(self, db_session):
        token = jwt.encode(
            {"exp": datetime.now(UTC) + timedelta(minutes=5)},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(HTTPException):
            get_optional_author(_credentials(token), StoryRepository(db_session))


class TestGetCurrentAuthor:
    """The authenticated-only variant."""

    def test_requires_author(self):
        with pytest.raises(HTTPException) as exc_info:
            get_current_author(None)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Not authenticated"

    def test_passes_author_through(self, author):
        assert get_current_author(author) is author


class TestTokenValidationOverHttp:
    """Bad tokens never degrade to anonymous access."""

    def test_wrong_secret(self, client, author):
        token = jwt.encode(
            {"sub": author.id, "exp": datetime.now(UTC) + timedelta(minutes=5)},
            "wrong_secret_key",
            algorithm=settings.jwt_algorithm,
        )
        response = client.get("/api/v1/stories/", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token(self, client, author):
        token = jwt.encode(
            {"sub": author.id, "exp": datetime.now(UTC) - timedelta(minutes=1)},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )
        response = client.get("/api/v1/stories/", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_like_requires_authentication(self, client, story):
        response = client.post(f"/api/v1/stories/{story.id}/like")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_anonymous_feed_read(self, client, story):
        response = client.get("/api/v1/stories/")
        assert response.status_code == status.HTTP_200_OK
