# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from storyfeed.core.security import create_access_token
from storyfeed.db.session import Base
from storyfeed.db.session import get_db as app_get_session
from storyfeed.db.time import utcnow
from storyfeed.main import app as fastapi_app
from storyfeed.models import Author, Story
from storyfeed.models.story import generate_edit_token, generate_id
from storyfeed.services.postcard import get_postcard_renderer

TEST_DB_URL = "sqlite://"


class FakePostcardRenderer:
    """Postcard renderer that records calls instead of writing files."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.rendered: list[str] = []

    def url_for(self, story: Story) -> str:
        return f"/postcards/{story.id}.svg"

    async def render(self, story: Story) -> str:
        if self.fail:
            raise OSError("disk full")
        self.rendered.append(story.id)
        return self.url_for(story)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def postcard_renderer() -> FakePostcardRenderer:
    return FakePostcardRenderer()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    postcard_renderer: FakePostcardRenderer,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_postcard_renderer] = lambda: postcard_renderer
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_postcard_renderer, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_author(db: Session, author_id: str, **fields: Any) -> Author:
    author = Author(
        id=author_id,
        username=fields.pop("username", author_id.title()),
        email=fields.pop("email", f"{author_id}@example.com"),
        photo_url=fields.pop("photo_url", None),
        **fields,
    )
    db.add(author)
    db.commit()
    return author


@pytest.fixture()
def author(db_session: Session) -> Author:
    """Primary test author."""
    return _make_author(db_session, "alice")


@pytest.fixture()
def other_author(db_session: Session) -> Author:
    """Second, unrelated author."""
    return _make_author(db_session, "bob")


@pytest.fixture()
def admin_author(db_session: Session) -> Author:
    """Author holding the elevated role."""
    return _make_author(db_session, "root", is_admin=True)


@pytest.fixture()
def auth_headers(author: Author) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(author.id)}"}


@pytest.fixture()
def other_auth_headers(other_author: Author) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_author.id)}"}


@pytest.fixture()
def admin_headers(admin_author: Author) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(admin_author.id)}"}


def make_story(
    db: Session,
    *,
    author: Author | None = None,
    content: str = "A short story",
    minutes_ago: int = 5,
    created_at: datetime | None = None,
    **fields: Any,
) -> Story:
    """Insert a story directly, bypassing the submission flow."""
    story = Story(
        id=generate_id(),
        author_id=author.id if author is not None else None,
        content=content,
        description=fields.pop("description", None),
        created_at=created_at or utcnow() - timedelta(minutes=minutes_ago),
        view_count=fields.pop("view_count", 0),
        like_count=fields.pop("like_count", 0),
        is_public=fields.pop("is_public", True),
        is_deleted=fields.pop("is_deleted", False),
        edit_token=generate_edit_token(),
        **fields,
    )
    db.add(story)
    db.commit()
    return story


@pytest.fixture()
def story(db_session: Session, author: Author) -> Story:
    """A visible story by the primary author."""
    return make_story(db_session, author=author, content="Once upon a time")


@pytest.fixture()
def story_factory(db_session: Session):
    """Return a callable inserting stories into the test database."""

    def _factory(**kwargs: Any) -> Story:
        return make_story(db_session, **kwargs)

    return _factory
