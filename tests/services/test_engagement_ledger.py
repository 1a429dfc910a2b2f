"""Unit tests for like bookkeeping and violation reports."""

import pytest
from sqlalchemy import insert

from storyfeed.core.errors import ConflictError, NotFoundError
from storyfeed.models import Like
from storyfeed.repositories.story_repo import StoryRepository
from storyfeed.services.engagement import EngagementLedger


@pytest.fixture()
def ledger(db_session):
    return EngagementLedger(StoryRepository(db_session))


def test_like_recomputes_counter_from_rows(ledger, db_session, story, author):
    """A stale counter is corrected on the next like."""
    story.like_count = 41
    db_session.commit()

    updated = ledger.like(author.id, story.id)
    assert updated.like_count == 1


def test_like_unknown_author(ledger, story):
    with pytest.raises(NotFoundError, match="Author not found"):
        ledger.like("nobody", story.id)


def test_store_uniqueness_catches_racing_like(ledger, db_session, story, author, monkeypatch):
    """When the pre-check misses a concurrent like, the store still refuses it."""
    db_session.execute(insert(Like).values(author_id=author.id, story_id=story.id))
    db_session.commit()
    monkeypatch.setattr(ledger.repo, "get_like", lambda author_id, story_id: None)

    with pytest.raises(ConflictError):
        ledger.like(author.id, story.id)

    assert db_session.query(Like).count() == 1


def test_unlike_recomputes_counter(ledger, story, author, other_author):
    ledger.like(author.id, story.id)
    ledger.like(other_author.id, story.id)
    assert ledger.unlike(author.id, story.id).like_count == 1


def test_unlike_without_like(ledger, story, author):
    with pytest.raises(NotFoundError, match="Like not found"):
        ledger.unlike(author.id, story.id)


def test_report_violation(ledger, story, author):
    anonymous = ledger.report_violation(story.id)
    signed = ledger.report_violation(story.id, author.id)
    assert anonymous.author_id is None
    assert signed.author_id == author.id
    assert [v.id for v in ledger.repo.list_violations(story.id)] == [anonymous.id, signed.id]


def test_report_violation_unknown_story(ledger):
    with pytest.raises(NotFoundError):
        ledger.report_violation("missing")
