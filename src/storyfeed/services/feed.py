"""Feed retrieval: query parsing, query composition and the list envelope.

A feed request is reduced to a :class:`FeedQuery`; :class:`FeedQueryBuilder`
turns it into two independent statements, a paginated page query and an
unpaginated count query sharing the same filter. They are not run inside one
snapshot, so under concurrent writes ``count`` may disagree slightly with the
page contents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.orm import contains_eager

from storyfeed.core.errors import FieldError, ValidationFailure
from storyfeed.core.settings import settings
from storyfeed.db.time import as_utc, from_epoch_millis, to_epoch_millis, utcnow
from storyfeed.models import Author, Story
from storyfeed.repositories.story_repo import StoryRepository
from storyfeed.schemas.story import FeedPage
from storyfeed.services.permissions import project_story

logger = logging.getLogger(__name__)

RANDOM_ORDER = "RAND()"

# Public order keys (camelCase as sent by clients, snake_case accepted too).
ORDERABLE_FIELDS = {
    "createdAt": Story.created_at,
    "created_at": Story.created_at,
    "viewCount": Story.view_count,
    "view_count": Story.view_count,
    "likeCount": Story.like_count,
    "like_count": Story.like_count,
}

DEFAULT_ORDER: tuple[str, ...] = ("createdAt",)


@dataclass(frozen=True)
class FeedQuery:
    """Normalized feed request."""

    before_date: datetime
    limit: int
    offset: int = 0
    order: tuple[str, ...] = DEFAULT_ORDER
    random: bool = False

    @property
    def loaded(self) -> int:
        """Number of items a client holds after receiving this page."""
        return self.offset + self.limit


def parse_limit(raw: str | int | None) -> int:
    """Clamp the page size to [1, FEED_MAX_LIMIT]; non-numeric input gives the default."""
    if raw is None or raw == "":
        return settings.feed_default_limit
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return settings.feed_default_limit
    return max(1, min(settings.feed_max_limit, value))


def parse_offset(raw: str | int | None) -> int:
    """Return a non-negative offset; anything else collapses to 0."""
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 0
    return max(0, value)


def parse_before_date(raw: str | None, now: datetime | None = None) -> datetime:
    """Parse the cursor: ISO-8601 or epoch milliseconds, defaulting to now."""
    if raw is None or not raw.strip():
        return as_utc(now) if now is not None else utcnow()
    text = raw.strip()
    try:
        if text.lstrip("-").isdigit():
            return from_epoch_millis(int(text))
        return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except (ValueError, OverflowError, OSError) as exc:
        raise ValidationFailure(
            [FieldError("beforeDate", "beforeDate must be ISO-8601 or epoch milliseconds")]
        ) from exc


def parse_order(raw: str | None) -> tuple[tuple[str, ...], bool]:
    """Parse a comma-separated order list.

    Returns:
        ``(fields, random)``. ``RAND()`` anywhere in the list requests a random
        draw and discards the other keys.

    Raises:
        ValidationFailure: If a key is not orderable.
    """
    if raw is None:
        return DEFAULT_ORDER, False
    keys = [part.strip() for part in raw.split(",") if part.strip()]
    if not keys:
        return DEFAULT_ORDER, False
    if any(key.upper() == RANDOM_ORDER for key in keys):
        return (), True
    unknown = [key for key in keys if key not in ORDERABLE_FIELDS]
    if unknown:
        raise ValidationFailure(
            [FieldError("orderBy", f"cannot order by '{key}'") for key in unknown]
        )
    return tuple(keys), False


def build_feed_query(
    *,
    before_date: str | None = None,
    limit: str | int | None = None,
    offset: str | int | None = None,
    order_by: str | None = None,
) -> FeedQuery:
    """Normalize raw request parameters into a :class:`FeedQuery`."""
    order, random = parse_order(order_by)
    return FeedQuery(
        before_date=parse_before_date(before_date),
        limit=parse_limit(limit),
        offset=parse_offset(offset),
        order=order,
        random=random,
    )


class FeedQueryBuilder:
    """Compose the page and count statements for a feed query."""

    def __init__(self, stable_tiebreak: bool | None = None) -> None:
        if stable_tiebreak is None:
            stable_tiebreak = settings.feed_stable_tiebreak
        self.stable_tiebreak = stable_tiebreak

    @staticmethod
    def visibility_filter(before_date: datetime) -> list[ColumnElement[bool]]:
        """Conditions every feed item satisfies."""
        return [
            Story.is_public.is_(True),
            Story.is_deleted.is_(False),
            Story.created_at < before_date,
            or_(Story.author_id.is_(None), Author.is_banned.is_(False)),
        ]

    def order_clauses(self, query: FeedQuery) -> list[ColumnElement]:
        if query.random:
            return [func.random()]
        clauses: list[ColumnElement] = []
        seen = set()
        for key in query.order:
            column = ORDERABLE_FIELDS[key]
            if column.key in seen:
                continue
            seen.add(column.key)
            clauses.append(column.desc())
        if self.stable_tiebreak:
            clauses.append(Story.id.desc())
        return clauses

    def page_statement(self, query: FeedQuery) -> Select[tuple[Story]]:
        """Ordered, paginated statement with the author joined in."""
        return (
            select(Story)
            .outerjoin(Author, Story.author_id == Author.id)
            .options(contains_eager(Story.author))
            .where(*self.visibility_filter(query.before_date))
            .order_by(*self.order_clauses(query))
            .limit(query.limit)
            .offset(query.offset)
        )

    def count_statement(self, query: FeedQuery) -> Select[tuple[int]]:
        """Unordered, unpaginated count over the same filter."""
        return (
            select(func.count(Story.id))
            .select_from(Story)
            .outerjoin(Author, Story.author_id == Author.id)
            .where(*self.visibility_filter(query.before_date))
        )

    def build(self, query: FeedQuery) -> tuple[Select[tuple[Story]], Select[tuple[int]]]:
        """Return ``(page_statement, count_statement)``."""
        return self.page_statement(query), self.count_statement(query)


def list_feed(
    repo: StoryRepository,
    query: FeedQuery,
    caller: Author | None,
    builder: FeedQueryBuilder | None = None,
) -> FeedPage:
    """Run a feed query and assemble the list envelope for ``caller``."""
    builder = builder or FeedQueryBuilder()
    page_stmt, count_stmt = builder.build(query)
    stories = repo.fetch_page(page_stmt)
    total = repo.fetch_count(count_stmt)
    logger.debug(
        "Feed page offset=%d limit=%d returned %d of %d",
        query.offset,
        query.limit,
        len(stories),
        total,
    )
    return FeedPage(
        has_more=total > query.loaded,
        count=total,
        data=[project_story(story, caller) for story in stories],
        before_date=to_epoch_millis(query.before_date),
    )
