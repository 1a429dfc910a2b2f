"""Story endpoints: feed, single reads, submission, edits and engagement."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Path, Query, status
from fastapi.encoders import jsonable_encoder

from storyfeed.api.v1.dependencies import (
    CurrentAuthorDep,
    OptionalAuthorDep,
    RendererDep,
    RepositoryDep,
)
from storyfeed.models.story import ID_PATTERN
from storyfeed.schemas.story import FeedPage, LikeOut, StoryCreate, StoryOut, ViolationOut
from storyfeed.services import story_service
from storyfeed.services.engagement import EngagementLedger
from storyfeed.services.feed import build_feed_query, list_feed
from storyfeed.services.permissions import project_story

router = APIRouter(prefix="/stories", tags=["stories"])

StoryIdPath = Annotated[str, Path(pattern=ID_PATTERN, max_length=32)]


@router.get("/", response_model=None)
async def list_stories(
    repo: RepositoryDep,
    caller: OptionalAuthorDep,
    before_date: str | None = Query(
        None,
        alias="beforeDate",
        description="Exclusive upper bound, ISO-8601 or epoch milliseconds (default: now)",
    ),
    limit: str | None = Query(None, description="Page size, clamped to 1..50 (default 10)"),
    offset: str | None = Query(None, description="Number of items to skip (default 0)"),
    order_by: str | None = Query(
        None,
        alias="orderBy",
        description="Comma-separated fields ordered descending, or RAND()",
    ),
) -> FeedPage:
    """List public stories, newest first unless ``orderBy`` says otherwise."""
    query = build_feed_query(
        before_date=before_date,
        limit=limit,
        offset=offset,
        order_by=order_by,
    )
    return list_feed(repo, query, caller)


@router.get("/{story_id}", response_model=None)
async def get_story(
    story_id: StoryIdPath,
    repo: RepositoryDep,
    caller: OptionalAuthorDep,
) -> StoryOut:
    """Return one story and count the view."""
    story = story_service.get_story(repo, story_id)
    return project_story(story, caller)


@router.get("/{story_id}/postcard", response_model=None)
async def get_story_postcard(
    story_id: StoryIdPath,
    repo: RepositoryDep,
    caller: OptionalAuthorDep,
) -> StoryOut:
    """Postcard view of a story; currently the same payload as a plain read."""
    story = story_service.get_story(repo, story_id)
    return project_story(story, caller)


@router.post("/", response_model=None, status_code=status.HTTP_201_CREATED)
async def create_story(
    payload: StoryCreate,
    repo: RepositoryDep,
    renderer: RendererDep,
    caller: OptionalAuthorDep,
) -> dict[str, Any]:
    """Submit a story.

    The response always looks like a freshly created story and includes the
    edit token that lets an anonymous submitter change it later.
    """
    story = await story_service.create_story(
        repo=repo,
        renderer=renderer,
        author=caller,
        content=payload.content,
        description=payload.description,
    )
    body: dict[str, Any] = jsonable_encoder(project_story(story, caller))
    body["editToken"] = story.edit_token
    return body


@router.patch("/{story_id}", response_model=None)
async def edit_story(
    story_id: StoryIdPath,
    repo: RepositoryDep,
    caller: OptionalAuthorDep,
    patch: Annotated[dict[str, Any], Body()],
) -> StoryOut:
    """Edit a story as its author, an elevated caller, or with its edit token."""
    story = story_service.edit_story(repo, story_id, caller, patch)
    return project_story(story, caller)


@router.post("/{story_id}/like", response_model=LikeOut)
async def like_story(
    story_id: StoryIdPath,
    repo: RepositoryDep,
    author: CurrentAuthorDep,
) -> LikeOut:
    """Like a story once per author."""
    story = EngagementLedger(repo).like(author.id, story_id)
    return LikeOut(id=story.id, like_count=story.like_count)


@router.delete("/{story_id}/like", response_model=LikeOut)
async def unlike_story(
    story_id: StoryIdPath,
    repo: RepositoryDep,
    author: CurrentAuthorDep,
) -> LikeOut:
    """Withdraw a like."""
    story = EngagementLedger(repo).unlike(author.id, story_id)
    return LikeOut(id=story.id, like_count=story.like_count)


@router.post(
    "/{story_id}/violation",
    response_model=ViolationOut,
    status_code=status.HTTP_201_CREATED,
)
async def report_violation(
    story_id: StoryIdPath,
    repo: RepositoryDep,
    caller: OptionalAuthorDep,
) -> ViolationOut:
    """Report a story; reports may be anonymous."""
    violation = EngagementLedger(repo).report_violation(
        story_id,
        caller.id if caller is not None else None,
    )
    return ViolationOut(id=violation.id, story_id=violation.story_id)
