"""Discussion Routes — comments, text search and the internal bulk delete.

Invariants:
    - /comments/search is registered before /comments/{story_id} so it is reachable
    - Creating needs reader or author; editing and deleting need author
      (discussion guard, revalidating by default)
    - DELETE /comments/story/{story_id} is unauthenticated: it is the content
      service's cascade target and must not depend on the end user's cookie
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bugle.api.dependencies import Page, get_app_settings, get_page
from bugle.api.guards import require_author, require_commenter
from bugle.config import Settings
from bugle.core.domain_types import CommentId, Identity, StoryId
from bugle.infrastructure.database import get_db
from bugle.schemas.comment import (
    CommentCreate, CommentCreated, CommentDeleted, CommentResponse,
    CommentsDeleted, CommentUpdate, CommentUpdated,
)
from bugle.services import comments as comment_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/comments", tags=["comments"])


@router.post(
    "", response_model=CommentCreated, status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    body: CommentCreate,
    caller: Identity = Depends(require_commenter),
    db: AsyncSession = Depends(get_db),
):
    """Comment on a story. The story's existence is not checked."""
    comment = await comment_service.create_comment(
        db, StoryId(body.story_id), body.text, commenter=caller.username,
    )
    return CommentCreated(comment_id=comment.id)


@router.get("/search", response_model=list[CommentResponse])
async def search_comments(
    query: str = Query(min_length=1, max_length=500),
    story_id: UUID | None = Query(None, alias="storyId"),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Comments matching `query` (case-insensitive), optionally for one story."""
    comments = await comment_service.search_comments(
        db, query,
        story_id=StoryId(story_id) if story_id else None,
        mode=settings.search_mode,
        limit=page.limit, offset=page.offset,
    )
    return [CommentResponse.model_validate(c) for c in comments]


@router.get("/{story_id}", response_model=list[CommentResponse])
async def list_comments(
    story_id: UUID,
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
):
    comments = await comment_service.list_comments(
        db, StoryId(story_id), limit=page.limit, offset=page.offset,
    )
    return [CommentResponse.model_validate(c) for c in comments]


@router.put("/{comment_id}", response_model=CommentUpdated)
async def update_comment(
    comment_id: UUID,
    body: CommentUpdate,
    caller: Identity = Depends(require_author),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    matched = await comment_service.update_comment(
        db, CommentId(comment_id), body.text, caller,
        enforce_ownership=settings.enforce_ownership,
    )
    return CommentUpdated(matched_count=matched, modified_count=matched)


@router.delete("/story/{story_id}", response_model=CommentsDeleted)
async def delete_comments_for_story(
    story_id: UUID, db: AsyncSession = Depends(get_db),
):
    """Cascade target: drop every comment of a story."""
    deleted = await comment_service.delete_comments_for_story(db, StoryId(story_id))
    return CommentsDeleted(deleted_count=deleted)


@router.delete("/{comment_id}", response_model=CommentDeleted)
async def delete_comment(
    comment_id: UUID,
    caller: Identity = Depends(require_author),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    deleted = await comment_service.delete_comment(
        db, CommentId(comment_id), caller,
        enforce_ownership=settings.enforce_ownership,
    )
    return CommentDeleted(deleted_count=deleted)
