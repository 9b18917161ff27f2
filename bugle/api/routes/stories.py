"""Content Routes — story CRUD, category listing, navigation and cascading delete.

Invariants:
    - Malformed story ids are rejected with 400 before any store access
    - Reads are public; create/update/delete need the author role (content guard)
    - DELETE answers 200 once the story row is gone, whatever happened to its
      comments (unless CASCADE_STRICT is on)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bugle.api.dependencies import (
    Page, get_app_settings, get_discussion_client, get_page,
)
from bugle.api.guards import require_author
from bugle.config import Settings
from bugle.core.domain_types import Identity, StoryId
from bugle.infrastructure.database import get_db
from bugle.infrastructure.discussion_client import DiscussionClient
from bugle.schemas.story import (
    StoryCreate, StoryCreated, StoryDeleted, StoryNavigation,
    StoryResponse, StoryUpdate, StoryUpdated,
)
from bugle.services import stories as story_service
from bugle.services.cascade import StoryDeletionOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/stories", tags=["stories"])


@router.post(
    "", response_model=StoryCreated, status_code=status.HTTP_201_CREATED,
)
async def create_story(
    body: StoryCreate,
    caller: Identity = Depends(require_author),
    db: AsyncSession = Depends(get_db),
):
    """Publish a story as the calling author."""
    story = await story_service.create_story(db, body, author=caller.username)
    return StoryCreated(story_id=story.id)


@router.get("", response_model=list[StoryResponse])
async def list_stories(
    category: str | None = Query(None, max_length=100),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
):
    """All stories in publication order, optionally one category."""
    stories = await story_service.list_stories(
        db, category=category, limit=page.limit, offset=page.offset,
    )
    return [StoryResponse.model_validate(s) for s in stories]


@router.get("/{story_id}/navigation", response_model=StoryNavigation)
async def navigate(story_id: UUID, db: AsyncSession = Depends(get_db)):
    """Previous and next story around the given one."""
    previous, following = await story_service.find_neighbors(db, StoryId(story_id))
    return StoryNavigation(
        previous=StoryResponse.model_validate(previous) if previous else None,
        next=StoryResponse.model_validate(following) if following else None,
    )


@router.get("/{story_id}", response_model=StoryResponse)
async def get_story(story_id: UUID, db: AsyncSession = Depends(get_db)):
    story = await story_service.get_story(db, StoryId(story_id))
    return StoryResponse.model_validate(story)


@router.put("/{story_id}", response_model=StoryUpdated)
async def update_story(
    story_id: UUID,
    body: StoryUpdate,
    caller: Identity = Depends(require_author),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Partially update a story. Any author may edit any story unless ownership is enforced."""
    modified = await story_service.update_story(
        db, StoryId(story_id), body, caller,
        enforce_ownership=settings.enforce_ownership,
    )
    return StoryUpdated(modified_count=modified)


@router.delete("/{story_id}", response_model=StoryDeleted)
async def delete_story(
    story_id: UUID,
    caller: Identity = Depends(require_author),
    db: AsyncSession = Depends(get_db),
    discussion: DiscussionClient = Depends(get_discussion_client),
    settings: Settings = Depends(get_app_settings),
):
    """Delete a story, then ask the discussion service to drop its comments."""
    orchestrator = StoryDeletionOrchestrator(
        db, discussion,
        strict=settings.cascade_strict,
        enforce_ownership=settings.enforce_ownership,
    )
    await orchestrator.delete(StoryId(story_id), caller)
    return StoryDeleted()
