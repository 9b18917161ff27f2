"""Stories — content store operations, including the navigation query.

Invariants:
    - Canonical order is created_at ascending
    - find_neighbors(): previous = greatest created_at strictly below the anchor,
      next = least created_at strictly above; equal timestamps are never neighbors
    - update_story() on a missing id reports 0 modified instead of failing
    - delete_story_record() commits before returning, so a later cascade never
      runs inside the parent's transaction

Design Decisions:
    - Category filter is a subquery on story_categories: works on SQLite and PostgreSQL alike
    - Ownership is checked only when ENFORCE_OWNERSHIP is on
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bugle.core.domain_types import Identity, StoryId
from bugle.core.enforce_access import check_ownership
from bugle.core.errors import ForbiddenError, ResourceNotFoundError
from bugle.models.story import Story, StoryCategory
from bugle.schemas.story import StoryCreate, StoryUpdate

logger = logging.getLogger(__name__)


async def create_story(db: AsyncSession, data: StoryCreate, author: str) -> Story:
    now = datetime.now(timezone.utc)
    story = Story(
        title=data.title,
        teaser=data.teaser,
        body=data.body,
        author=author,
        created_at=now,
        edited_at=now,
    )
    story.categories = data.categories
    db.add(story)
    await db.commit()
    logger.info("Story created", extra={"story_id": str(story.id), "username": author})
    return story


async def list_stories(
    db: AsyncSession,
    category: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Story]:
    """All stories (optionally one category) in canonical order."""
    query = select(Story).order_by(Story.created_at.asc())
    if category:
        query = query.where(
            Story.id.in_(
                select(StoryCategory.story_id).where(StoryCategory.name == category),
            ),
        )
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_story(db: AsyncSession, story_id: StoryId) -> Story:
    """Get story or raise 404."""
    result = await db.execute(select(Story).where(Story.id == story_id))
    story = result.scalar_one_or_none()
    if story is None:
        raise ResourceNotFoundError("Story", str(story_id))
    return story


async def find_neighbors(
    db: AsyncSession, story_id: StoryId,
) -> tuple[Story | None, Story | None]:
    """Previous and next story around an anchor in created_at order."""
    anchor = await get_story(db, story_id)

    previous = (await db.execute(
        select(Story)
        .where(Story.created_at < anchor.created_at)
        .order_by(Story.created_at.desc())
        .limit(1),
    )).scalar_one_or_none()

    following = (await db.execute(
        select(Story)
        .where(Story.created_at > anchor.created_at)
        .order_by(Story.created_at.asc())
        .limit(1),
    )).scalar_one_or_none()

    return previous, following


async def update_story(
    db: AsyncSession,
    story_id: StoryId,
    changes: StoryUpdate,
    caller: Identity,
    enforce_ownership: bool = False,
) -> int:
    """Apply a partial update. Returns the number of stories modified (0 or 1)."""
    result = await db.execute(select(Story).where(Story.id == story_id))
    story = result.scalar_one_or_none()
    if story is None:
        return 0

    denial = check_ownership(story.author, caller.username, enforce_ownership)
    if denial:
        raise ForbiddenError(denial)

    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    categories = fields.pop("categories", None)
    for name, value in fields.items():
        setattr(story, name, value)
    if categories is not None:
        story.categories = categories
    story.edited_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info(
        "Story updated", extra={"story_id": str(story_id), "username": caller.username},
    )
    return 1


async def delete_story_record(
    db: AsyncSession,
    story_id: StoryId,
    caller: Identity,
    enforce_ownership: bool = False,
) -> None:
    """Delete one story. Raises ResourceNotFoundError when nothing matched."""
    if enforce_ownership:
        story = await get_story(db, story_id)
        denial = check_ownership(story.author, caller.username, enforce_ownership)
        if denial:
            raise ForbiddenError(denial)

    await db.execute(delete(StoryCategory).where(StoryCategory.story_id == story_id))
    result = await db.execute(delete(Story).where(Story.id == story_id))
    if result.rowcount == 0:
        await db.rollback()
        raise ResourceNotFoundError("Story", str(story_id))
    await db.commit()
    logger.info(
        "Story deleted", extra={"story_id": str(story_id), "username": caller.username},
    )
