"""Comments — discussion store operations.

Invariants:
    - create_comment() does not check that the story exists (no cross-service FK)
    - search_comments() is case-insensitive in both modes: "pattern" treats the
      query as a regular expression, "literal" as a plain substring (% and _
      are not wildcards)
    - An unparseable pattern is rejected with 400 before the store is queried
    - update/delete of a missing comment report zero counts, they do not fail
    - delete_comments_for_story() is idempotent: a second call deletes 0
"""

import logging
import re
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bugle.config import SearchMode
from bugle.core.domain_types import CommentId, Identity, StoryId
from bugle.core.enforce_access import check_ownership
from bugle.core.errors import ForbiddenError, InvalidInputError
from bugle.models.comment import Comment

logger = logging.getLogger(__name__)


async def create_comment(
    db: AsyncSession, story_id: StoryId, text: str, commenter: str,
) -> Comment:
    comment = Comment(story_id=story_id, commenter=commenter, text=text)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    logger.info(
        "Comment created",
        extra={"comment_id": str(comment.id), "story_id": str(story_id), "username": commenter},
    )
    return comment


async def list_comments(
    db: AsyncSession, story_id: StoryId, limit: int | None = None, offset: int = 0,
) -> list[Comment]:
    query = (
        select(Comment)
        .where(Comment.story_id == story_id)
        .order_by(Comment.created_at.asc())
    )
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


def _text_filter(query_text: str, mode: SearchMode):
    if mode == "literal":
        return Comment.text.icontains(query_text, autoescape=True)
    # Inline flag: SQLite ignores regexp_match(flags=...), PostgreSQL AREs accept (?i)
    pattern = f"(?i){query_text}"
    try:
        re.compile(pattern)
    except re.error as e:
        raise InvalidInputError(f"query is not a valid pattern: {e.msg}", "query")
    return Comment.text.regexp_match(pattern)


async def search_comments(
    db: AsyncSession,
    query_text: str,
    story_id: StoryId | None = None,
    mode: SearchMode = "pattern",
    limit: int | None = None,
    offset: int = 0,
) -> list[Comment]:
    """Comments whose text matches query_text, ignoring case."""
    query = (
        select(Comment)
        .where(_text_filter(query_text, mode))
        .order_by(Comment.created_at.asc())
    )
    if story_id is not None:
        query = query.where(Comment.story_id == story_id)
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def _get_for_mutation(
    db: AsyncSession, comment_id: CommentId, caller: Identity, enforce_ownership: bool,
) -> Comment | None:
    result = await db.execute(select(Comment).where(Comment.id == comment_id))
    comment = result.scalar_one_or_none()
    if comment is not None:
        denial = check_ownership(comment.commenter, caller.username, enforce_ownership)
        if denial:
            raise ForbiddenError(denial)
    return comment


async def update_comment(
    db: AsyncSession,
    comment_id: CommentId,
    text: str,
    caller: Identity,
    enforce_ownership: bool = False,
) -> int:
    """Replace a comment's text. Returns the number of comments matched."""
    comment = await _get_for_mutation(db, comment_id, caller, enforce_ownership)
    if comment is None:
        return 0
    comment.text = text
    comment.updated_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info(
        "Comment updated",
        extra={"comment_id": str(comment_id), "username": caller.username},
    )
    return 1


async def delete_comment(
    db: AsyncSession,
    comment_id: CommentId,
    caller: Identity,
    enforce_ownership: bool = False,
) -> int:
    comment = await _get_for_mutation(db, comment_id, caller, enforce_ownership)
    if comment is None:
        return 0
    await db.delete(comment)
    await db.commit()
    logger.info(
        "Comment deleted",
        extra={"comment_id": str(comment_id), "username": caller.username},
    )
    return 1


async def delete_comments_for_story(db: AsyncSession, story_id: StoryId) -> int:
    """Bulk delete used by the content service's cascade."""
    result = await db.execute(delete(Comment).where(Comment.story_id == story_id))
    await db.commit()
    deleted = result.rowcount or 0
    logger.info(
        "Comments deleted for story",
        extra={"story_id": str(story_id), "deleted_count": deleted},
    )
    return deleted
