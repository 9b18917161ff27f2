"""Cascading Story Deletion — parent delete, then a best-effort remote bulk delete.

Invariants:
    - The story row is deleted and committed BEFORE the discussion service is called
    - If the story did not exist, the discussion service is never called
    - The cascade is attempted exactly once: no retry, no rollback of the parent
    - Default (strict=False): the cascade outcome never changes the client's answer;
      a failure is logged as a warning and the comments stay behind as orphans
    - strict=True: a failed cascade raises CascadeFailedError (502) — the story
      is still gone

Design Decisions:
    - Two independent operations with an unbounded gap: a comment created for the
      story between the two steps is removed, one created after the cascade is orphaned
    - Orchestrator receives the store session and the client; it owns neither
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from bugle.core.domain_types import Identity, StoryId
from bugle.core.errors import CascadeFailedError
from bugle.infrastructure.discussion_client import DiscussionClient
from bugle.services.stories import delete_story_record

logger = logging.getLogger(__name__)


class StoryDeletionOrchestrator:
    """Deletes a story and asks the discussion service to drop its comments."""

    def __init__(
        self,
        db: AsyncSession,
        discussion: DiscussionClient,
        strict: bool = False,
        enforce_ownership: bool = False,
    ):
        self.db = db
        self.discussion = discussion
        self.strict = strict
        self.enforce_ownership = enforce_ownership

    async def delete(self, story_id: StoryId, caller: Identity) -> None:
        await delete_story_record(
            self.db, story_id, caller, enforce_ownership=self.enforce_ownership,
        )
        await self._cascade(story_id)

    async def _cascade(self, story_id: StoryId) -> None:
        try:
            deleted = await self.discussion.delete_comments_for_story(story_id)
        except CascadeFailedError as e:
            if self.strict:
                logger.error(
                    f"Comment cascade failed: {e.reason}",
                    extra={"story_id": str(story_id), "error_code": e.code},
                )
                raise
            logger.warning(
                f"Comment cascade failed, comments left orphaned: {e.reason}",
                extra={"story_id": str(story_id), "error_code": e.code},
            )
            return
        logger.info(
            "Comment cascade completed",
            extra={"story_id": str(story_id), "deleted_count": deleted},
        )
