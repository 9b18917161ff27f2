"""Discussion Service Client — outbound HTTP from the content service to the comment store.

Invariants:
    - Exactly one request per call: no retry, no backoff
    - Transport failures and non-2xx answers are mapped to CascadeFailedError
    - Timeout is the only bound on how long a caller waits

Design Decisions:
    - Wrapper over raw httpx.AsyncClient: the orchestrator deals in story ids
      and CascadeFailedError, never in URLs or status codes
    - transport is injectable so tests can route calls into the discussion app
      in-process (ASGITransport) or make it unreachable (MockTransport)
"""

import logging

import httpx

from bugle.core.domain_types import StoryId
from bugle.core.errors import CascadeFailedError

logger = logging.getLogger(__name__)


class DiscussionClient:
    """Calls the discussion service's internal endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def delete_comments_for_story(self, story_id: StoryId) -> int:
        """Bulk-delete every comment of a story. Returns the deleted count."""
        try:
            response = await self.client.delete(f"/comments/story/{story_id}")
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CascadeFailedError(
                str(story_id), f"discussion service answered {e.response.status_code}",
            ) from e
        except httpx.HTTPError as e:
            raise CascadeFailedError(
                str(story_id), f"discussion service unreachable ({type(e).__name__})",
            ) from e
        try:
            return int(response.json().get("deleted_count", 0))
        except (ValueError, AttributeError):
            return 0

    async def close(self) -> None:
        await self.client.aclose()
