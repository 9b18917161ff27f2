"""Request Dependencies — settings, pagination and the outbound discussion client.

Invariants:
    - Everything comes from app.state, populated by create_app() and its lifespan
    - Page.limit is None unless the caller asks for one (unbounded listing)
"""

from dataclasses import dataclass

from fastapi import Query, Request

from bugle.config import Settings
from bugle.core.errors import InvalidInputError
from bugle.infrastructure.discussion_client import DiscussionClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_discussion_client(request: Request) -> DiscussionClient:
    client = getattr(request.app.state, "discussion_client", None)
    if client is None:
        raise RuntimeError("Discussion client not initialized")
    return client


@dataclass(frozen=True)
class Page:
    limit: int | None
    offset: int


def get_page(
    request: Request,
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
) -> Page:
    """Optional limit/offset; limit is capped by MAX_PAGE_SIZE."""
    max_size = get_app_settings(request).max_page_size
    if limit is not None and limit > max_size:
        raise InvalidInputError(f"limit must be at most {max_size}", "limit")
    return Page(limit=limit, offset=offset)
