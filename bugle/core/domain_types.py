"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - StoryId, CommentId, UserId wrap UUIDs — never use bare UUID in domain logic
    - Role has exactly two members; a new account defaults to READER
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and into the session token without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
StoryId = NewType("StoryId", UUID)
CommentId = NewType("CommentId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Account role — stored on the user and embedded in the session token."""
    READER = "reader"
    AUTHOR = "author"


class ServiceName(str, Enum):
    """The four independently deployable services."""
    IDENTITY = "identity"
    CONTENT = "content"
    DISCUSSION = "discussion"
    ADS = "ads"


class AdEventKind(str, Enum):
    """Telemetry event kinds accepted by the ad service."""
    IMPRESSION = "impression"
    INTERACTION = "interaction"


# ─── Role requirements per operation ─────────────────────────────

DEFAULT_ROLE = Role.READER
COMMENTER_ROLES = frozenset({Role.READER, Role.AUTHOR})
EDITOR_ROLES = frozenset({Role.AUTHOR})


# ─── Request identity ────────────────────────────────────────────

@dataclass(frozen=True)
class Identity:
    """Who the guard decided the caller is, and with which role."""
    username: str
    role: str | None
