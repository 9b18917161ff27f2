"""Comment Schemas — discussion service request/response contracts.

Invariants:
    - CommentCreate accepts storyId (original clients) or story_id
    - text is stripped and non-empty
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("text cannot be empty or whitespace")
    return v


class CommentCreate(BaseModel):
    """New comment on a story."""
    model_config = ConfigDict(populate_by_name=True)

    story_id: UUID = Field(alias="storyId")
    text: str = Field(min_length=1, max_length=10_000)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_text(v)


class CommentUpdate(BaseModel):
    text: str = Field(min_length=1, max_length=10_000)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_text(v)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    story_id: UUID
    commenter: str
    text: str
    created_at: datetime
    updated_at: datetime | None


class CommentCreated(BaseModel):
    comment_id: UUID


class CommentUpdated(BaseModel):
    message: str = "Comment updated successfully"
    matched_count: int
    modified_count: int


class CommentDeleted(BaseModel):
    message: str = "Comment deleted successfully"
    deleted_count: int


class CommentsDeleted(BaseModel):
    message: str = "Comments deleted successfully"
    deleted_count: int
