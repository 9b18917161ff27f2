"""Story Schemas — content service request/response contracts.

Invariants:
    - StoryCreate.title and .body are stripped and non-empty
    - categories are stripped, blank entries dropped, duplicates removed (first wins)
    - StoryUpdate is partial: only fields present in the request change, and a
      title or body that is present obeys the same rule as on creation
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _dedupe_categories(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for raw in values:
        name = raw.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


class StoryCreate(BaseModel):
    """Story creation — title and body are required."""
    title: str = Field(min_length=1, max_length=500)
    body: str = Field(min_length=1, max_length=100_000)
    teaser: str | None = Field(None, max_length=2000)
    categories: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("title", "body")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v

    @field_validator("categories")
    @classmethod
    def normalize_categories(cls, v: list[str]) -> list[str]:
        return _dedupe_categories(v)


class StoryUpdate(BaseModel):
    """Partial story update — omitted (or null) fields are left untouched."""
    title: str | None = Field(None, min_length=1, max_length=500)
    body: str | None = Field(None, min_length=1, max_length=100_000)
    teaser: str | None = Field(None, max_length=2000)
    categories: list[str] | None = Field(None, max_length=50)

    @field_validator("title", "body")
    @classmethod
    def strip_present(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v

    @field_validator("categories")
    @classmethod
    def normalize_categories(cls, v: list[str] | None) -> list[str] | None:
        return _dedupe_categories(v) if v is not None else None


class StoryResponse(BaseModel):
    """Story as returned to readers."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    teaser: str | None
    body: str
    categories: list[str]
    author: str
    created_at: datetime
    edited_at: datetime


class StoryCreated(BaseModel):
    story_id: UUID
    message: str = "Story created successfully"


class StoryUpdated(BaseModel):
    message: str = "Story updated successfully"
    modified_count: int


class StoryDeleted(BaseModel):
    message: str = "Story and associated comments deleted successfully"


class StoryNavigation(BaseModel):
    """Neighbors of an anchor story in created_at order."""
    previous: StoryResponse | None
    next: StoryResponse | None
