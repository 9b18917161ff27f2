"""Story ORM — parent records owned by the content service.

Invariants:
    - created_at is the canonical content order (navigation and listing)
    - edited_at == created_at at creation, refreshed on every update
    - categories keep insertion order and hold no duplicates (schema de-dupes)

Design Decisions:
    - Categories in a child table instead of a JSON column: category filtering
      stays a plain indexed lookup on every backend
    - author is a username, not a FK: ownership lives at the authorization layer only
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bugle.db.base import Base


class Story(Base):
    """Published piece."""
    __tablename__ = "stories"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    teaser: Mapped[str | None] = mapped_column(Text, nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
    edited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )

    category_links: Mapped[list["StoryCategory"]] = relationship(
        "StoryCategory", back_populates="story",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="StoryCategory.position",
    )

    @property
    def categories(self) -> list[str]:
        return [link.name for link in self.category_links]

    @categories.setter
    def categories(self, names: list[str]) -> None:
        self.category_links = [
            StoryCategory(name=name, position=i) for i, name in enumerate(names)
        ]


class StoryCategory(Base):
    """One category label of a story, with its position in the story's list."""
    __tablename__ = "story_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    story_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    story: Mapped["Story"] = relationship("Story", back_populates="category_links")
