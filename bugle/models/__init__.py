"""ORM Models — SQLAlchemy declarative models for every table in the shared store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Each table is written by exactly one service; users are read by several

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from bugle.models.user import User  # noqa: F401
from bugle.models.story import Story, StoryCategory  # noqa: F401
from bugle.models.comment import Comment  # noqa: F401
from bugle.models.ad_event import AdEvent  # noqa: F401
