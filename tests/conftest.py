"""Root conftest — shared test configuration."""

import os

# Never reach a real store or a real discussion service from tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("DISCUSSION_SERVICE_URL", "http://discussion.invalid")
