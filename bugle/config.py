"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in deployments)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - One Settings class for all four services: they deploy separately but share
      the same store and the same session token contract
    - Guard policy is per service: content trusts the token, discussion re-reads the role
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GuardPolicy = Literal["trusting", "revalidating"]
TokenFormat = Literal["signed", "unsigned"]
SearchMode = Literal["pattern", "literal"]


class Settings(BaseSettings):
    """Platform settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Shared store
    database_url: str = "postgresql+asyncpg://bugle:bugle@db:5432/daily_bugle"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5

    # Session token
    session_secret: str = "dev-session-secret-change-me"
    session_token_format: TokenFormat = "signed"
    session_cookie_name: str = "user_data"

    # Authorization
    content_guard: GuardPolicy = "trusting"
    discussion_guard: GuardPolicy = "revalidating"
    enforce_ownership: bool = False

    # Cascade (content -> discussion)
    discussion_service_url: str = "http://comment_service:3003"
    cascade_timeout_seconds: float = 5.0
    cascade_strict: bool = False

    # Listing and search
    max_page_size: int = 500
    search_mode: SearchMode = "pattern"

    # API
    cors_origins: list[str] = ["http://frontend", "http://localhost:8080"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
