"""Identity Schemas — registration and login payloads.

Invariants:
    - username is stripped (on registration and on login); password is taken verbatim
    - role is optional on registration (defaults to reader downstream)
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from bugle.core.domain_types import Role


class UserCreate(BaseModel):
    """Registration request."""
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=1024)
    role: Role | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username cannot be empty or whitespace")
        return v


class LoginRequest(BaseModel):
    """Login request."""
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


class UserCreated(BaseModel):
    user_id: UUID


class LoginResponse(BaseModel):
    message: str
    role: Role
