"""Identity Routes — registration, login (session issuance) and logout.

Invariants:
    - A failed login never sets the session cookie
    - The cookie is HTTP-only, SameSite=Strict and carries no explicit expiry
    - Logout always succeeds and only clears the cookie (no server-side revocation)
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bugle.api.dependencies import get_app_settings
from bugle.config import Settings
from bugle.core.domain_types import Role
from bugle.core.session_token import SessionToken, encode_session_token
from bugle.infrastructure.database import get_db
from bugle.schemas.user import LoginRequest, LoginResponse, UserCreate, UserCreated
from bugle.services.accounts import authenticate, register_user

logger = logging.getLogger(__name__)
router = APIRouter(tags=["identity"])


@router.post(
    "/users", response_model=UserCreated, status_code=status.HTTP_201_CREATED,
)
async def register(body: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new account (role defaults to reader)."""
    user = await register_user(db, body.username, body.password, body.role)
    return UserCreated(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Check credentials and issue the session cookie."""
    user = await authenticate(db, body.username, body.password)
    token = encode_session_token(
        SessionToken(username=user.username, role=user.role),
        settings.session_token_format,
        settings.session_secret,
    )
    response.set_cookie(
        settings.session_cookie_name, token, httponly=True, samesite="strict",
    )
    logger.info("Session issued", extra={"username": user.username})
    return LoginResponse(message="Login successful", role=Role(user.role))


@router.post("/logout")
async def logout(
    response: Response, settings: Settings = Depends(get_app_settings),
):
    """Clear the session cookie."""
    response.delete_cookie(
        settings.session_cookie_name, httponly=True, samesite="strict",
    )
    return {"message": "Logout successful"}
