"""Accounts — registration and credential checks against the credential store.

Invariants:
    - A username is registered at most once (pre-check + unique constraint)
    - authenticate() fails identically for unknown user and wrong password
    - Role defaults to reader when the caller does not choose one
    - Password hashing and verification run in the threadpool, never on the event loop
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from bugle.core.domain_types import DEFAULT_ROLE, Role
from bugle.core.errors import InvalidCredentialsError, UsernameTakenError
from bugle.core.passwords import hash_password, verify_password
from bugle.models.user import User

logger = logging.getLogger(__name__)


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession, username: str, password: str, role: Role | None = None,
) -> User:
    """Create a new account. Raises UsernameTakenError on duplicates."""
    if await get_user_by_username(db, username):
        raise UsernameTakenError(username)

    user = User(
        username=username,
        password_hash=await run_in_threadpool(hash_password, password),
        role=(role or DEFAULT_ROLE).value,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        await db.rollback()
        raise UsernameTakenError(username)
    await db.refresh(user)
    logger.info("User registered", extra={"username": username})
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    """Return the user whose username and password both match."""
    user = await get_user_by_username(db, username)
    if user is None or not await run_in_threadpool(
        verify_password, password, user.password_hash,
    ):
        logger.info("Login rejected", extra={"username": username})
        raise InvalidCredentialsError()
    return user
