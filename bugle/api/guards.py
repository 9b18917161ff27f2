"""Authorization Guards — per-service role checks on the `user_data` session cookie.

Invariants:
    - No cookie, or a cookie that does not decode → 401 (UnauthenticatedError)
    - trusting: the role embedded in the token decides; the store is never read,
      so a stale token keeps its old role for as long as the client keeps it
    - revalidating: only the token's username is used; the current role is read
      from the credential store, 404 if the account is gone
    - Role not allowed for the operation → 403 (ForbiddenError)
    - The decided Identity is returned and also kept on request.state.identity

Design Decisions:
    - Policy is read from app.state.guard_policy at request time: each service
      chooses its own variant (content trusts, discussion revalidates by default)
    - Callable class instances as dependencies: one instance per role set,
      shared by every route that needs it
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bugle.config import GuardPolicy, Settings
from bugle.core.domain_types import COMMENTER_ROLES, EDITOR_ROLES, Identity, Role
from bugle.core.enforce_access import check_role
from bugle.core.errors import (
    ForbiddenError, ResourceNotFoundError, UnauthenticatedError,
)
from bugle.core.session_token import (
    InvalidSessionToken, SessionToken, decode_session_token,
)
from bugle.infrastructure.database import get_db
from bugle.services.accounts import get_user_by_username

logger = logging.getLogger(__name__)


def read_session_token(request: Request, settings: Settings) -> SessionToken:
    """Extract and decode the session cookie, or raise 401."""
    raw = request.cookies.get(settings.session_cookie_name)
    if not raw:
        raise UnauthenticatedError("No user data")
    try:
        return decode_session_token(
            raw, settings.session_token_format, settings.session_secret,
        )
    except InvalidSessionToken as e:
        logger.info(f"Rejected session cookie: {e}", extra={"path": request.url.path})
        raise UnauthenticatedError("Invalid user data")


async def revalidate_identity(db: AsyncSession, token: SessionToken) -> Identity:
    """Replace the token's role with the one currently stored for its username."""
    user = await get_user_by_username(db, token.username)
    if user is None:
        raise ResourceNotFoundError("User", token.username)
    return Identity(username=user.username, role=user.role)


class RoleGuard:
    """Dependency that authorizes the caller for one set of roles."""

    def __init__(self, allowed_roles: frozenset[Role]):
        self.allowed_roles = allowed_roles

    async def __call__(
        self, request: Request, db: AsyncSession = Depends(get_db),
    ) -> Identity:
        settings: Settings = request.app.state.settings
        policy: GuardPolicy = request.app.state.guard_policy
        token = read_session_token(request, settings)

        if policy == "revalidating":
            identity = await revalidate_identity(db, token)
        else:
            identity = Identity(username=token.username, role=token.role)

        denial = check_role(identity.role, self.allowed_roles)
        if denial:
            raise ForbiddenError(denial)

        request.state.identity = identity
        return identity


require_author = RoleGuard(EDITOR_ROLES)
require_commenter = RoleGuard(COMMENTER_ROLES)
