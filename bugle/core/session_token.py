"""Session Token Codec — encodes/decodes the `user_data` cookie value.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - decode_session_token() raises InvalidSessionToken for anything it cannot read;
      it never returns a token without a non-empty username
    - Role is carried verbatim as a string: an unknown role is the guard's
      problem (403), not the codec's (401)

Design Decisions:
    - Two formats: "signed" (HS256 JWT over username, role, iat) is the default;
      "unsigned" is the literal JSON {"username", "role"} the first deployment
      shipped, kept for cookie compatibility — anything honors it
    - issued_at recorded in signed tokens only; no expiry, the cookie lives until cleared
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone

import jwt

from bugle.config import TokenFormat

_JWT_ALGORITHM = "HS256"


class InvalidSessionToken(ValueError):
    """Cookie value is not a readable session token."""


@dataclass(frozen=True)
class SessionToken:
    """Caller identity as carried between client and services."""
    username: str
    role: str | None
    issued_at: datetime | None = None


def encode_session_token(
    token: SessionToken, fmt: TokenFormat, secret: str,
) -> str:
    """Serialize a session token into a cookie value."""
    if fmt == "unsigned":
        return json.dumps(
            {"username": token.username, "role": token.role},
            separators=(",", ":"),
        )
    issued_at = token.issued_at or datetime.now(timezone.utc)
    return jwt.encode(
        {
            "username": token.username,
            "role": token.role,
            "iat": int(issued_at.timestamp()),
        },
        secret,
        algorithm=_JWT_ALGORITHM,
    )


def decode_session_token(
    raw: str, fmt: TokenFormat, secret: str,
) -> SessionToken:
    """Parse a cookie value back into a session token."""
    if fmt == "unsigned":
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise InvalidSessionToken("Not valid JSON") from e
        issued_at = None
    else:
        try:
            data = jwt.decode(raw, secret, algorithms=[_JWT_ALGORITHM])
        except jwt.PyJWTError as e:
            raise InvalidSessionToken("Not a valid token") from e
        iat = data.get("iat")
        issued_at = (
            datetime.fromtimestamp(iat, tz=timezone.utc)
            if isinstance(iat, (int, float)) else None
        )

    if not isinstance(data, dict):
        raise InvalidSessionToken("Token payload is not an object")
    username = data.get("username")
    if not isinstance(username, str) or not username:
        raise InvalidSessionToken("Token carries no username")
    role = data.get("role")
    return SessionToken(
        username=username,
        role=role if isinstance(role, str) else None,
        issued_at=issued_at,
    )
