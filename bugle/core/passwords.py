"""Password Hashing — salted PBKDF2 for the credential store.

Invariants:
    - All functions are PURE apart from salt generation
    - Stored form is "pbkdf2_sha256$<iterations>$<salt b64>$<hash b64>"
    - verify_password() never raises on a malformed stored value; it returns False
"""

import hashlib
import hmac
import secrets
from base64 import b64decode, b64encode

_ALGORITHM = "pbkdf2_sha256"
_ITERATIONS = 260_000


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str) -> str:
    """Generate a salted hash of a password."""
    salt = secrets.token_bytes(16)
    digest = _derive(password, salt, _ITERATIONS)
    return "$".join((
        _ALGORITHM, str(_ITERATIONS),
        b64encode(salt).decode("ascii"), b64encode(digest).decode("ascii"),
    ))


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash (constant-time compare)."""
    try:
        algorithm, iterations, salt, digest = stored.split("$")
        if algorithm != _ALGORITHM:
            return False
        expected = b64decode(digest)
        actual = _derive(password, b64decode(salt), int(iterations))
    except (ValueError, TypeError):
        return False
    return hmac.compare_digest(actual, expected)
