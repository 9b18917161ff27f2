"""Access Enforcement — role and ownership rules shared by every guard.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a denial reason on violation, None on success
    - Ownership is only checked when the caller asks for it (enforce=True);
      by default any author may act on any record

Design Decisions:
    - Pure functions over method dispatch: testable without a request or a store
    - Roles compared by value so an unknown role string simply fails the check
"""

from collections.abc import Iterable

from bugle.core.domain_types import Role


def check_role(role: str | None, allowed: Iterable[Role]) -> str | None:
    """Rule 1: the caller's role must be one of the operation's allowed roles."""
    allowed_values = {r.value for r in allowed}
    if role not in allowed_values:
        wanted = " or ".join(sorted(allowed_values))
        return f"requires role {wanted}"
    return None


def check_ownership(
    owner: str, username: str, enforce: bool,
) -> str | None:
    """Rule 2: when enforced, only the record's owner may mutate it."""
    if enforce and owner != username:
        return "only the owner may modify this record"
    return None
