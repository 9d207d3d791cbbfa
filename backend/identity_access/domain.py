"""
Identity domain constants and simple helpers.

Why:
- Centralize allowed roles to avoid drift between navigation, role gates and
  the session layer.
- Pass the signed-in actor explicitly into components instead of reading it
  from ambient request globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Role(str, Enum):
    """Closed set of marketplace roles."""

    GUEST = "guest"
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


# Plain strings: membership checks against raw role tags work without
# converting to the enum first.
ALLOWED_ROLES = frozenset(role.value for role in Role)

# Highest privilege first; used when a session carries several roles.
ROLE_PRIORITY = (Role.ADMIN, Role.SELLER, Role.BUYER)


def normalize_role(value: object) -> Optional[str]:
    """Return the lower-cased role tag, or None for unknown/absent values."""
    if value is None:
        return None
    raw = value.value if isinstance(value, Role) else str(value)
    tag = raw.strip().lower()
    return tag if tag in ALLOWED_ROLES else None


def primary_role(roles: Iterable[object]) -> Role:
    """Pick the highest-priority known role; fall back to guest."""
    tags = {normalize_role(r) for r in roles or []}
    for role in ROLE_PRIORITY:
        if role.value in tags:
            return role
    return Role.GUEST


@dataclass(frozen=True)
class Identity:
    """Signed-in actor as seen by the view layer (read-only)."""

    sub: str
    name: str = ""
    role: Role = Role.GUEST
    suspended: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.sub) and self.role is not Role.GUEST

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls(sub="", name="", role=Role.GUEST)


__all__ = ["Role", "ALLOWED_ROLES", "ROLE_PRIORITY", "Identity", "normalize_role", "primary_role"]
