"""
Role-scoped navigation table and resolver.

Intent:
    Keep the sidebar data-driven: a static, ordered table of entries tagged
    with the roles allowed to see them, and a pure `resolve()` pass that
    filters the table for one role and marks entries active for the current
    location.

Behavior:
    - An entry with an empty `allowed_roles` set is visible to every role.
    - Output order equals table order (common items, then admin, seller and
      buyer groups).
    - Active matching is a path-segment prefix match: `admin/users` is active
      for `admin/users/42` but not for `admin/userschema`.
    - Overlapping targets can both be active; the table author owns that.

Permissions:
    Visibility only. Hiding an entry never replaces the role gate on the
    route itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from backend.identity_access.domain import Role, normalize_role


@dataclass(frozen=True)
class NavigationEntry:
    title: str
    target: str
    icon: Optional[str] = None
    allowed_roles: frozenset[str] = frozenset()

    def visible_to(self, role: Optional[str]) -> bool:
        return not self.allowed_roles or (role is not None and role in self.allowed_roles)


@dataclass(frozen=True)
class ResolvedEntry:
    entry: NavigationEntry
    is_active: bool


def _roles(*roles: Role) -> frozenset[str]:
    return frozenset(role.value for role in roles)


_ADMIN = _roles(Role.ADMIN)
_SELLER = _roles(Role.SELLER, Role.ADMIN)
_BUYER = _roles(Role.BUYER)

NAV_ENTRIES: tuple[NavigationEntry, ...] = (
    # Common
    NavigationEntry("Dashboard", "/dashboard", "📊"),
    # Admin
    NavigationEntry("User Management", "/admin/users", "👥", _ADMIN),
    NavigationEntry("Listing Management", "/admin/listings", "📋", _ADMIN),
    NavigationEntry("Marketing", "/admin/marketing", "📣", _ADMIN),
    NavigationEntry("Manage Website", "/admin/website", "🌐", _ADMIN),
    NavigationEntry("Setup", "/admin/setup", "⚙️", _ADMIN),
    NavigationEntry("Settings", "/admin/settings", "⚙️", _ADMIN),
    NavigationEntry("Developer Settings", "/admin/dev-settings", "🧑‍💻", _ADMIN),
    # Seller
    NavigationEntry("Add Listing", "/seller/listings/new", "➕", _SELLER),
    NavigationEntry("Listing Page", "/seller/listings", "📋", _SELLER),
    NavigationEntry("Browse Listings", "/seller/browse", "👁️", _SELLER),
    NavigationEntry("Account", "/seller/account", "👤", _SELLER),
    NavigationEntry("Message Center", "/seller/messages", "💬", _SELLER),
    NavigationEntry("Feedback", "/seller/feedback", "⭐", _SELLER),
    # Buyer
    NavigationEntry("Interested Listings", "/buyer/interested", "❤️", _BUYER),
    NavigationEntry("All Listings", "/buyer/listings", "📋", _BUYER),
    NavigationEntry("Recently Viewed", "/buyer/recent", "👁️", _BUYER),
    NavigationEntry("Message Center", "/buyer/messages", "💬", _BUYER),
    NavigationEntry("Account", "/buyer/account", "👤", _BUYER),
    NavigationEntry("Feedback", "/buyer/feedback", "⭐", _BUYER),
)


def _normalize_path(path: Optional[str]) -> str:
    clean = (path or "").split("?", 1)[0].split("#", 1)[0]
    return clean.strip("/")


def is_active(target: str, location: Optional[str]) -> bool:
    """Return True if `location` is `target` or one of its descendant paths."""
    t = _normalize_path(target)
    loc = _normalize_path(location)
    if not t:
        # Root only matches itself, otherwise it would be active everywhere.
        return not loc
    return loc == t or loc.startswith(t + "/")


def visible_entries(entries: Iterable[NavigationEntry], role: object) -> list[NavigationEntry]:
    """Stable filter of `entries` for `role` (Role, tag string or None)."""
    tag = normalize_role(role)
    return [entry for entry in entries if entry.visible_to(tag)]


def resolve(
    entries: Sequence[NavigationEntry],
    role: object,
    current_location: Optional[str],
) -> list[ResolvedEntry]:
    """Filter `entries` for `role` and mark prefix-active entries.

    Pure: reads `entries` only, never mutates it, cannot fail. Unknown or
    absent roles see only unrestricted entries.
    """
    return [
        ResolvedEntry(entry=entry, is_active=is_active(entry.target, current_location))
        for entry in visible_entries(entries, role)
    ]


__all__ = ["NavigationEntry", "ResolvedEntry", "NAV_ENTRIES", "is_active", "visible_entries", "resolve"]
