"""
Sidebar navigation component for BizList.

The menu itself is data: `marketplace.navigation.NAV_ENTRIES` filtered through
`resolve()` for the caller's role. This component only turns resolved entries
into markup. All links use HTMX for SPA-like navigation without page reloads.
"""

from typing import Optional, Sequence

from backend.identity_access.domain import Identity, Role
from backend.marketplace.navigation import NAV_ENTRIES, NavigationEntry, ResolvedEntry, resolve
from .base import Component


PUBLIC_ENTRIES: tuple[NavigationEntry, ...] = (
    NavigationEntry("Browse Listings", "/listings", "🏪"),
    NavigationEntry("Log in", "/login", "🔑"),
)

_ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.SELLER: "Seller",
    Role.BUYER: "Buyer",
    Role.GUEST: "Guest",
}


class Navigation(Component):
    """Role-scoped sidebar"""

    def __init__(
        self,
        identity: Optional[Identity] = None,
        current_path: str = "/",
        entries: Sequence[NavigationEntry] = NAV_ENTRIES,
    ):
        """
        Args:
            identity: Signed-in actor; None or guest renders the public menu
            current_path: Current URL path for active link highlighting
            entries: Navigation table (defaults to the marketplace menu)
        """
        self.identity = identity
        self.current_path = current_path
        self.entries = entries

    @property
    def _is_public(self) -> bool:
        return self.identity is None or not self.identity.is_authenticated

    def resolved(self) -> list[ResolvedEntry]:
        if self._is_public:
            return resolve(PUBLIC_ENTRIES, None, self.current_path)
        return resolve(self.entries, self.identity.role, self.current_path)

    def render(self) -> str:
        return f"""
    <button class="sidebar-toggle" data-action="sidebar-toggle" aria-label="Toggle navigation">
        <span class="sidebar-toggle-icon">☰</span>
    </button>
    {self.render_aside()}
    <div class="sidebar-overlay" data-action="sidebar-close"></div>"""

    def render_aside(self, oob: bool = False) -> str:
        """Render only the <aside> element.

        Args:
            oob: If True, adds hx-swap-oob="true" for out-of-band HTMX updates
        """
        links = [self._render_link(item) for item in self.resolved()]
        footer = "" if self._is_public else self._render_footer()
        oob_attr = ' hx-swap-oob="true"' if oob else ""
        return f"""
    <aside class="sidebar" id="sidebar" aria-label="Sidebar"{oob_attr}>
        <nav class="sidebar-nav" role="navigation" aria-label="Main navigation">
            <div class="sidebar-header">
                <span class="sidebar-title">BizList</span>
            </div>
            <div class="sidebar-items">
                {''.join(links)}
            </div>
            {footer}
        </nav>
    </aside>"""

    def _render_link(self, item: ResolvedEntry) -> str:
        entry = item.entry
        icon_html = f'<span class="nav-icon">{self.escape(entry.icon)}</span>' if entry.icon else ""
        attrs = self.attributes(
            href=entry.target,
            hx_get=entry.target,
            hx_target="#main-content",
            hx_push_url="true",
            class_=self.classes("sidebar-link", active=item.is_active),
            data_tooltip=entry.title,
            aria_current="page" if item.is_active else None,
        )
        return f"""
        <a {attrs}>
            {icon_html}
            <span class="nav-text">{self.escape(entry.title)}</span>
        </a>"""

    def _render_footer(self) -> str:
        identity = self.identity
        role_label = _ROLE_LABELS.get(identity.role, "User")
        # Logout ends the session server-side; full navigation, no HTMX.
        return f"""
            <div class="sidebar-footer">
                <div class="user-info-compact">
                    <div class="user-name">{self.escape(identity.name)}</div>
                    <div class="user-role">{self.escape(role_label)}</div>
                </div>
                <a href="/logout" class="sidebar-link sidebar-logout">
                    <span class="nav-text">Log out</span>
                </a>
            </div>"""
