"""
Layout component for BizList

Wraps pre-rendered page content with the document head, sidebar and the
toast region used by HTMX `showMessage` triggers.
"""

from typing import Optional

from backend.identity_access.domain import Identity
from .base import Component
from .navigation import Navigation


class Layout(Component):
    """Main layout component that assembles the complete page"""

    def __init__(
        self,
        title: str,
        content: str,
        identity: Optional[Identity] = None,
        show_nav: bool = True,
        current_path: str = "/",
    ):
        """
        Args:
            title: Page title (will be escaped)
            content: Main content HTML (pre-rendered components)
            identity: Current identity (optional)
            show_nav: Whether to show the sidebar
            current_path: Current URL path for active navigation highlighting
        """
        self.title = title
        self.content = content
        self.identity = identity
        self.show_nav = show_nav
        self.current_path = current_path

    def render(self) -> str:
        nav_html = Navigation(self.identity, self.current_path).render() if self.show_nav else ""
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self.escape(self.title)} - BizList</title>
    <link rel="stylesheet" href="/static/css/bizlist.css">
    <script src="/static/js/vendor/htmx.min.js"></script>
    <script src="/static/js/bizlist.js" defer></script>
</head>
<body>
    <a href="#main-content" class="skip-link">Skip to main content</a>
    {nav_html}
    <div id="toast-region" class="sr-only" role="status" aria-live="polite" aria-atomic="true"></div>
    <main id="main-content" class="main-content" role="main">
        {self.content}
    </main>
</body>
</html>"""

    def render_fragment(self) -> str:
        """Return the HTMX fragment: main content plus an out-of-band sidebar.

        HTMX swaps must not duplicate the sidebar container; the toggle script
        expects exactly one `#sidebar` element in the DOM.
        """
        if not self.show_nav:
            return self.content
        sidebar_oob = Navigation(self.identity, self.current_path).render_aside(oob=True)
        return f"{self.content}{sidebar_oob}"
