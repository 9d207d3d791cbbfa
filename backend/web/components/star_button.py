"""
Star button component ("add to / remove from interested listings").

Renders the state of an InterestToggleController. The button posts to the
SSR toggle route via HTMX and swaps itself with the server's re-render.

Double submissions are dropped in the browser as well: `hx-sync="this:drop"`
ignores a new request while one is in flight and `hx-disabled-elt` disables
the button for the duration, mirroring the controller's pending guard.
"""

import json
from typing import Optional

from backend.marketplace.interest.controller import InterestToggleController
from .base import Component


class StarButton(Component):
    def __init__(
        self,
        listing_id: str,
        *,
        is_starred: bool,
        count: int = 0,
        is_pending: bool = False,
        show_count: bool = False,
        csrf_token: Optional[str] = None,
    ):
        self.listing_id = str(listing_id)
        self.is_starred = is_starred
        self.count = count
        self.is_pending = is_pending
        self.show_count = show_count
        self.csrf_token = csrf_token

    @classmethod
    def from_controller(
        cls,
        controller: InterestToggleController,
        *,
        show_count: bool = False,
        csrf_token: Optional[str] = None,
    ) -> "StarButton":
        return cls(
            controller.item_id,
            is_starred=controller.is_starred,
            count=controller.count,
            is_pending=controller.is_pending,
            show_count=show_count,
            csrf_token=csrf_token,
        )

    @property
    def dom_id(self) -> str:
        return f"star-{self.listing_id}"

    def render(self) -> str:
        label = "Remove from interested" if self.is_starred else "Add to interested"
        # Current state travels with the request so the handler can seed the
        # controller without an extra lookup.
        vals = json.dumps({
            "starred": "1" if self.is_starred else "0",
            "count": str(int(self.count)),
            "show_count": "1" if self.show_count else "0",
        })
        headers = json.dumps({"X-CSRF-Token": self.csrf_token}) if self.csrf_token else None
        attrs = self.attributes(
            id=self.dom_id,
            type="button",
            class_=self.classes("star-button", starred=self.is_starred, pending=self.is_pending),
            hx_post=f"/listings/{self.listing_id}/star",
            hx_target="this",
            hx_swap="outerHTML",
            hx_sync="this:drop",
            hx_disabled_elt="this",
            hx_vals=vals,
            hx_headers=headers,
            aria_pressed="true" if self.is_starred else "false",
            aria_label=label,
            title=label,
            disabled=self.is_pending,
        )
        icon = "★" if self.is_starred else "☆"
        count_html = (
            f'<span class="star-count">{int(self.count)}</span>'
            if self.show_count and self.count > 0
            else ""
        )
        return f'<button {attrs}><span class="star-icon" aria-hidden="true">{icon}</span>{count_html}</button>'
