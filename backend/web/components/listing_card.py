"""Listing card for the public listings grid and the interested-listings page."""

from typing import Optional

from backend.marketplace.repo import Listing
from .base import Component
from .star_button import StarButton


class ListingCard(Component):
    def __init__(self, listing: Listing, star: Optional[StarButton] = None, note: Optional[str] = None):
        self.listing = listing
        self.star = star
        self.note = note

    def render(self) -> str:
        item = self.listing
        star_html = self.star.render() if self.star else ""
        note_html = f'<p class="listing-card__note text-muted">{self.escape(self.note)}</p>' if self.note else ""
        return f"""
        <article class="listing-card" id="listing-{self.escape(item.id)}">
            <header class="listing-card__header">
                <h2 class="listing-card__title">
                    <a href="/listings/{self.escape(item.id)}">{self.escape(item.title)}</a>
                </h2>
                {star_html}
            </header>
            <dl class="listing-card__meta">
                <dt>Industry</dt><dd>{self.escape(item.industry)}</dd>
                <dt>Location</dt><dd>{self.escape(item.location)}</dd>
                <dt>Asking price</dt><dd>${item.asking_price:,}</dd>
            </dl>
            {note_html}
        </article>"""
