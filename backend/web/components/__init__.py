# BizList component system
# Pure Python components for server-rendered HTML

from .base import Component
from .layout import Layout
from .navigation import Navigation
from .star_button import StarButton
from .listing_card import ListingCard

__all__ = [
    "Component",
    "Layout",
    "Navigation",
    "StarButton",
    "ListingCard",
]
