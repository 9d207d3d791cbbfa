"""
In-memory listing catalog and interest store.

Why:
    The marketplace front end needs a server counterpart for the star button
    (toggle/star/unstar and the "interested listings" page). Durable storage
    is provided elsewhere; this repo keeps development and tests self-contained.

Behavior:
    - Interest records are unique per (user_sub, listing_id).
    - `toggle` flips presence and returns the new state plus the aggregate
      count over all identities.
    - Unknown listings raise LookupError.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import threading
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Listing:
    id: str
    title: str
    industry: str
    asking_price: int
    location: str


DEMO_LISTINGS: Tuple[Listing, ...] = (
    Listing("101", "Neighbourhood Coffee Roastery", "Food & Beverage", 245_000, "Portland, OR"),
    Listing("102", "Boutique Fitness Studio", "Health & Fitness", 180_000, "Austin, TX"),
    Listing("103", "Commercial Cleaning Company", "Services", 520_000, "Denver, CO"),
    Listing("104", "Online Pet Supply Store", "E-Commerce", 310_000, "Remote"),
)


class InterestRepo:
    def __init__(self, listings: Tuple[Listing, ...] = DEMO_LISTINGS) -> None:
        self.listings: Dict[str, Listing] = {item.id: item for item in listings}
        # interests[(user_sub, listing_id)] = (sequence, created_at ISO UTC)
        self.interests: Dict[Tuple[str, str], Tuple[int, str]] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def get_listing(self, listing_id: str) -> Optional[Listing]:
        return self.listings.get(str(listing_id))

    def list_listings(self) -> List[Listing]:
        return list(self.listings.values())

    def _require_listing(self, listing_id: str) -> str:
        key = str(listing_id)
        if key not in self.listings:
            raise LookupError("listing_not_found")
        return key

    def is_interested(self, user_sub: str, listing_id: str) -> bool:
        return (user_sub, str(listing_id)) in self.interests

    def count_for(self, listing_id: str) -> int:
        key = str(listing_id)
        return sum(1 for (_sub, lid) in self.interests if lid == key)

    def toggle(self, user_sub: str, listing_id: str) -> Tuple[bool, int]:
        key = self._require_listing(listing_id)
        with self._lock:
            if (user_sub, key) in self.interests:
                self.interests.pop((user_sub, key), None)
                starred = False
            else:
                self.interests[(user_sub, key)] = self._stamp()
                starred = True
            return starred, self.count_for(key)

    def star(self, user_sub: str, listing_id: str) -> int:
        key = self._require_listing(listing_id)
        with self._lock:
            if (user_sub, key) not in self.interests:
                self.interests[(user_sub, key)] = self._stamp()
            return self.count_for(key)

    def unstar(self, user_sub: str, listing_id: str) -> int:
        key = self._require_listing(listing_id)
        with self._lock:
            self.interests.pop((user_sub, key), None)
            return self.count_for(key)

    def list_interested(self, user_sub: str, *, limit: int, offset: int) -> List[Tuple[Listing, str]]:
        """Return (listing, created_at) pairs for the user, newest first."""
        rows = [
            (seq, self.listings[lid], created)
            for (sub, lid), (seq, created) in self.interests.items()
            if sub == user_sub and lid in self.listings
        ]
        rows.sort(key=lambda row: row[0], reverse=True)
        return [(listing, created) for _seq, listing, created in rows[offset: offset + limit]]

    def _stamp(self) -> Tuple[int, str]:
        self._seq += 1
        return self._seq, datetime.now(timezone.utc).isoformat()
