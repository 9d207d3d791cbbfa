"""
Interest API routes: star/unstar listings for the signed-in identity.

Why:
    Server counterpart of the star button. The SSR toggle handler reaches these
    endpoints through the HTTP gateway, so the controller sees the same
    contract an out-of-process client would.

Endpoints:
    POST   /api/interest/listings/{listing_id}/toggle   flip, returns new state
    POST   /api/interest/listings/{listing_id}/star     idempotent add
    DELETE /api/interest/listings/{listing_id}          idempotent remove
    GET    /api/interest/listings                       caller's interested listings

Permissions:
    Caller must be authenticated. Writes must be same-origin (CSRF).
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from backend.identity_access.domain import Identity
from backend.marketplace.repo import InterestRepo
from .security import _is_same_origin


logger = logging.getLogger("bizlist.web.interest")

interest_router = APIRouter(tags=["Interest"])

REPO = InterestRepo()


def set_repo(repo: InterestRepo) -> None:
    """Allow tests to swap the interest repository."""
    global REPO
    REPO = repo


def get_repo() -> InterestRepo:
    return REPO


def _private_response(body, *, status_code: int = 200) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers={"Cache-Control": "private, no-store"})


def _require_identity(request: Request, *, write: bool):
    identity: Identity | None = getattr(request.state, "identity", None)
    if identity is None or not identity.is_authenticated:
        return None, _private_response({"error": "unauthenticated"}, status_code=401)
    if write and not _is_same_origin(request):
        return None, _private_response({"error": "csrf_violation"}, status_code=403)
    return identity, None


def _state_body(is_starred: bool, count: int) -> dict:
    return {"success": True, "isStarred": is_starred, "count": count}


@interest_router.post("/api/interest/listings/{listing_id}/toggle")
async def toggle_interest(request: Request, listing_id: str):
    """Flip the caller's interest in a listing and return the new state."""
    identity, error = _require_identity(request, write=True)
    if error:
        return error
    try:
        starred, count = REPO.toggle(identity.sub, listing_id)
    except LookupError:
        return _private_response({"error": "not_found"}, status_code=404)
    logger.info("interest toggled listing=%s starred=%s", listing_id, starred)
    return _private_response(_state_body(starred, count))


@interest_router.post("/api/interest/listings/{listing_id}/star")
async def star_listing(request: Request, listing_id: str):
    identity, error = _require_identity(request, write=True)
    if error:
        return error
    try:
        count = REPO.star(identity.sub, listing_id)
    except LookupError:
        return _private_response({"error": "not_found"}, status_code=404)
    return _private_response(_state_body(True, count))


@interest_router.delete("/api/interest/listings/{listing_id}")
async def unstar_listing(request: Request, listing_id: str):
    identity, error = _require_identity(request, write=True)
    if error:
        return error
    try:
        count = REPO.unstar(identity.sub, listing_id)
    except LookupError:
        return _private_response({"error": "not_found"}, status_code=404)
    return _private_response(_state_body(False, count))


@interest_router.get("/api/interest/listings")
async def list_interested(request: Request, limit: int = 10, offset: int = 0):
    """Return the caller's interested listings, newest first.

    Pagination: limit is clamped to 1..50, offset to >= 0.
    """
    identity, error = _require_identity(request, write=False)
    if error:
        return error
    limit = max(1, min(50, int(limit or 10)))
    offset = max(0, int(offset or 0))
    rows = REPO.list_interested(identity.sub, limit=limit, offset=offset)
    return _private_response([
        {
            "id": listing.id,
            "title": listing.title,
            "industry": listing.industry,
            "asking_price": listing.asking_price,
            "location": listing.location,
            "interested_at": created_at,
            "count": REPO.count_for(listing.id),
        }
        for listing, created_at in rows
    ])
