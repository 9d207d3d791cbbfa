"BizList marketplace front end"
from __future__ import annotations

from pathlib import Path
import hmac
import logging
import os
import secrets
import sys
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
import httpx
from httpx import ASGITransport

from backend.identity_access.domain import Identity, Role
from backend.identity_access.stores import SessionStore
from backend.marketplace.interest.controller import InterestToggleController
from backend.marketplace.interest.http_gateway import HttpInterestGateway
from backend.marketplace.navigation import NAV_ENTRIES
from backend.web import config as _cfg
from backend.web.components import Component, Layout, ListingCard, StarButton
from backend.web.htmx import HtmxNotifier, HtmxRedirector
from backend.web.routes import interest as interest_routes
from backend.web.routes.interest import interest_router
from backend.web.routes.security import _is_same_origin


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating the test env.
    - Allow explicit opt-out via BIZLIST_ENABLE_DOTENV (default true).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("BIZLIST_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    from dotenv import load_dotenv

    load_dotenv()

# Minimal production safety checks (fail fast on insecure config)
_cfg.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------

logger = logging.getLogger("bizlist.web")
SESSION_COOKIE_NAME = "bizlist_session"
SESSION_STORE = SessionStore()

app = FastAPI(title="BizList", description="Business marketplace front end", version="0.1.0")

static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir), check_dir=False), name="static")

app.include_router(interest_router)


def _seed_demo_sessions() -> None:
    """Create one session per role for local clicking-around (dev only)."""
    if (os.getenv("BIZLIST_SEED_DEMO_SESSIONS", "false") or "").strip().lower() != "true":
        return
    for role in (Role.BUYER, Role.SELLER, Role.ADMIN):
        rec = SESSION_STORE.create(sub=f"demo-{role.value}", name=f"Demo {role.value.title()}", roles=[role.value])
        logger.info("demo session role=%s cookie %s=%s", role.value, SESSION_COOKIE_NAME, rec.session_id)


_seed_demo_sessions()

# --- Identity & Middleware ------------------------------------------------------

_PUBLIC_PREFIXES = ("/static/", "/listings")
_PUBLIC_PATHS = ("/", "/login", "/logout", "/health", "/favicon.ico")


def _is_public_path(path: str) -> bool:
    return path in _PUBLIC_PATHS or path.startswith(_PUBLIC_PREFIXES)


def _get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(SESSION_COOKIE_NAME)


def _identity(request: Request) -> Identity:
    return getattr(request.state, "identity", None) or Identity.anonymous()


def _unauthenticated_response(request: Request, *, notice: str | None = None) -> Response:
    path = request.url.path
    if path.startswith("/api/"):
        headers = {"Cache-Control": "private, no-store", "Vary": "Origin"}
        return JSONResponse({"error": "unauthenticated"}, status_code=401, headers=headers)
    location = "/login" + (f"?notice={notice}" if notice else "")
    if "HX-Request" in request.headers:
        return Response(status_code=401, headers={"HX-Redirect": location, "Cache-Control": "private, no-store", "Vary": "HX-Request"})
    return RedirectResponse(url=location, status_code=302)


@app.middleware("http")
async def session_context(request: Request, call_next):
    """Attach the session identity to request.state and enforce sign-in.

    Suspended identities lose their session immediately.
    """
    request.state.identity = Identity.anonymous()
    sid = _get_session_id(request)
    rec = SESSION_STORE.get(sid) if sid else None
    if rec is not None:
        identity = rec.to_identity()
        if identity.suspended:
            logger.warning("suspended identity signed out sub_tail=%s", identity.sub[-6:])
            SESSION_STORE.delete(rec.session_id)
            _CSRF_BY_SESSION.pop(rec.session_id, None)
            response = _unauthenticated_response(request, notice="suspended")
            response.delete_cookie(SESSION_COOKIE_NAME, path="/")
            return response
        request.state.identity = identity

    if not _is_public_path(request.url.path) and not request.state.identity.is_authenticated:
        return _unauthenticated_response(request)
    return await call_next(request)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    prod = _cfg.environment() in ("prod", "production")
    script_src = "'self'" if prod else "'self' 'unsafe-inline'"
    response.headers.setdefault(
        "Content-Security-Policy",
        f"default-src 'self'; script-src {script_src}; style-src {script_src}; img-src 'self' data:; connect-src 'self';",
    )
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    return response

# --- CSRF, Role Gate & Rendering Helpers ---------------------------------------

_CSRF_BY_SESSION: dict[str, str] = {}


def _get_or_create_csrf_token(session_id: str) -> str:
    token = _CSRF_BY_SESSION.get(session_id)
    if not token:
        token = secrets.token_urlsafe(24)
        _CSRF_BY_SESSION[session_id] = token
    return token


def _validate_csrf(session_id: Optional[str], value: Optional[str]) -> bool:
    if not session_id or not value:
        return False
    expected = _CSRF_BY_SESSION.get(session_id)
    if not expected:
        return False
    return hmac.compare_digest(expected, str(value))


def _require_role(request: Request, *roles: str) -> tuple[Identity, Optional[Response]]:
    """Role gate for SSR pages.

    Unauthenticated callers go to the login page, callers with the wrong
    role go back to their dashboard.
    """
    identity = _identity(request)
    if not identity.is_authenticated:
        return identity, _unauthenticated_response(request)
    if roles and identity.role.value not in roles:
        logger.info("role gate denied path=%s role=%s", request.url.path, identity.role.value)
        if "HX-Request" in request.headers:
            return identity, Response(status_code=403, headers={"HX-Redirect": "/dashboard"})
        return identity, RedirectResponse(url="/dashboard?error=unauthorized", status_code=302)
    return identity, None


def _layout_response(
    request: Request,
    layout: Layout,
    *,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> HTMLResponse:
    """Render Layout with HTMX-aware semantics.

    HTMX navigation receives only the main fragment plus an out-of-band
    sidebar; regular requests receive the complete document.
    """
    body = layout.render_fragment() if request.headers.get("HX-Request") else layout.render()
    response = HTMLResponse(content=body, status_code=status_code)
    if headers:
        response.headers.update(headers)
    return response


def _internal_api_client(request: Request, settings: _cfg.InterestSettings) -> httpx.AsyncClient:
    """Create a client for SSR -> API hops carrying the caller's session.

    The default base (http://local) is served in-process through the ASGI
    transport. The Origin header matches that base so same-origin checks on
    write endpoints accept the hop.
    """
    base = settings.internal_base_url
    transport = ASGITransport(app=app) if base == _cfg.DEFAULT_INTERNAL_BASE_URL else None
    client = httpx.AsyncClient(
        transport=transport,
        base_url=base,
        headers={"Origin": base},
        timeout=settings.timeout_seconds,
    )
    sid = _get_session_id(request)
    if sid:
        client.cookies.set(SESSION_COOKIE_NAME, sid)
    return client


def _parse_count(raw: object) -> int:
    try:
        return max(0, int(str(raw)))
    except (TypeError, ValueError):
        return 0


def _star_button_for(request: Request, listing_id: str, *, show_count: bool = False) -> StarButton:
    repo = interest_routes.get_repo()
    identity = _identity(request)
    sid = _get_session_id(request)
    starred = identity.is_authenticated and repo.is_interested(identity.sub, listing_id)
    token = _get_or_create_csrf_token(sid) if (sid and identity.is_authenticated) else None
    return StarButton(listing_id, is_starred=starred, count=repo.count_for(listing_id), show_count=show_count, csrf_token=token)

# --- Pages ----------------------------------------------------------------------


@app.get("/health")
async def health_check():
    return JSONResponse({"status": "healthy"}, headers={"Cache-Control": "private, no-store"})


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    content = """
    <div class="container">
        <h1>Welcome to BizList</h1>
        <p>Buy and sell established businesses. Browse the current listings and
        star the ones you want to follow up on.</p>
        <p><a href="/listings" hx-get="/listings" hx-target="#main-content" hx-push-url="true">Browse listings</a></p>
    </div>
    """
    layout = Layout(title="Home", content=content, identity=_identity(request), current_path=request.url.path)
    return _layout_response(request, layout)


@app.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, role: str | None = None, notice: str | None = None):
    """Authentication entry point.

    Sessions are issued by the identity provider in front of this app; the
    page only tells the visitor where to sign in.
    """
    notices = {
        "suspended": "Your account has been suspended. Please contact the administrator.",
    }
    notice_html = (
        f'<div class="alert alert-error" role="alert">{Component.escape(notices[notice])}</div>'
        if notice in notices
        else ""
    )
    role_hint = f" as a {Component.escape(role)}" if role in ("buyer", "seller") else ""
    content = f"""
    <div class="container">
        {notice_html}
        <h1>Log in</h1>
        <p>Sign in{role_hint} to save listings to your interested list and reach your dashboard.</p>
    </div>
    """
    layout = Layout(title="Log in", content=content, identity=_identity(request), current_path=request.url.path)
    return _layout_response(request, layout, headers={"Cache-Control": "private, no-store"})


@app.get("/logout")
async def logout(request: Request):
    sid = _get_session_id(request)
    if sid:
        SESSION_STORE.delete(sid)
        _CSRF_BY_SESSION.pop(sid, None)
    response = RedirectResponse(url="/", status_code=302)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response


@app.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, error: str | None = None):
    identity, denied = _require_role(request)
    if denied:
        return denied
    error_html = (
        '<div class="alert alert-error" role="alert">Unauthorized access.</div>' if error == "unauthorized" else ""
    )
    summary = ""
    if identity.role is Role.BUYER:
        starred = len(interest_routes.get_repo().list_interested(identity.sub, limit=50, offset=0))
        summary = f'<p>You are following <a href="/buyer/interested">{starred} listing(s)</a>.</p>'
    content = f"""
    <div class="container">
        {error_html}
        <h1>Dashboard</h1>
        <p>Signed in as {Component.escape(identity.name or identity.sub)}.</p>
        {summary}
    </div>
    """
    layout = Layout(title="Dashboard", content=content, identity=identity, current_path=request.url.path)
    return _layout_response(request, layout, headers={"Cache-Control": "private, no-store"})


@app.get("/listings", response_class=HTMLResponse)
async def listings_index(request: Request):
    repo = interest_routes.get_repo()
    cards = [
        ListingCard(listing, star=_star_button_for(request, listing.id)).render()
        for listing in repo.list_listings()
    ]
    content = f"""
    <div class="container">
        <h1>Businesses for sale</h1>
        <section class="listing-grid">{''.join(cards)}</section>
    </div>
    """
    layout = Layout(title="Listings", content=content, identity=_identity(request), current_path=request.url.path)
    return _layout_response(request, layout, headers={"Cache-Control": "private, no-store"})


@app.get("/listings/{listing_id}", response_class=HTMLResponse)
async def listing_detail(request: Request, listing_id: str):
    listing = interest_routes.get_repo().get_listing(listing_id)
    if listing is None:
        return HTMLResponse("Not found", status_code=404)
    card = ListingCard(listing, star=_star_button_for(request, listing.id, show_count=True))
    content = f'<div class="container">{card.render()}</div>'
    layout = Layout(title=listing.title, content=content, identity=_identity(request), current_path=request.url.path)
    return _layout_response(request, layout, headers={"Cache-Control": "private, no-store"})


@app.post("/listings/{listing_id}/star", response_class=HTMLResponse)
async def listing_star_toggle(request: Request, listing_id: str):
    """Run one star-button gesture through the toggle controller.

    The button posts its current state (`starred`, `count`); the controller
    calls the interest API, applies the server's answer (or rolls back) and
    the re-rendered button replaces the old one. Notices travel as HX-Trigger,
    the login redirect for anonymous visitors as HX-Redirect.

    Security: Authenticated callers must be same-origin and send the CSRF
    token (X-CSRF-Token header or csrf_token field).
    """
    repo = interest_routes.get_repo()
    listing = repo.get_listing(listing_id)
    if listing is None:
        return Response(status_code=404)

    identity = _identity(request)
    form = await request.form()
    sid = _get_session_id(request)
    token = None
    if identity.is_authenticated:
        csrf_value = request.headers.get("X-CSRF-Token") or form.get("csrf_token")
        if not _is_same_origin(request) or not _validate_csrf(sid, csrf_value):
            return Response(status_code=403, headers={"Cache-Control": "private, no-store"})
        token = _get_or_create_csrf_token(sid or "")

    settings = _cfg.load_interest_settings()
    notifier = HtmxNotifier()
    redirector = HtmxRedirector()
    async with _internal_api_client(request, settings) as client:
        controller = InterestToggleController(
            listing.id,
            initial_is_starred=form.get("starred") == "1",
            initial_count=_parse_count(form.get("count")),
            is_authenticated=identity.is_authenticated,
            gateway=HttpInterestGateway(client, route_template=settings.toggle_route),
            notifier=notifier,
            redirector=redirector,
            login_location=settings.login_location,
        )
        await controller.toggle()

    button = StarButton.from_controller(controller, show_count=form.get("show_count") == "1", csrf_token=token)
    headers = {"Cache-Control": "private, no-store", **notifier.headers(), **redirector.headers()}
    return HTMLResponse(button.render(), headers=headers)


@app.get("/buyer/interested", response_class=HTMLResponse)
async def buyer_interested(request: Request, limit: str | None = None, offset: str | None = None):
    """The buyer's interested listings, newest first."""
    identity, denied = _require_role(request, Role.BUYER.value)
    if denied:
        return denied
    limit_n = max(1, min(50, _parse_count(limit) or 10))
    offset_n = _parse_count(offset)
    rows = interest_routes.get_repo().list_interested(identity.sub, limit=limit_n, offset=offset_n)
    cards = [
        ListingCard(
            listing,
            star=_star_button_for(request, listing.id),
            note=f"Added {created_at[:10]}",
        ).render()
        for listing, created_at in rows
    ]
    body = "".join(cards) if cards else '<p class="text-muted">You have not starred any listings yet.</p>'
    content = f"""
    <div class="container">
        <h1>Interested Listings</h1>
        <section class="listing-grid" id="interested-listings">{body}</section>
    </div>
    """
    layout = Layout(title="Interested Listings", content=content, identity=identity, current_path=request.url.path)
    return _layout_response(request, layout, headers={"Cache-Control": "private, no-store"})


def _feature_in_development(title: str, roles: frozenset[str]):
    async def page(request: Request):
        identity, denied = _require_role(request, *sorted(roles))
        if denied:
            return denied
        content = f"""
        <div class="container">
            <h1>{Component.escape(title)}</h1>
            <p>This feature is in development.</p>
            <p><a href="/dashboard">Back to dashboard</a></p>
        </div>
        """
        layout = Layout(title=title, content=content, identity=identity, current_path=request.url.path)
        return _layout_response(request, layout, headers={"Cache-Control": "private, no-store"})

    return page


# Remaining menu targets get a placeholder page behind the same role gate
# the menu uses for visibility.
_IMPLEMENTED_PAGES = {"/dashboard", "/buyer/interested"}
for _entry in NAV_ENTRIES:
    if _entry.target in _IMPLEMENTED_PAGES:
        continue
    app.add_api_route(
        _entry.target,
        _feature_in_development(_entry.title, _entry.allowed_roles),
        methods=["GET"],
        response_class=HTMLResponse,
    )
    _IMPLEMENTED_PAGES.add(_entry.target)


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
