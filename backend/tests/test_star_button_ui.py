"""
Star button SSR flow: POST /listings/{id}/star runs the toggle controller.

The handler seeds the controller from the posted button state, reaches the
interest API through the in-process HTTP gateway and returns the re-rendered
button plus HX-Trigger / HX-Redirect headers.
"""
import json

import pytest
import httpx
from httpx import ASGITransport

from backend.web import main
from backend.web.components import StarButton
from backend.web.routes import interest as interest_routes


pytestmark = pytest.mark.anyio("asyncio")


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test")


def _login(client: httpx.AsyncClient, sub: str = "buyer-1") -> str:
    sess = main.SESSION_STORE.create(sub=sub, name="Test Buyer", roles=["buyer"])
    client.cookies.set(main.SESSION_COOKIE_NAME, sess.session_id)
    return sess.session_id


def _message(response: httpx.Response) -> dict:
    return json.loads(response.headers["HX-Trigger"])["showMessage"]


@pytest.mark.anyio
async def test_anonymous_star_redirects_to_login_with_info_notice():
    async with _client() as c:
        r = await c.post("/listings/101/star", data={"starred": "0", "count": "0"}, headers={"HX-Request": "true"})

    assert r.status_code == 200
    assert r.headers.get("HX-Redirect") == "/login?role=buyer"
    assert _message(r)["type"] == "info"
    assert 'aria-pressed="false"' in r.text
    assert interest_routes.get_repo().count_for("101") == 0


@pytest.mark.anyio
async def test_login_location_is_configurable(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BIZLIST_LOGIN_LOCATION", "/signin")
    async with _client() as c:
        r = await c.post("/listings/101/star", data={"starred": "0", "count": "0"})
    assert r.headers.get("HX-Redirect") == "/signin"


@pytest.mark.anyio
async def test_authenticated_star_applies_server_state():
    async with _client() as c:
        sid = _login(c)
        token = main._get_or_create_csrf_token(sid)
        r = await c.post(
            "/listings/101/star",
            data={"starred": "0", "count": "0", "show_count": "1"},
            headers={"HX-Request": "true", "X-CSRF-Token": token, "Origin": "http://test"},
        )

    assert r.status_code == 200
    assert r.headers.get("Cache-Control") == "private, no-store"
    assert "HX-Redirect" not in r.headers
    assert _message(r) == {"message": "Listing added to your interested list", "type": "success"}
    assert 'id="star-101"' in r.text
    assert 'aria-pressed="true"' in r.text
    assert '<span class="star-count">1</span>' in r.text
    assert interest_routes.get_repo().is_interested("buyer-1", "101")


@pytest.mark.anyio
async def test_second_toggle_removes_interest():
    async with _client() as c:
        sid = _login(c)
        token = main._get_or_create_csrf_token(sid)
        headers = {"X-CSRF-Token": token, "Origin": "http://test"}
        await c.post("/listings/102/star", data={"starred": "0", "count": "0"}, headers=headers)
        r = await c.post("/listings/102/star", data={"starred": "1", "count": "1"}, headers=headers)

    assert _message(r) == {"message": "Listing removed from your interested list", "type": "success"}
    assert 'aria-pressed="false"' in r.text
    assert not interest_routes.get_repo().is_interested("buyer-1", "102")


@pytest.mark.anyio
async def test_server_failure_rolls_back_button(monkeypatch: pytest.MonkeyPatch):
    # Point the gateway at a route that does not exist: the API answers 404.
    monkeypatch.setenv("BIZLIST_INTEREST_TOGGLE_ROUTE", "/api/interest/listings/{listing_id}/missing")
    async with _client() as c:
        sid = _login(c)
        token = main._get_or_create_csrf_token(sid)
        r = await c.post(
            "/listings/103/star",
            data={"starred": "0", "count": "4", "show_count": "1"},
            headers={"X-CSRF-Token": token, "Origin": "http://test"},
        )

    assert r.status_code == 200
    assert _message(r)["type"] == "error"
    assert 'aria-pressed="false"' in r.text
    assert '<span class="star-count">4</span>' in r.text


@pytest.mark.anyio
async def test_missing_csrf_token_is_forbidden():
    async with _client() as c:
        _login(c)
        r = await c.post("/listings/101/star", data={"starred": "0", "count": "0"}, headers={"Origin": "http://test"})
    assert r.status_code == 403
    assert interest_routes.get_repo().count_for("101") == 0


@pytest.mark.anyio
async def test_cross_origin_post_is_forbidden():
    async with _client() as c:
        sid = _login(c)
        token = main._get_or_create_csrf_token(sid)
        r = await c.post(
            "/listings/101/star",
            data={"starred": "0", "count": "0"},
            headers={"X-CSRF-Token": token, "Origin": "http://evil.example"},
        )
    assert r.status_code == 403


@pytest.mark.anyio
async def test_unknown_listing_returns_404():
    async with _client() as c:
        r = await c.post("/listings/999/star", data={"starred": "0", "count": "0"})
    assert r.status_code == 404


@pytest.mark.anyio
async def test_listing_pages_render_star_buttons_with_csrf_header():
    async with _client() as c:
        sid = _login(c)
        r = await c.get("/listings")
    token = main._CSRF_BY_SESSION[sid]
    assert 'id="star-101"' in r.text and 'id="star-104"' in r.text
    assert 'hx-post="/listings/101/star"' in r.text
    assert token in r.text
    assert 'hx-sync="this:drop"' in r.text


@pytest.mark.anyio
async def test_interested_page_lists_starred_listings_newest_first():
    repo = interest_routes.get_repo()
    repo.star("buyer-1", "101")
    repo.star("buyer-1", "103")
    async with _client() as c:
        _login(c)
        r = await c.get("/buyer/interested")

    html = r.text
    assert r.status_code == 200
    assert html.find("Commercial Cleaning Company") < html.find("Neighbourhood Coffee Roastery")
    assert "Boutique Fitness Studio" not in html


def test_star_button_render_states():
    idle = StarButton("7", is_starred=False, count=0, show_count=True).render()
    starred = StarButton("7", is_starred=True, count=3, show_count=True, csrf_token="tok").render()
    pending = StarButton("7", is_starred=True, count=3, is_pending=True).render()

    assert "☆" in idle and "star-count" not in idle
    assert 'aria-label="Add to interested"' in idle
    assert "hx-headers" not in idle
    assert "★" in starred and '<span class="star-count">3</span>' in starred
    assert 'class="star-button starred"' in starred
    assert "tok" in starred
    assert " disabled" in pending and "star-button starred pending" in pending
