"""
HTTP interest gateway: maps wire responses onto controller outcomes.

Uses httpx.MockTransport so no app or network is involved.
"""
import json

import pytest
import httpx

from backend.marketplace.interest import HttpInterestGateway, InterestGatewayError, InterestSnapshot


pytestmark = pytest.mark.anyio("asyncio")


def _gateway(handler, route_template="/api/interest/listings/{listing_id}/toggle"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://local")
    return client, HttpInterestGateway(client, route_template=route_template)


def _json(status: int, body) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(body).encode(), headers={"Content-Type": "application/json"})


@pytest.mark.anyio
async def test_success_payload_becomes_snapshot_and_posts_without_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = request.content
        return _json(200, {"success": True, "isStarred": True, "count": 7})

    client, gw = _gateway(handler)
    async with client:
        snap = await gw.toggle("101")

    assert snap == InterestSnapshot(is_starred=True, count=7)
    assert seen == {"method": "POST", "path": "/api/interest/listings/101/toggle", "body": b""}


@pytest.mark.anyio
async def test_custom_route_template_is_used():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return _json(200, {"isStarred": False, "count": 0})

    client, gw = _gateway(handler, route_template="/v2/listings/{listing_id}/interest")
    async with client:
        await gw.toggle("55")
    assert paths == ["/v2/listings/55/interest"]


def test_route_template_without_placeholder_is_rejected():
    with pytest.raises(ValueError):
        HttpInterestGateway(httpx.AsyncClient(), route_template="/api/toggle")


@pytest.mark.anyio
@pytest.mark.parametrize("status", [500, 502, 404, 401])
async def test_non_success_status_raises(status):
    client, gw = _gateway(lambda request: _json(status, {"error": "boom"}))
    async with client:
        with pytest.raises(InterestGatewayError) as exc:
            await gw.toggle("101")
    assert exc.value.status_code == status


@pytest.mark.anyio
async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client, gw = _gateway(handler)
    async with client:
        with pytest.raises(InterestGatewayError) as exc:
            await gw.toggle("101")
    assert exc.value.reason.startswith("transport:")


@pytest.mark.anyio
async def test_timeout_raises_with_timeout_reason():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client, gw = _gateway(handler)
    async with client:
        with pytest.raises(InterestGatewayError) as exc:
            await gw.toggle("101")
    assert exc.value.reason == "timeout"


@pytest.mark.anyio
async def test_explicit_failure_flag_raises():
    client, gw = _gateway(lambda request: _json(200, {"success": False, "error": "not_allowed"}))
    async with client:
        with pytest.raises(InterestGatewayError) as exc:
            await gw.toggle("101")
    assert exc.value.reason == "not_allowed"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(204),
        httpx.Response(200, content=b""),
        httpx.Response(200, content=b"ok"),
        httpx.Response(200, content=b"[1, 2]"),
        httpx.Response(200, content=b'{"success": true}'),
        httpx.Response(200, content=b'{"isStarred": "yes", "count": 1}'),
        httpx.Response(200, content=b'{"isStarred": true, "count": -1}'),
    ],
)
async def test_missing_or_malformed_payload_returns_none(response):
    client, gw = _gateway(lambda request: response)
    async with client:
        assert await gw.toggle("101") is None
