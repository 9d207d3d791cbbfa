"""
HTTP adapter for the interest toggle mutation.

Why:
    The controller depends only on the InterestGateway port. This adapter
    binds it to the JSON interest API via httpx so the same code path serves
    SSR handlers (in-process ASGI transport) and out-of-process clients.

Behavior:
    - POST to the configured route template with no body.
    - 2xx with `{"isStarred": bool, "count": int>=0}` -> InterestSnapshot.
    - 2xx with an empty body or a payload that does not validate -> None
      (the controller applies its flip fallback).
    - Transport errors, timeouts, non-2xx or `{"success": false}` ->
      InterestGatewayError.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

from .ports import InterestGatewayError, InterestSnapshot


logger = logging.getLogger("bizlist.marketplace.interest")

DEFAULT_TOGGLE_ROUTE = "/api/interest/listings/{listing_id}/toggle"


class TogglePayload(BaseModel):
    """Wire shape of a successful toggle acknowledgement."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_starred: StrictBool = Field(alias="isStarred")
    count: StrictInt = Field(ge=0)


class HttpInterestGateway:
    def __init__(self, client: httpx.AsyncClient, *, route_template: str = DEFAULT_TOGGLE_ROUTE) -> None:
        if "{listing_id}" not in route_template:
            raise ValueError("route_template must contain '{listing_id}'")
        self._client = client
        self._route_template = route_template

    def route_for(self, item_id: str) -> str:
        return self._route_template.format(listing_id=item_id)

    async def toggle(self, item_id: str) -> Optional[InterestSnapshot]:
        url = self.route_for(item_id)
        try:
            resp = await self._client.post(url)
        except httpx.TimeoutException as exc:
            raise InterestGatewayError("timeout") from exc
        except httpx.HTTPError as exc:
            raise InterestGatewayError(f"transport:{exc.__class__.__name__}") from exc

        if not resp.is_success:
            raise InterestGatewayError("http_status", status_code=resp.status_code)

        body = resp.content.strip()
        if not body:
            return None
        try:
            data = resp.json()
        except ValueError:
            logger.debug("toggle acknowledgement is not JSON item=%s", item_id)
            return None
        if not isinstance(data, dict):
            return None
        if data.get("success") is False:
            raise InterestGatewayError(str(data.get("error") or "server_reported_failure"), status_code=resp.status_code)
        try:
            payload = TogglePayload.model_validate(data)
        except ValidationError:
            logger.debug("toggle acknowledgement without usable payload item=%s", item_id)
            return None
        return InterestSnapshot(is_starred=payload.is_starred, count=payload.count)


__all__ = ["HttpInterestGateway", "TogglePayload", "DEFAULT_TOGGLE_ROUTE"]
