"""
HTMX bindings for the controller's notification and redirect ports.

Notifications become an `HX-Trigger: {"showMessage": ...}` header that the
client script turns into a toast; a redirect becomes `HX-Redirect`, which
makes HTMX perform a full page navigation.
"""
from __future__ import annotations

import json
from typing import Optional

from backend.marketplace.interest.ports import Severity


class HtmxNotifier:
    """Collects notifications raised while handling one request."""

    def __init__(self) -> None:
        self.messages: list[tuple[Severity, str]] = []

    def notify(self, severity: Severity, message: str) -> None:
        self.messages.append((Severity(severity), str(message)))

    def headers(self) -> dict[str, str]:
        if not self.messages:
            return {}
        # HX-Trigger carries one event per name; the latest notice wins.
        severity, message = self.messages[-1]
        return {"HX-Trigger": json.dumps({"showMessage": {"message": message, "type": severity.value}})}


class HtmxRedirector:
    def __init__(self) -> None:
        self.location: Optional[str] = None

    def redirect(self, location: str) -> None:
        self.location = location

    def headers(self) -> dict[str, str]:
        return {"HX-Redirect": self.location} if self.location else {}
