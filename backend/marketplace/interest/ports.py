"""
Ports used by the interest toggle controller.

Keep these small and framework-agnostic so tests can supply simple fakes and
the web layer can bind them to HTMX headers.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


@dataclass(frozen=True)
class InterestSnapshot:
    """Local projection of one identity's interest in one listing."""

    is_starred: bool
    count: int


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class InterestGatewayError(RuntimeError):
    """Network failure or server-reported failure of the toggle mutation."""

    def __init__(self, reason: str, *, status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class InterestGateway(Protocol):
    """Remote toggle mutation addressed by listing id.

    Returns the authoritative snapshot, or None when the acknowledgement
    carries no usable payload. Raises InterestGatewayError on failure.
    """

    async def toggle(self, item_id: str) -> Optional[InterestSnapshot]: ...


class NotificationSink(Protocol):
    def notify(self, severity: Severity, message: str) -> None: ...


class RedirectSink(Protocol):
    def redirect(self, location: str) -> None: ...


__all__ = [
    "InterestSnapshot",
    "Severity",
    "InterestGatewayError",
    "InterestGateway",
    "NotificationSink",
    "RedirectSink",
]
