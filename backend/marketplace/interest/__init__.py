"""Interest (star button) context.

Re-export the controller and its ports for convenient imports in the web
layer and tests.
"""

from .controller import Idle, InterestToggleController, Pending
from .http_gateway import HttpInterestGateway
from .ports import (
    InterestGateway,
    InterestGatewayError,
    InterestSnapshot,
    NotificationSink,
    RedirectSink,
    Severity,
)

__all__ = [
    "Idle",
    "Pending",
    "InterestToggleController",
    "HttpInterestGateway",
    "InterestGateway",
    "InterestGatewayError",
    "InterestSnapshot",
    "NotificationSink",
    "RedirectSink",
    "Severity",
]
