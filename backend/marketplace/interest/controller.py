"""
Interest toggle controller (star button state machine).

Intent:
    Own the state of one "interested" control for one listing and one
    identity: issue the remote toggle, wait for the server's answer and apply
    it. The boolean and the count are never flipped before the response
    arrives, so a rejected mutation cannot cause a visible flicker.

States:
    Idle(is_starred, count)             steady state
    Pending(previous_is_starred, previous_count)
                                        one request in flight

Transitions (from Pending):
    snapshot returned      -> Idle(snapshot)               + success notice
    no/invalid payload     -> Idle(not previous, count)    + success notice
    InterestGatewayError   -> Idle(previous)               + error notice

Guards:
    - Unauthenticated callers get an info notice and a redirect to the login
      entry point; no request, no state change.
    - toggle() while Pending is dropped silently (double-click protection).
    - After close() late outcomes are discarded.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Union

from .ports import (
    InterestGateway,
    InterestGatewayError,
    InterestSnapshot,
    NotificationSink,
    RedirectSink,
    Severity,
)


logger = logging.getLogger("bizlist.marketplace.interest")

DEFAULT_LOGIN_LOCATION = "/login?role=buyer"

MSG_LOGIN_REQUIRED = "Please log in to save this listing to your interested list"
MSG_ADDED = "Listing added to your interested list"
MSG_REMOVED = "Listing removed from your interested list"
MSG_FAILED = "Failed to update your interest in this listing"


@dataclass(frozen=True)
class Idle:
    is_starred: bool
    count: int


@dataclass(frozen=True)
class Pending:
    previous_is_starred: bool
    previous_count: int


ToggleState = Union[Idle, Pending]


class InterestToggleController:
    """State machine for a single star button.

    Many instances can be live at once (one per listing card); they share
    nothing. All methods must be called from the same event loop.
    """

    def __init__(
        self,
        item_id: str,
        *,
        initial_is_starred: bool,
        initial_count: int,
        is_authenticated: bool,
        gateway: InterestGateway,
        notifier: NotificationSink,
        redirector: RedirectSink,
        login_location: str = DEFAULT_LOGIN_LOCATION,
    ) -> None:
        if not str(item_id or "").strip():
            raise ValueError("item_id must not be empty")
        if int(initial_count) < 0:
            raise ValueError("initial_count must be >= 0")
        self.item_id = str(item_id)
        self._is_authenticated = bool(is_authenticated)
        self._gateway = gateway
        self._notifier = notifier
        self._redirector = redirector
        self._login_location = login_location
        self._state: ToggleState = Idle(bool(initial_is_starred), int(initial_count))
        self._settled = False
        self._closed = False

    # --- observable fields --------------------------------------------------

    @property
    def is_starred(self) -> bool:
        state = self._state
        return state.previous_is_starred if isinstance(state, Pending) else state.is_starred

    @property
    def count(self) -> int:
        state = self._state
        return state.previous_count if isinstance(state, Pending) else state.count

    @property
    def is_pending(self) -> bool:
        return isinstance(self._state, Pending)

    @property
    def state(self) -> ToggleState:
        return self._state

    @property
    def request_state(self) -> str:
        if self.is_pending:
            return "pending"
        return "settled" if self._settled else "idle"

    def snapshot(self) -> InterestSnapshot:
        return InterestSnapshot(is_starred=self.is_starred, count=self.count)

    # --- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        """Mark the owning view as gone; pending outcomes will be dropped."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    # --- operation ----------------------------------------------------------

    async def toggle(self) -> None:
        if self._closed:
            return
        if not self._is_authenticated:
            self._notifier.notify(Severity.INFO, MSG_LOGIN_REQUIRED)
            self._redirector.redirect(self._login_location)
            return
        state = self._state
        if isinstance(state, Pending):
            logger.debug("toggle ignored, request in flight item=%s", self.item_id)
            return

        # Enter Pending before the first await so re-entrant calls see it.
        pending = Pending(previous_is_starred=state.is_starred, previous_count=state.count)
        self._state = pending
        try:
            snapshot = await self._gateway.toggle(self.item_id)
        except InterestGatewayError as exc:
            if self._discard_late_outcome():
                return
            logger.warning(
                "interest toggle failed item=%s reason=%s status=%s",
                self.item_id,
                exc.reason,
                exc.status_code,
            )
            self._settle(Idle(pending.previous_is_starred, pending.previous_count))
            self._notifier.notify(Severity.ERROR, MSG_FAILED)
            return
        except BaseException:
            # Cancellation or a programming error: never leave the button stuck.
            self._settle(Idle(pending.previous_is_starred, pending.previous_count))
            raise

        if self._discard_late_outcome():
            return
        if snapshot is None:
            logger.warning("interest toggle acknowledged without payload item=%s; flipping locally", self.item_id)
            flipped = not pending.previous_is_starred
            self._settle(Idle(flipped, pending.previous_count))
        else:
            self._settle(Idle(bool(snapshot.is_starred), int(snapshot.count)))
        self._notifier.notify(Severity.SUCCESS, MSG_ADDED if self.is_starred else MSG_REMOVED)

    # --- helpers ------------------------------------------------------------

    def _settle(self, state: Idle) -> None:
        self._state = state
        self._settled = True

    def _discard_late_outcome(self) -> bool:
        if not self._closed:
            return False
        logger.debug("discarding late toggle outcome for closed controller item=%s", self.item_id)
        return True


__all__ = [
    "InterestToggleController",
    "Idle",
    "Pending",
    "ToggleState",
    "DEFAULT_LOGIN_LOCATION",
    "MSG_LOGIN_REQUIRED",
    "MSG_ADDED",
    "MSG_REMOVED",
    "MSG_FAILED",
]
