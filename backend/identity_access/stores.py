"""
In-memory session store for development and tests.

Why: Keep session data opaque to the client. The cookie carries only an
opaque session id; identity attributes stay server-side. Session issuance
(login/registration) lives outside this repository, so the store only offers
what the web layer needs to read, seed and revoke sessions.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional
import secrets
import threading
import time

from .domain import Identity, primary_role


def _now() -> int:
    return int(time.time())


@dataclass
class SessionRecord:
    session_id: str
    sub: str
    name: str
    roles: list[str] = field(default_factory=list)
    suspended: bool = False
    expires_at: Optional[int] = None

    def to_identity(self) -> Identity:
        return Identity(sub=self.sub, name=self.name, role=primary_role(self.roles), suspended=self.suspended)


class SessionStore:
    def __init__(self):
        self._data: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def create(
        self,
        *,
        sub: str,
        name: str = "",
        roles: list[str] | None = None,
        suspended: bool = False,
        ttl_seconds: int = 3600,
    ) -> SessionRecord:
        sid = secrets.token_urlsafe(24)
        rec = SessionRecord(
            session_id=sid,
            sub=sub,
            name=name,
            roles=list(roles or []),
            suspended=suspended,
            expires_at=_now() + ttl_seconds,
        )
        with self._lock:
            self._data[sid] = rec
        return rec

    def get(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            rec = self._data.get(session_id)
            if not rec:
                return None
            if rec.expires_at and rec.expires_at < _now():
                self._data.pop(session_id, None)
                return None
            return rec

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._data.pop(session_id, None)
