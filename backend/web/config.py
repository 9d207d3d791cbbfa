"""
Configuration and startup security checks for BizList.

Why: Keep every environment variable the web layer reads in one place, with
explicit defaults and validation, and refuse to start a production-like
deployment with obviously unsafe settings. Development stays permissive.

Permissions: The caller needs no special privileges. Functions only read
environment variables; fatal misconfiguration raises `SystemExit`.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from urllib.parse import urlparse

from backend.marketplace.interest.controller import DEFAULT_LOGIN_LOCATION
from backend.marketplace.interest.http_gateway import DEFAULT_TOGGLE_ROUTE


DEFAULT_INTERNAL_BASE_URL = "http://local"
DEFAULT_TIMEOUT_SECONDS = 10


def environment() -> str:
    return (os.getenv("BIZLIST_ENV") or "dev").strip().lower()


def _is_prod_like(env: str) -> bool:
    return (env or "").lower() in {"prod", "production", "stage", "staging"}


def _flag(name: str) -> bool:
    return (os.getenv(name, "false") or "").strip().lower() in {"1", "true", "yes"}


def _int_env(name: str, default: int, *, low: int, high: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")
    if value < low or value > high:
        raise ValueError(f"{name} out of range ({low}..{high}), got: {value}")
    return value


@dataclass(frozen=True)
class InterestSettings:
    internal_base_url: str
    toggle_route: str
    login_location: str
    timeout_seconds: int


def load_interest_settings() -> InterestSettings:
    """Parse interest-toggle settings from the environment.

    Env:
        BIZLIST_INTERNAL_BASE_URL – base for SSR->API hops (default http://local,
            served in-process through the ASGI transport)
        BIZLIST_INTEREST_TOGGLE_ROUTE – route template containing {listing_id}
        BIZLIST_LOGIN_LOCATION – authentication entry point for anonymous users
        BIZLIST_INTEREST_TIMEOUT_SECONDS – 1..60 (default 10)
    """
    base = (os.getenv("BIZLIST_INTERNAL_BASE_URL") or DEFAULT_INTERNAL_BASE_URL).strip().rstrip("/")
    route = (os.getenv("BIZLIST_INTEREST_TOGGLE_ROUTE") or DEFAULT_TOGGLE_ROUTE).strip()
    if "{listing_id}" not in route:
        raise ValueError("BIZLIST_INTEREST_TOGGLE_ROUTE must contain '{listing_id}'")
    login = (os.getenv("BIZLIST_LOGIN_LOCATION") or DEFAULT_LOGIN_LOCATION).strip()
    timeout = _int_env("BIZLIST_INTEREST_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, low=1, high=60)
    return InterestSettings(
        internal_base_url=base or DEFAULT_INTERNAL_BASE_URL,
        toggle_route=route,
        login_location=login,
        timeout_seconds=timeout,
    )


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/stage only):
    - Internal API base must not use plain http to a non-local host.
    - Login location must be a relative path or an https URL.
    - Demo session seeding must be disabled.
    """
    if not _is_prod_like(environment()):
        return

    base = (os.getenv("BIZLIST_INTERNAL_BASE_URL") or DEFAULT_INTERNAL_BASE_URL).strip()
    parsed = urlparse(base)
    host = (parsed.hostname or "").lower()
    if parsed.scheme == "http" and host not in {"local", "localhost", "127.0.0.1"}:
        raise SystemExit(
            "Refusing to start: BIZLIST_INTERNAL_BASE_URL must use https for non-local hosts in production."
        )

    login = (os.getenv("BIZLIST_LOGIN_LOCATION") or DEFAULT_LOGIN_LOCATION).strip()
    if login.lower().startswith("http://"):
        raise SystemExit("Refusing to start: BIZLIST_LOGIN_LOCATION must be a relative path or https URL in production.")

    if _flag("BIZLIST_SEED_DEMO_SESSIONS"):
        raise SystemExit("Refusing to start: BIZLIST_SEED_DEMO_SESSIONS must be false in production/staging.")
