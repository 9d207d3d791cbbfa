"""
Identity helpers, session store and the HTMX notification/redirect sinks.
"""
import json

from backend.identity_access.domain import Identity, Role, normalize_role, primary_role
from backend.identity_access.stores import SessionStore
from backend.marketplace.interest import Severity
from backend.web.htmx import HtmxNotifier, HtmxRedirector


def test_primary_role_prefers_highest_privilege():
    assert primary_role(["buyer", "admin"]) is Role.ADMIN
    assert primary_role(["Seller", "buyer"]) is Role.SELLER
    assert primary_role(["unknown"]) is Role.GUEST
    assert primary_role([]) is Role.GUEST


def test_normalize_role_accepts_enum_and_rejects_unknown():
    assert normalize_role(Role.BUYER) == "buyer"
    assert normalize_role(" ADMIN ") == "admin"
    assert normalize_role("owner") is None
    assert normalize_role(None) is None


def test_guest_identity_is_not_authenticated():
    assert Identity.anonymous().is_authenticated is False
    assert Identity(sub="u-1", role=Role.GUEST).is_authenticated is False
    assert Identity(sub="u-1", role=Role.BUYER).is_authenticated is True


def test_session_store_roundtrip_and_expiry():
    store = SessionStore()
    rec = store.create(sub="u-1", name="Ada", roles=["seller"])
    assert store.get(rec.session_id).to_identity() == Identity(sub="u-1", name="Ada", role=Role.SELLER)

    expired = store.create(sub="u-2", roles=["buyer"], ttl_seconds=-10)
    assert store.get(expired.session_id) is None

    store.delete(rec.session_id)
    assert store.get(rec.session_id) is None


def test_notifier_emits_latest_message_as_hx_trigger():
    notifier = HtmxNotifier()
    assert notifier.headers() == {}
    notifier.notify(Severity.INFO, "first")
    notifier.notify(Severity.ERROR, "second")
    payload = json.loads(notifier.headers()["HX-Trigger"])
    assert payload == {"showMessage": {"message": "second", "type": "error"}}


def test_redirector_emits_hx_redirect():
    redirector = HtmxRedirector()
    assert redirector.headers() == {}
    redirector.redirect("/login?role=buyer")
    assert redirector.headers() == {"HX-Redirect": "/login?role=buyer"}
