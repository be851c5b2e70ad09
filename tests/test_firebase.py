import logging

import firebase_admin
import pytest
from firebase_admin import credentials, firestore_async
from google.cloud.firestore import SERVER_TIMESTAMP

from hobby_market.core import firebase as firebase_module
from hobby_market.core.config import settings
from hobby_market.core.firebase import AuthEvent, get_firebase, server_time
from hobby_market.services.audit import audit_auth_event
from hobby_market.services.identity import IdentityToolkitClient
from hobby_market.services.store import FirestoreHobbyStore


@pytest.mark.asyncio
async def test_complete_sign_in_notifies_listeners(firebase, identity, user):
    events = []
    firebase.on_auth_change(events.append)

    pending = await firebase.sign_in_with_popup_provider("http://test/auth/callback")
    signed_in = await firebase.complete_sign_in(pending, "http://test/auth/callback?code=1")

    assert signed_in == user
    assert events == [AuthEvent(kind="signed_in", user=user)]


def test_unsubscribe_stops_delivery(firebase, user):
    events = []
    unsubscribe = firebase.on_auth_change(events.append)

    firebase.sign_out(user)
    unsubscribe()
    unsubscribe()
    firebase.sign_out(user)

    assert events == [AuthEvent(kind="signed_out", user=user)]


def test_failing_listener_does_not_block_others(firebase, user, caplog):
    def broken(event):
        raise RuntimeError("listener bug")

    events = []
    firebase.on_auth_change(broken)
    firebase.on_auth_change(events.append)

    firebase.sign_out(user)

    assert [e.kind for e in events] == ["signed_out"]
    assert "auth listener failed" in caplog.text


def test_server_time_is_the_store_sentinel(firebase):
    assert server_time() is SERVER_TIMESTAMP
    assert firebase.server_time() is SERVER_TIMESTAMP


@pytest.fixture
def fresh_handle_cache():
    get_firebase.cache_clear()
    yield
    get_firebase.cache_clear()


def test_get_firebase_is_memoized(monkeypatch, fresh_handle_cache):
    init_calls = []
    app = object()

    def fake_initialize_app():
        init_calls.append(1)
        return app

    monkeypatch.setattr(firebase_module, "_initialize_app", fake_initialize_app)
    monkeypatch.setattr(firestore_async, "client", lambda a: object())

    first = get_firebase()
    second = get_firebase()

    assert first is second
    assert init_calls == [1]
    assert isinstance(first.store, FirestoreHobbyStore)
    assert isinstance(first.identity, IdentityToolkitClient)


def test_initialize_app_reuses_existing_default_app(monkeypatch):
    existing = object()

    def no_new_app(*args, **kwargs):
        raise AssertionError("firebase app initialized twice")

    monkeypatch.setattr(firebase_admin, "get_app", lambda: existing)
    monkeypatch.setattr(firebase_admin, "initialize_app", no_new_app)

    assert firebase_module._initialize_app() is existing


def test_initialize_app_with_application_default_credentials(monkeypatch):
    calls = []

    def no_app():
        raise ValueError("The default Firebase app does not exist.")

    monkeypatch.setattr(firebase_admin, "get_app", no_app)
    monkeypatch.setattr(credentials, "ApplicationDefault", lambda: "adc")
    monkeypatch.setattr(firebase_admin, "initialize_app", lambda cred, options: calls.append((cred, options)) or "app")
    monkeypatch.setattr(settings, "google_application_credentials", None)
    monkeypatch.setattr(settings, "firebase_project_id", "hobby-demo")
    monkeypatch.setattr(settings, "firebase_storage_bucket", "")

    assert firebase_module._initialize_app() == "app"
    assert calls == [("adc", {"projectId": "hobby-demo"})]


def test_audit_listener_logs_auth_events(firebase, user, caplog):
    caplog.set_level(logging.INFO, logger="hobby_market.audit")
    unsubscribe = firebase.on_auth_change(audit_auth_event)

    firebase.sign_out(user)
    unsubscribe()

    assert f"auth.signed_out uid={user.uid}" in caplog.text
