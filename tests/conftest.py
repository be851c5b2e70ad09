import os
import asyncio
import itertools
from datetime import datetime, timedelta, timezone
from typing import Any

from cryptography.fernet import Fernet

# Settings are read at import time; configure before the app is imported.
os.environ.setdefault("SESSION_SECRET_KEY", Fernet.generate_key().decode("utf-8"))
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("PUBLIC_BASE_URL", "http://test")
os.environ.setdefault("FIREBASE_API_KEY", "test-api-key")

import httpx
import pytest
import pytest_asyncio
from google.cloud.firestore import SERVER_TIMESTAMP

from hobby_market.core.crypto import encrypt_json
from hobby_market.core.errors import IdentityProviderError
from hobby_market.core.firebase import FirebaseHandle, get_firebase
from hobby_market.main import app
from hobby_market.schemas.session import PendingSignIn, SessionUser
from hobby_market.services.auth import SESSION_COOKIE
from hobby_market.services.identity import IdentityProvider
from hobby_market.services.store import HobbyStore, StoredDoc

STORE_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class InMemoryHobbyStore(HobbyStore):
    """
    Stand-in for Firestore:
    - resolves SERVER_TIMESTAMP sentinels with its own clock on write
    - applies the isActive filter and createdAt ordering like the real query
    - every call can be made to fail or to block on an event
    """

    def __init__(self) -> None:
        self.hobbies: dict[str, dict[str, Any]] = {}
        self.users: dict[str, dict[str, Any]] = {}
        self.publish_calls: list[dict[str, Any]] = []
        self.fail_queries: Exception | None = None
        self.fail_user_reads: Exception | None = None
        self.fail_publish: Exception | None = None
        self.gate: asyncio.Event | None = None
        self._ticks = itertools.count(1)
        self._ids = itertools.count(1)

    def _now(self) -> datetime:
        return STORE_EPOCH + timedelta(minutes=next(self._ticks))

    def _resolve(self, data: dict[str, Any]) -> dict[str, Any]:
        now = self._now()
        return {k: (now if v is SERVER_TIMESTAMP else v) for k, v in data.items()}

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    def seed_hobby(self, hobby_id: str, **fields: Any) -> dict[str, Any]:
        doc = {
            "title": "Wheel throwing",
            "description": "Two hours at the wheel",
            "pricePerHour": 40,
            "hostId": "host-123456",
            "isActive": True,
            "createdAt": self._now(),
        }
        doc.update(fields)
        self.hobbies[hobby_id] = doc
        return doc

    async def list_active_hobbies(self) -> list[StoredDoc]:
        await self._wait()
        if self.fail_queries is not None:
            raise self.fail_queries
        rows = [
            (doc_id, data)
            for doc_id, data in self.hobbies.items()
            if data.get("isActive") is True and "createdAt" in data
        ]
        rows.sort(key=lambda row: row[1]["createdAt"], reverse=True)
        return [StoredDoc(id=doc_id, data=dict(data)) for doc_id, data in rows]

    async def get_hobby(self, hobby_id: str) -> StoredDoc | None:
        await self._wait()
        if self.fail_queries is not None:
            raise self.fail_queries
        data = self.hobbies.get(hobby_id)
        return StoredDoc(id=hobby_id, data=dict(data)) if data is not None else None

    async def get_user(self, uid: str) -> StoredDoc | None:
        if self.fail_user_reads is not None:
            raise self.fail_user_reads
        data = self.users.get(uid)
        return StoredDoc(id=uid, data=dict(data)) if data is not None else None

    async def publish_hobby(
        self,
        hobby: dict[str, Any],
        *,
        uid: str,
        profile: dict[str, Any],
        first_seen: dict[str, Any],
    ) -> str:
        self.publish_calls.append({"hobby": hobby, "uid": uid, "profile": profile, "first_seen": first_seen})
        if self.fail_publish is not None:
            raise self.fail_publish

        hobby_id = f"hby{next(self._ids)}"
        merged = dict(profile)
        if uid not in self.users:
            merged.update(first_seen)
        self.hobbies[hobby_id] = self._resolve(hobby)
        self.users[uid] = {**self.users.get(uid, {}), **self._resolve(merged)}
        return hobby_id


class FakeIdentityProvider(IdentityProvider):
    def __init__(self) -> None:
        self.user = SessionUser(
            uid="uid-ada-0001",
            display_name="Ada Lovelace",
            email="ada@example.com",
            photo_url="https://example.com/ada.png",
        )
        self.continue_uris: list[str] = []
        self.request_uris: list[str] = []
        self.fail: IdentityProviderError | None = None

    async def create_auth_uri(self, continue_uri: str) -> PendingSignIn:
        self.continue_uris.append(continue_uri)
        if self.fail is not None:
            raise self.fail
        return PendingSignIn(
            provider_id="google.com",
            auth_uri="https://accounts.google.com/o/oauth2/auth?state=xyz",
            session_id="provider-session-1",
        )

    async def sign_in_with_idp(self, pending: PendingSignIn, request_uri: str) -> SessionUser:
        self.request_uris.append(request_uri)
        if self.fail is not None:
            raise self.fail
        if pending.session_id != "provider-session-1":
            raise IdentityProviderError("INVALID_IDP_RESPONSE", status_code=400)
        return self.user


@pytest.fixture
def store() -> InMemoryHobbyStore:
    return InMemoryHobbyStore()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def firebase(store, identity) -> FirebaseHandle:
    return FirebaseHandle(store=store, identity=identity)


@pytest.fixture
def user(identity) -> SessionUser:
    return identity.user


def session_cookie_for(user: SessionUser) -> str:
    return encrypt_json(user.model_dump())


@pytest_asyncio.fixture
async def client(firebase):
    """
    HTTP client against the app with the Firebase handle swapped for fakes.
    """
    app.dependency_overrides[get_firebase] = lambda: firebase

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def signed_in_client(client, user):
    client.cookies.set(SESSION_COOKIE, session_cookie_for(user))
    return client


@pytest.fixture
def make_session_cookie():
    return session_cookie_for
