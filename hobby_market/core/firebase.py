"""Process-wide handle to the document store and identity provider.

`get_firebase()` is memoized so every view shares one handle; the underlying
firebase_admin app is only initialized when no default app exists yet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Literal

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud import firestore

from hobby_market.core.config import settings
from hobby_market.schemas.session import PendingSignIn, SessionUser
from hobby_market.services.identity import IdentityProvider, IdentityToolkitClient
from hobby_market.services.store import FirestoreHobbyStore, HobbyStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthEvent:
    kind: Literal["signed_in", "signed_out"]
    user: SessionUser


AuthListener = Callable[[AuthEvent], None]


def server_time() -> Any:
    """Sentinel the store replaces with its own clock at write time."""
    return firestore.SERVER_TIMESTAMP


class FirebaseHandle:
    def __init__(self, *, store: HobbyStore, identity: IdentityProvider) -> None:
        self.store = store
        self.identity = identity
        self._listeners: list[AuthListener] = []

    async def sign_in_with_popup_provider(self, continue_uri: str) -> PendingSignIn:
        """Start the interactive OAuth flow; the browser must visit `auth_uri`."""
        return await self.identity.create_auth_uri(continue_uri)

    async def complete_sign_in(self, pending: PendingSignIn, request_uri: str) -> SessionUser:
        user = await self.identity.sign_in_with_idp(pending, request_uri)
        self._notify(AuthEvent(kind="signed_in", user=user))
        return user

    def sign_out(self, user: SessionUser) -> None:
        # The session itself lives in the caller's cookie; clearing it is the caller's job.
        self._notify(AuthEvent(kind="signed_out", user=user))

    def on_auth_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                log.exception("auth listener failed for %s", event.kind)

    server_time = staticmethod(server_time)

    async def aclose(self) -> None:
        await self.identity.aclose()


def _initialize_app() -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if settings.google_application_credentials:
        cred = credentials.Certificate(settings.google_application_credentials)
    else:
        cred = credentials.ApplicationDefault()

    options = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id
    if settings.firebase_storage_bucket:
        options["storageBucket"] = settings.firebase_storage_bucket

    log.info("initializing firebase app project=%s", settings.firebase_project_id or "<default>")
    return firebase_admin.initialize_app(cred, options)


@lru_cache(maxsize=1)
def get_firebase() -> FirebaseHandle:
    app = _initialize_app()
    return FirebaseHandle(
        store=FirestoreHobbyStore(firestore_async.client(app)),
        identity=IdentityToolkitClient(
            api_key=settings.firebase_api_key.get_secret_value(),
            base_url=settings.identity_toolkit_url,
            provider_id=settings.sign_in_provider_id,
        ),
    )
