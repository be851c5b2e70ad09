"""Identity provider client (Firebase Auth REST, federated sign-in).

The sign-in flow has two halves:
1. `create_auth_uri` asks the provider for the OAuth URL to send the browser to,
   plus a provider session id that must be presented again in step 2.
2. `sign_in_with_idp` exchanges the provider's redirect back to us for the
   signed-in user.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from hobby_market.core.errors import IdentityProviderError
from hobby_market.schemas.session import PendingSignIn, SessionUser
from hobby_market.services.http_client import HttpResult, ProviderHttpClient

log = logging.getLogger(__name__)


class IdentityProvider(ABC):
    @abstractmethod
    async def create_auth_uri(self, continue_uri: str) -> PendingSignIn:
        ...

    @abstractmethod
    async def sign_in_with_idp(self, pending: PendingSignIn, request_uri: str) -> SessionUser:
        ...

    async def aclose(self) -> None:
        return None


def _provider_message(res: HttpResult) -> str:
    # Firebase REST errors look like {"error": {"code": 400, "message": "INVALID_IDP_RESPONSE"}}
    err = res.detail.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return res.error_message or "identity provider request failed"


class IdentityToolkitClient(IdentityProvider):
    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        provider_id: str = "google.com",
        http: ProviderHttpClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._provider_id = provider_id
        self._http = http or ProviderHttpClient()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _call(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        res = await self._http.post_json(
            url=f"{self._base_url}/accounts:{method}",
            params={"key": self._api_key},
            json_body=body,
        )
        if not res.ok:
            message = _provider_message(res)
            log.warning("identity provider %s failed: status=%s message=%s", method, res.status_code, message)
            raise IdentityProviderError(message, status_code=res.status_code)
        return res.detail

    async def create_auth_uri(self, continue_uri: str) -> PendingSignIn:
        detail = await self._call(
            "createAuthUri",
            {"providerId": self._provider_id, "continueUri": continue_uri},
        )
        auth_uri = detail.get("authUri")
        session_id = detail.get("sessionId")
        if not auth_uri or not session_id:
            raise IdentityProviderError("createAuthUri response missing authUri or sessionId")
        return PendingSignIn(provider_id=self._provider_id, auth_uri=auth_uri, session_id=session_id)

    async def sign_in_with_idp(self, pending: PendingSignIn, request_uri: str) -> SessionUser:
        detail = await self._call(
            "signInWithIdp",
            {
                "requestUri": request_uri,
                "sessionId": pending.session_id,
                "returnSecureToken": True,
                "returnIdpCredential": True,
            },
        )
        if detail.get("errorMessage"):
            raise IdentityProviderError(str(detail["errorMessage"]))
        uid = detail.get("localId")
        if not uid:
            raise IdentityProviderError("signInWithIdp response missing localId")
        return SessionUser(
            uid=uid,
            display_name=detail.get("displayName"),
            email=detail.get("email"),
            photo_url=detail.get("photoUrl"),
        )
