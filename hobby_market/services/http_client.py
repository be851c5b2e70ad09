from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx


@dataclass(frozen=True)
class HttpResult:
    ok: bool
    status_code: int | None
    detail: dict[str, Any] = field(default_factory=dict)

    error_code: str | None = None
    error_message: str | None = None

    elapsed_ms: int | None = None

    @classmethod
    def transport_failure(cls, code: str, exc: Exception, started: float) -> "HttpResult":
        return cls(
            ok=False,
            status_code=None,
            detail={"error": code.lower()},
            error_code=code,
            error_message=str(exc),
            elapsed_ms=_since(started),
        )


def _since(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _cap_text(s: str, *, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + f"...(truncated, {len(s)} chars)"


class ProviderHttpClient:
    """
    JSON-over-HTTPS client for identity provider REST calls.

    - One pooled AsyncClient per process; close it with `aclose()`.
    - No retries: sign-in is user-driven and a failure just restarts the flow.
    - Transport errors and non-2xx answers come back as HttpResult(ok=False)
      so callers can read the provider's error envelope.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 20.0,
        max_response_body_chars: int = 20_000,
        default_headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._max_body = max_response_body_chars
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Accept": "application/json", **dict(default_headers or {})},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _body(self, resp: httpx.Response) -> dict[str, Any]:
        ct = (resp.headers.get("content-type") or "").lower()
        if "json" in ct:
            try:
                parsed = resp.json()
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                return parsed
            if parsed is not None:
                return {"data": parsed}
        return {"raw": _cap_text(resp.text, max_chars=self._max_body), "content_type": ct or None}

    async def post_json(
        self,
        *,
        url: str,
        params: Mapping[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> HttpResult:
        started = time.monotonic()
        try:
            resp = await self._client.post(url, params=dict(params or {}), json=json_body)
        except httpx.TimeoutException as e:
            return HttpResult.transport_failure("TIMEOUT", e, started)
        except httpx.RequestError as e:
            # DNS, connection refused, TLS
            return HttpResult.transport_failure("REQUEST_ERROR", e, started)

        detail = self._body(resp)
        if resp.is_success:
            return HttpResult(ok=True, status_code=resp.status_code, detail=detail, elapsed_ms=_since(started))

        return HttpResult(
            ok=False,
            status_code=resp.status_code,
            detail=detail,
            error_code=f"HTTP_{resp.status_code}",
            error_message=f"HTTP {resp.status_code}",
            elapsed_ms=_since(started),
        )
