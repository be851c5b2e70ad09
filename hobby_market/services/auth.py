import logging

from cryptography.fernet import InvalidToken
from fastapi import Cookie, Depends, HTTPException
from pydantic import ValidationError
from starlette.responses import Response

from hobby_market.core.config import settings
from hobby_market.core.crypto import decrypt_json, encrypt_json
from hobby_market.schemas.session import PendingSignIn, SessionUser

log = logging.getLogger(__name__)

SESSION_COOKIE = "hobby_session"
PENDING_SIGN_IN_COOKIE = "hobby_pending_sign_in"
PENDING_SIGN_IN_TTL_SECONDS = 600


def _set_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        name,
        value,
        max_age=max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def read_session(token: str | None) -> SessionUser | None:
    if not token:
        return None
    try:
        data = decrypt_json(token, ttl_seconds=settings.session_max_age_seconds)
        return SessionUser.model_validate(data)
    except (InvalidToken, ValueError, ValidationError):
        # tampered, expired or from an older cookie format
        log.info("discarding unreadable session cookie")
        return None


def write_session(response: Response, user: SessionUser) -> None:
    _set_cookie(response, SESSION_COOKIE, encrypt_json(user.model_dump()), settings.session_max_age_seconds)


def clear_session(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE)


def read_pending_sign_in(token: str | None) -> PendingSignIn | None:
    if not token:
        return None
    try:
        data = decrypt_json(token, ttl_seconds=PENDING_SIGN_IN_TTL_SECONDS)
        return PendingSignIn.model_validate(data)
    except (InvalidToken, ValueError, ValidationError):
        return None


def write_pending_sign_in(response: Response, pending: PendingSignIn) -> None:
    _set_cookie(response, PENDING_SIGN_IN_COOKIE, encrypt_json(pending.model_dump()), PENDING_SIGN_IN_TTL_SECONDS)


def clear_pending_sign_in(response: Response) -> None:
    response.delete_cookie(PENDING_SIGN_IN_COOKIE)


async def get_current_user(hobby_session: str | None = Cookie(default=None)) -> SessionUser | None:
    return read_session(hobby_session)


def require_user(user: SessionUser | None = Depends(get_current_user)) -> SessionUser:
    if user is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return user
