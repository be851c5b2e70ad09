import logging

from fastapi import APIRouter, Cookie, Depends, Request
from fastapi.responses import RedirectResponse

from hobby_market.core.config import settings
from hobby_market.core.errors import IdentityProviderError
from hobby_market.core.firebase import FirebaseHandle, get_firebase
from hobby_market.schemas.session import SessionUser
from hobby_market.services.auth import (
    clear_pending_sign_in,
    clear_session,
    get_current_user,
    read_pending_sign_in,
    write_pending_sign_in,
    write_session,
)

log = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", include_in_schema=False)

CALLBACK_PATH = "/auth/callback"


def _public_url(path: str, query: str = "") -> str:
    # The provider compares requestUri against continueUri, so both use the public origin.
    url = settings.public_base_url.rstrip("/") + path
    return f"{url}?{query}" if query else url


def _sign_in_failed() -> RedirectResponse:
    resp = RedirectResponse("/?sign_in=failed", status_code=303)
    clear_pending_sign_in(resp)
    return resp


@router.get("/sign-in")
async def sign_in(firebase: FirebaseHandle = Depends(get_firebase)) -> RedirectResponse:
    try:
        pending = await firebase.sign_in_with_popup_provider(_public_url(CALLBACK_PATH))
    except IdentityProviderError:
        log.exception("sign-in could not be started")
        return _sign_in_failed()

    resp = RedirectResponse(pending.auth_uri, status_code=303)
    write_pending_sign_in(resp, pending)
    return resp


@router.get("/callback")
async def sign_in_callback(
    request: Request,
    hobby_pending_sign_in: str | None = Cookie(default=None),
    firebase: FirebaseHandle = Depends(get_firebase),
) -> RedirectResponse:
    pending = read_pending_sign_in(hobby_pending_sign_in)
    if pending is None:
        log.warning("sign-in callback without a pending sign-in")
        return _sign_in_failed()

    try:
        user = await firebase.complete_sign_in(pending, _public_url(CALLBACK_PATH, request.url.query))
    except IdentityProviderError:
        log.exception("sign-in could not be completed")
        return _sign_in_failed()

    resp = RedirectResponse("/", status_code=303)
    clear_pending_sign_in(resp)
    write_session(resp, user)
    return resp


@router.post("/sign-out")
async def sign_out(
    user: SessionUser | None = Depends(get_current_user),
    firebase: FirebaseHandle = Depends(get_firebase),
) -> RedirectResponse:
    if user is not None:
        firebase.sign_out(user)
    resp = RedirectResponse("/", status_code=303)
    clear_session(resp)
    return resp
