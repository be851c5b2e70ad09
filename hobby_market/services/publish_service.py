from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from hobby_market.core.errors import NotSignedInError, PublishValidationError
from hobby_market.core.firebase import FirebaseHandle
from hobby_market.schemas.hobby import HobbyPublish
from hobby_market.schemas.session import SessionUser

log = logging.getLogger(__name__)

VALIDATION_MESSAGE = "All fields are required and price must be greater than 0."

# plain decimal literal with optional sign and exponent; no digit separators, inf or nan
_PRICE_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class ValidHobby:
    title: str
    description: str
    price_per_hour: float


def _parse_price(raw: str) -> float | None:
    text = raw.strip()
    if not _PRICE_RE.fullmatch(text):
        return None
    price = float(text)
    if not math.isfinite(price):
        return None
    return price


def validate_publish(form: HobbyPublish) -> ValidHobby:
    """Trim and check the raw form. Raises PublishValidationError; never touches the network."""
    title = form.title.strip()
    description = form.description.strip()
    price = _parse_price(form.price_per_hour)

    if not title or not description or price is None or price <= 0:
        raise PublishValidationError(VALIDATION_MESSAGE)

    return ValidHobby(title=title, description=description, price_per_hour=price)


def hobby_document(user: SessionUser, hobby: ValidHobby, *, now: Any) -> dict[str, Any]:
    return {
        "hostId": user.uid,
        "title": hobby.title,
        "description": hobby.description,
        "pricePerHour": hobby.price_per_hour,
        "isActive": True,
        "createdAt": now,
    }


def profile_document(user: SessionUser, *, now: Any) -> dict[str, Any]:
    return {
        "name": user.display_name,
        "email": user.email,
        "photoURL": user.photo_url,
        "roles": {"isGuest": False, "isHost": True},
        "lastLogin": now,
    }


async def publish_hobby(
    firebase: FirebaseHandle,
    *,
    user: SessionUser | None,
    form: HobbyPublish,
) -> str:
    """
    Validate the form, then create the hobby and merge the host profile in one
    store transaction. Returns the new hobby id.

    Raises NotSignedInError / PublishValidationError before any network call,
    StoreError if the write fails.
    """
    if user is None:
        raise NotSignedInError()

    hobby = validate_publish(form)
    now = firebase.server_time()

    hobby_id = await firebase.store.publish_hobby(
        hobby_document(user, hobby, now=now),
        uid=user.uid,
        profile=profile_document(user, now=now),
        first_seen={"createdAt": now},
    )
    log.info("hobby published id=%s host=%s", hobby_id, user.uid)
    return hobby_id
