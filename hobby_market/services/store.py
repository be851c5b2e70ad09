"""Document store access (repository pattern).

Stores hand back raw documents; decoding into domain models happens in
`decode_hobby` / `decode_host` so malformed data is reported separately from
transport failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import ValidationError

from hobby_market.core.errors import RecordDecodeError, StoreError
from hobby_market.schemas.hobby import Hobby, HobbyRecord, HostProfile, HostRecord

HOBBIES = "hobbies"
USERS = "users"


@dataclass(frozen=True)
class StoredDoc:
    id: str
    data: dict[str, Any] = field(default_factory=dict)


def _decode_errors(e: ValidationError) -> list[dict]:
    return e.errors(include_url=False, include_context=False, include_input=False)


def decode_hobby(doc: StoredDoc) -> Hobby:
    try:
        record = HobbyRecord.model_validate(doc.data)
    except ValidationError as e:
        raise RecordDecodeError(HOBBIES, doc.id, _decode_errors(e)) from e
    return Hobby.from_record(doc.id, record)


def decode_host(doc: StoredDoc) -> HostProfile:
    try:
        record = HostRecord.model_validate(doc.data)
    except ValidationError as e:
        raise RecordDecodeError(USERS, doc.id, _decode_errors(e)) from e
    return HostProfile(name=record.name, email=record.email, photo_url=record.photo_url)


class HobbyStore(ABC):
    """Interface for hobby and user document operations."""

    @abstractmethod
    async def list_active_hobbies(self) -> list[StoredDoc]:
        """Return hobbies with isActive == true, newest createdAt first."""
        ...

    @abstractmethod
    async def get_hobby(self, hobby_id: str) -> StoredDoc | None:
        """Return the hobby document, or None if it does not exist."""
        ...

    @abstractmethod
    async def get_user(self, uid: str) -> StoredDoc | None:
        """Return the user document, or None if it does not exist."""
        ...

    @abstractmethod
    async def publish_hobby(
        self,
        hobby: dict[str, Any],
        *,
        uid: str,
        profile: dict[str, Any],
        first_seen: dict[str, Any],
    ) -> str:
        """Create the hobby and merge the user profile atomically.

        `first_seen` fields are merged into the profile only when the user
        document does not exist yet. Returns the new hobby id.
        """
        ...


class FirestoreHobbyStore(HobbyStore):
    """Cloud Firestore implementation backed by the async client."""

    def __init__(self, db: firestore.AsyncClient) -> None:
        self._db = db

    async def list_active_hobbies(self) -> list[StoredDoc]:
        query = (
            self._db.collection(HOBBIES)
            .where(filter=FieldFilter("isActive", "==", True))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        try:
            snapshots = await query.get()
        except GoogleAPIError as e:
            raise StoreError("Unable to query hobbies") from e
        return [StoredDoc(id=s.id, data=s.to_dict() or {}) for s in snapshots]

    async def _get(self, collection: str, doc_id: str) -> StoredDoc | None:
        try:
            snap = await self._db.collection(collection).document(doc_id).get()
        except GoogleAPIError as e:
            raise StoreError(f"Unable to read {collection} document") from e
        if not snap.exists:
            return None
        return StoredDoc(id=snap.id, data=snap.to_dict() or {})

    async def get_hobby(self, hobby_id: str) -> StoredDoc | None:
        return await self._get(HOBBIES, hobby_id)

    async def get_user(self, uid: str) -> StoredDoc | None:
        return await self._get(USERS, uid)

    async def publish_hobby(
        self,
        hobby: dict[str, Any],
        *,
        uid: str,
        profile: dict[str, Any],
        first_seen: dict[str, Any],
    ) -> str:
        hobby_ref = self._db.collection(HOBBIES).document()
        user_ref = self._db.collection(USERS).document(uid)

        @firestore.async_transactional
        async def _write(transaction) -> None:
            # reads must precede writes inside a transaction
            user_snap = await user_ref.get(transaction=transaction)
            merged = dict(profile)
            if not user_snap.exists:
                merged.update(first_seen)
            transaction.create(hobby_ref, hobby)
            transaction.set(user_ref, merged, merge=True)

        try:
            await _write(self._db.transaction())
        except GoogleAPIError as e:
            raise StoreError("Unable to publish hobby") from e
        return hobby_ref.id
