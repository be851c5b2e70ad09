from __future__ import annotations

import logging

from hobby_market.core.errors import RecordDecodeError
from hobby_market.core.firebase import FirebaseHandle
from hobby_market.schemas.hobby import Hobby, HostProfile
from hobby_market.schemas.views import DetailState
from hobby_market.services.store import StoredDoc, decode_host, decode_hobby
from hobby_market.views.scope import ScopedView, ViewScope

log = logging.getLogger(__name__)

HOST_PLACEHOLDER = "Host"


class DetailView(ScopedView):
    """One hobby plus its host.

    States: loading -> ready | not-found | error. A missing hobby and an
    inactive hobby both read as not-found. Host lookup failures never move
    the view to error; the host panel just falls back to the placeholder.
    """

    def __init__(self, firebase: FirebaseHandle) -> None:
        super().__init__()
        self._firebase = firebase
        self.state = DetailState()

    async def load(self, hobby_id: str) -> DetailState:
        scope = self._remount()
        self.state = DetailState(state="loading")

        try:
            doc = await self._firebase.store.get_hobby(hobby_id)
            if not scope.active:
                return self.state
            if doc is None or not doc.data.get("isActive"):
                self.state = DetailState(state="not-found")
                return self.state
            hobby = decode_hobby(doc)
        except RecordDecodeError:
            log.exception("detail: malformed hobby %s", hobby_id)
            if scope.active:
                self.state = DetailState(state="error", error_kind="decode")
            return self.state
        except Exception:
            log.exception("detail: failed to load hobby %s", hobby_id)
            if scope.active:
                self.state = DetailState(state="error", error_kind="network")
            return self.state

        self.state = DetailState(state="ready", hobby=hobby)

        if hobby.host_id:
            host = await self._load_host(hobby, scope)
            if host is not None and scope.active:
                self.state = self.state.model_copy(update={"host": host})

        return self.state

    async def _load_host(self, hobby: Hobby, scope: ViewScope) -> HostProfile | None:
        # Absence, permission errors and malformed profiles are all treated alike.
        try:
            doc: StoredDoc | None = await self._firebase.store.get_user(hobby.host_id)
        except Exception:
            log.warning("detail: host lookup failed for %s", hobby.host_id, exc_info=True)
            return None
        if doc is None or not scope.active:
            return None
        try:
            return decode_host(doc)
        except RecordDecodeError:
            log.warning("detail: malformed host profile %s", hobby.host_id)
            return None


def host_display_name(host: HostProfile | None) -> str:
    return (host.name if host else None) or HOST_PLACEHOLDER
