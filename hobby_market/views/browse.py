from __future__ import annotations

import logging

from hobby_market.core.errors import RecordDecodeError
from hobby_market.core.firebase import FirebaseHandle
from hobby_market.schemas.views import BrowseState
from hobby_market.services.store import decode_hobby
from hobby_market.views.scope import ScopedView

log = logging.getLogger(__name__)

TITLE = "Browse immersive hobbies"
SUBTITLE = "Curated sessions from makers, movers, and mentors. Minimal, premium, and built for focus."
EMPTY_TITLE = "No active hobbies yet"
EMPTY_MESSAGE = "Hosts will appear here once they publish. Check back soon."
ERROR_MESSAGE = "Unable to load hobbies. Please try again."


class BrowseView(ScopedView):
    """Active hobbies, newest first."""

    def __init__(self, firebase: FirebaseHandle) -> None:
        super().__init__()
        self._firebase = firebase
        self.state = BrowseState()

    async def load(self) -> BrowseState:
        scope = self._remount()
        self.state = BrowseState(state="loading")

        try:
            docs = await self._firebase.store.list_active_hobbies()
            if not scope.active:
                return self.state
            hobbies = [decode_hobby(doc) for doc in docs]
        except RecordDecodeError as e:
            log.exception("browse: malformed hobby %s", e.doc_id)
            if scope.active:
                self.state = BrowseState(state="error", message=ERROR_MESSAGE, error_kind="decode")
            return self.state
        except Exception:
            log.exception("browse: hobby query failed")
            if scope.active:
                self.state = BrowseState(state="error", message=ERROR_MESSAGE, error_kind="network")
            return self.state

        # the query already filters on isActive; keep inactive rows out regardless
        hobbies = [h for h in hobbies if h.is_active]
        # an empty result is still ready; it carries the empty-state message
        self.state = BrowseState(state="ready", hobbies=hobbies, message=None if hobbies else EMPTY_MESSAGE)
        return self.state
