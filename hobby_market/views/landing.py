from __future__ import annotations

import logging
from dataclasses import dataclass

from hobby_market.core.errors import NotSignedInError, PublishValidationError
from hobby_market.core.firebase import AuthEvent, FirebaseHandle
from hobby_market.schemas.hobby import HobbyPublish
from hobby_market.schemas.session import SessionUser
from hobby_market.schemas.views import PublishStatus
from hobby_market.services.publish_service import publish_hobby
from hobby_market.views.scope import ScopedView

log = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Hobby published."
FAILURE_MESSAGE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class Feature:
    title: str
    copy: str
    icon: str


FEATURES = (
    Feature("Frameless onboarding", "Google sign-in with automatic host profile creation and role upgrades.", "⚡"),
    Feature("Curated listings", "Structured hobby cards with host identity, pricing, and availability flags.", "🎟️"),
    Feature("Host-grade reliability", "Firestore-backed writes with server timestamps and merge-safe role updates.", "🛡️"),
)


@dataclass(frozen=True)
class UserDisplay:
    name: str
    email: str
    photo_url: str


def user_display(user: SessionUser | None) -> UserDisplay:
    if user is None:
        return UserDisplay(name="Guest", email="", photo_url="")
    return UserDisplay(
        name=user.display_name or "Guest",
        email=user.email or "",
        photo_url=user.photo_url or "",
    )


class LandingView(ScopedView):
    """Marketing copy, session badge and the publish form."""

    def __init__(self, firebase: FirebaseHandle, user: SessionUser | None) -> None:
        super().__init__()
        self._firebase = firebase
        self.user = user
        self.form = HobbyPublish()
        self.status = PublishStatus()
        # session changes are followed only while the view is mounted
        self._unsubscribe = firebase.on_auth_change(self._on_auth_change)

    def _on_auth_change(self, event: AuthEvent) -> None:
        # events are process-wide; only this view's own session may touch it
        if self.user is None or event.user.uid != self.user.uid:
            return
        self.user = event.user if event.kind == "signed_in" else None

    def unmount(self) -> None:
        super().unmount()
        self._unsubscribe()

    @property
    def display(self) -> UserDisplay:
        return user_display(self.user)

    async def submit(self, form: HobbyPublish) -> PublishStatus:
        scope = self._remount()
        self.form = form
        self.status = PublishStatus(type="loading", message="Publishing...")

        try:
            hobby_id = await publish_hobby(self._firebase, user=self.user, form=form)
        except (NotSignedInError, PublishValidationError) as e:
            self.status = PublishStatus(type="error", message=e.message)
            return self.status
        except Exception:
            log.exception("publish failed for %s", self.user.uid if self.user else None)
            if scope.active:
                self.status = PublishStatus(type="error", message=FAILURE_MESSAGE)
            return self.status

        if scope.active:
            self.status = PublishStatus(type="success", message=SUCCESS_MESSAGE, hobby_id=hobby_id)
            self.form = HobbyPublish()
        return self.status
