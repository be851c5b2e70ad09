from __future__ import annotations

import logging

from hobby_market.core.firebase import AuthEvent

log = logging.getLogger("hobby_market.audit")


def audit_auth_event(event: AuthEvent) -> None:
    # uid only; email and tokens stay out of the logs
    log.info("auth.%s uid=%s", event.kind, event.user.uid)
