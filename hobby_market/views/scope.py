"""Cancellation token for view loads.

A view opens a new scope each time it (re)loads and closes the previous one.
Fetches that finish after their scope closed are dropped instead of being
committed to view state; the underlying request itself is not cancelled.
"""


class ViewScope:
    def __init__(self) -> None:
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        self._active = False


class ScopedView:
    """Base for views that own at most one live ViewScope."""

    def __init__(self) -> None:
        self._scope: ViewScope | None = None

    def _remount(self) -> ViewScope:
        if self._scope is not None:
            self._scope.close()
        self._scope = ViewScope()
        return self._scope

    def unmount(self) -> None:
        if self._scope is not None:
            self._scope.close()
            self._scope = None
