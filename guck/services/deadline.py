"""Deadline and cancellation token passed into the diff engine."""

import threading
import time
from typing import Any, Dict, Optional

from ..exceptions import Cancelled


class Deadline:
    """Optional time limit plus an explicit cancel flag for one request.

    Comparators call ``check()`` between steps and hand ``git_kwargs()`` to
    GitPython so that a long running git subprocess is killed once the
    remaining time runs out.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._expires_at = (
            time.monotonic() + timeout if timeout is not None else None
        )
        self._cancel_event = threading.Event()

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set() or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when there is no time limit."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def check(self) -> None:
        if self._cancel_event.is_set():
            raise Cancelled("Diff computation was cancelled")
        if self.expired:
            raise Cancelled(f"Diff computation exceeded {self.timeout} seconds")

    def git_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for GitPython command calls."""
        remaining = self.remaining()
        if remaining is None:
            return {}
        return {"kill_after_timeout": remaining}
