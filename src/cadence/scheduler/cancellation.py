"""Cancellation token shared between the period controller and supervisors."""

from __future__ import annotations

import threading
from datetime import UTC, datetime


class CancellationToken:
    """One-shot, many-observer stop signal.

    Only the owner (the period controller) cancels a token; any number of
    threads may poll it or block on it.
    """

    def __init__(self) -> None:
        """Initialize an uncancelled token."""
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: str | None = None
        self._cancelled_at: datetime | None = None

    def cancel(self, reason: str = "requested") -> None:
        """Mark token as cancelled and wake blocked observers (idempotent)."""
        with self._lock:
            if self._event.is_set():
                return
            self._reason = reason
            self._cancelled_at = datetime.now(UTC)
            self._event.set()

    def is_cancelled(self) -> bool:
        """Return True if cancellation was requested."""
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or until timeout seconds pass.

        Returns:
            True if the token is cancelled.
        """
        return self._event.wait(timeout)

    @property
    def reason(self) -> str | None:
        """Return the reason given to the first cancel() call."""
        return self._reason

    @property
    def cancelled_at(self) -> datetime | None:
        """Return when the token was cancelled."""
        return self._cancelled_at

    def __repr__(self) -> str:
        state = f"cancelled ({self._reason})" if self.is_cancelled() else "active"
        return f"CancellationToken({state})"


__all__ = ["CancellationToken"]
