"""Clock and sleep primitives.

Every delay in the scheduler goes through a Clock so that the schedule can
run in real time, compressed time (``SystemClock(scale=...)``) or simulated
time (``MockClock``) for tests.
"""

from __future__ import annotations

import heapq
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .cancellation import CancellationToken


class Clock(Protocol):
    """Interface for blocking delays."""

    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        ...

    def wait(self, token: CancellationToken, seconds: float) -> bool:
        """Block for up to seconds, returning early if token is cancelled.

        Returns:
            True if the token is cancelled.
        """
        ...


class SystemClock:
    """Wall-clock implementation of the Clock protocol.

    Args:
        scale: Multiplier applied to every delay. 1.0 is real time; the
            test profile uses small values to compress a whole cycle into
            seconds.
    """

    def __init__(self, scale: float = 1.0) -> None:
        if scale <= 0:
            raise ValueError(f"Time scale must be positive, got {scale}")
        self._scale = scale

    @property
    def scale(self) -> float:
        """Get the delay multiplier."""
        return self._scale

    def sleep(self, seconds: float) -> None:
        """Sleep for the scaled duration."""
        if seconds > 0:
            time.sleep(seconds * self._scale)

    def wait(self, token: CancellationToken, seconds: float) -> bool:
        """Wait on the token for the scaled duration."""
        return token.wait(max(0.0, seconds) * self._scale)


class MockClock:
    """Simulated clock for testing.

    Never blocks. Delays advance a shared simulated time, and callbacks
    registered with ``call_at`` fire when simulated time reaches them.
    """

    def __init__(self, start: float = 0.0) -> None:
        """Initialize mock clock.

        Args:
            start: Initial simulated time in seconds
        """
        self._now = start
        self._lock = threading.Lock()
        self._pending: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = 0
        self._delays: list[float] = []

    @property
    def now(self) -> float:
        """Get the current simulated time in seconds."""
        with self._lock:
            return self._now

    @property
    def delays(self) -> list[float]:
        """Get every delay requested so far, in call order."""
        with self._lock:
            return self._delays.copy()

    def call_at(self, when: float, callback: Callable[[], None]) -> None:
        """Run callback once simulated time reaches when."""
        with self._lock:
            heapq.heappush(self._pending, (when, self._seq, callback))
            self._seq += 1

    def sleep(self, seconds: float) -> None:
        """Advance simulated time."""
        with self._lock:
            self._delays.append(seconds)
        self._advance(max(0.0, seconds), None)

    def wait(self, token: CancellationToken, seconds: float) -> bool:
        """Advance simulated time, stopping at the callback that cancels token."""
        if token.is_cancelled():
            return True
        with self._lock:
            self._delays.append(seconds)
        self._advance(max(0.0, seconds), token)
        return token.is_cancelled()

    def _advance(self, seconds: float, token: CancellationToken | None) -> None:
        with self._lock:
            target = self._now + seconds

        while True:
            with self._lock:
                if not self._pending or self._pending[0][0] > target:
                    self._now = max(self._now, target)
                    return
                when, _, callback = heapq.heappop(self._pending)
                self._now = max(self._now, when)

            # Callbacks may touch the clock, so run them unlocked
            callback()
            if token is not None and token.is_cancelled():
                return


__all__ = ["Clock", "MockClock", "SystemClock"]
