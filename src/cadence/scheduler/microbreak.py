"""Micro-break supervisor.

Within one work period, repeatedly waits a random interval, plays the
micro-break start cue, holds for a few seconds, plays the end cue, and
starts over, until the period controller cancels its token.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import TYPE_CHECKING

from ..cues import CueType
from ..errors import ParameterError

if TYPE_CHECKING:
    from ..cues import CuePlayer
    from .cancellation import CancellationToken
    from .clock import Clock
    from .parameters import RuntimeParameters

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0
DEFAULT_HOLD_SECONDS = 12


def draw_wait_seconds(lower: int, upper: int, rng: random.Random) -> int:
    """Draw a micro-break wait uniformly from [lower*60, upper*60] seconds.

    Both ends are inclusive, so ``lower == upper`` always yields
    ``lower * 60``.

    Raises:
        ParameterError: If a bound is negative or lower > upper
    """
    if lower < 0 or upper < 0:
        raise ParameterError(f"Micro-break bounds must be non-negative, got {lower}-{upper}")
    if lower > upper:
        raise ParameterError(f"Micro-break lower bound {lower} exceeds upper bound {upper}")
    return lower * 60 + rng.randint(0, (upper - lower) * 60)


class MicrobreakSupervisor:
    """Runs randomized micro-breaks until cancelled.

    The supervisor never returns on its own; ``run`` exits only once it
    observes its token cancelled. Cancellation is checked before every
    one-second tick of a wait, never during cue playback. Cue failures
    propagate to the caller.
    """

    def __init__(
        self,
        params: RuntimeParameters,
        cues: CuePlayer,
        clock: Clock,
        hold_seconds: int = DEFAULT_HOLD_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            params: Shared runtime parameters (bounds read every iteration)
            cues: Cue player
            clock: Clock used for all waits
            hold_seconds: Length of each micro-break
            rng: Random source, injectable for tests
        """
        self._params = params
        self._cues = cues
        self._clock = clock
        self._hold_seconds = hold_seconds
        self._rng = rng if rng is not None else random.Random()
        self._completed = 0
        self._lock = threading.Lock()

    @property
    def microbreaks_completed(self) -> int:
        """Get the number of micro-breaks that played both cues."""
        with self._lock:
            return self._completed

    def run(self, token: CancellationToken) -> None:
        """Supervise micro-breaks until token is cancelled."""
        while True:
            lower, upper = self._params.get_microbreak_bounds()
            wait_seconds = draw_wait_seconds(lower, upper, self._rng)
            logger.info(f"Next micro-break in {lower} to {upper} minutes")
            logger.debug(f"Micro-break wait drawn: {wait_seconds}s")

            if not self._wait_ticks(token, wait_seconds):
                logger.info("Micro-break supervisor stopped")
                return

            logger.info("Micro-break: take a deep breath or close your eyes")
            self._cues.play(CueType.MICROBREAK_START)

            if not self._wait_ticks(token, self._hold_seconds):
                logger.info("Micro-break supervisor stopped")
                return

            logger.info("Micro-break over")
            self._cues.play(CueType.MICROBREAK_END)
            with self._lock:
                self._completed += 1

    def _wait_ticks(self, token: CancellationToken, seconds: int) -> bool:
        """Wait seconds in one-second ticks.

        Returns:
            False as soon as the token is observed cancelled, else True
        """
        for _ in range(seconds):
            if token.is_cancelled():
                return False
            if self._clock.wait(token, TICK_SECONDS):
                return False
        return not token.is_cancelled()


__all__ = [
    "DEFAULT_HOLD_SECONDS",
    "MicrobreakSupervisor",
    "TICK_SECONDS",
    "draw_wait_seconds",
]
