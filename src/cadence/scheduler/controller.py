"""Period controller.

Top-level driver of the work/rest loop. Each cycle plays the start cue,
runs a micro-break supervisor in a background thread for the length of the
work period, cancels it, plays the end cue and rests.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import TYPE_CHECKING

from ..cues import CueType
from .cancellation import CancellationToken
from .microbreak import MicrobreakSupervisor

if TYPE_CHECKING:
    from ..config import CadenceConfig
    from ..cues import CuePlayer
    from .clock import Clock
    from .parameters import RuntimeParameters

logger = logging.getLogger(__name__)

# Upper bound on waiting for the last supervisor after a bounded run
FINAL_JOIN_SECONDS = 2.0


class PeriodController:
    """Runs work/rest cycles with a supervised micro-break thread.

    The controller owns each cycle's cancellation token and is the only
    party that cancels it. After cancelling it does not wait for the
    supervisor to exit unless ``supervisor_join_timeout`` is positive, so a
    trailing micro-break cue may overlap the cycle-end cue.

    A failure inside the supervisor thread wakes the controller and is
    re-raised from ``run``; there is no per-thread isolation or retry.
    """

    def __init__(
        self,
        params: RuntimeParameters,
        cues: CuePlayer,
        clock: Clock,
        supervisor: MicrobreakSupervisor | None = None,
        supervisor_join_timeout: float = 0.0,
    ) -> None:
        """Initialize the controller.

        Args:
            params: Shared runtime parameters
            cues: Cue player
            clock: Clock used for period and break waits
            supervisor: Micro-break supervisor (built from params if None)
            supervisor_join_timeout: Seconds to wait for the supervisor to
                exit after cancelling it; 0 means do not wait
        """
        self._params = params
        self._cues = cues
        self._clock = clock
        self._supervisor = supervisor or MicrobreakSupervisor(params, cues, clock)
        self._join_timeout = supervisor_join_timeout

        self._halt = CancellationToken()
        self._lock = threading.Lock()
        self._token: CancellationToken | None = None
        self._thread: threading.Thread | None = None
        self._failure: Exception | None = None
        self._cycles_completed = 0

    @classmethod
    def from_config(
        cls,
        config: CadenceConfig,
        params: RuntimeParameters,
        cues: CuePlayer,
        clock: Clock,
        rng: random.Random | None = None,
    ) -> PeriodController:
        """Create a controller and its supervisor from configuration."""
        supervisor = MicrobreakSupervisor(
            params,
            cues,
            clock,
            hold_seconds=config.schedule.hold_seconds,
            rng=rng,
        )
        return cls(
            params,
            cues,
            clock,
            supervisor=supervisor,
            supervisor_join_timeout=config.schedule.supervisor_join_timeout,
        )

    @property
    def cycles_completed(self) -> int:
        """Get the number of full cycles completed."""
        with self._lock:
            return self._cycles_completed

    @property
    def supervisor_thread(self) -> threading.Thread | None:
        """Get the handle of the most recently started supervisor thread."""
        with self._lock:
            return self._thread

    @property
    def is_stopped(self) -> bool:
        """Return True once stop() was called or a fatal error occurred."""
        return self._halt.is_cancelled()

    def run(self, cycles: int | None = None) -> int:
        """Run cycles until stopped.

        Args:
            cycles: Number of cycles to run, or None to run forever

        Returns:
            Number of cycles completed

        Raises:
            CueError: If any cue fails, in this thread or the supervisor's
        """
        completed = 0
        try:
            while cycles is None or completed < cycles:
                if self._halt.is_cancelled() or not self.run_cycle(completed + 1):
                    break
                completed += 1
        finally:
            with self._lock:
                token = self._token
            if token is not None:
                token.cancel("controller exited")

        if cycles is not None and not self._halt.is_cancelled():
            # The last supervisor may still be finishing a cue
            self._join_supervisor(FINAL_JOIN_SECONDS)
        self._raise_if_failed()
        return completed

    def run_cycle(self, number: int = 1) -> bool:
        """Run one work/rest cycle.

        Returns:
            True if the cycle completed, False if the controller was stopped
        """
        logger.info(f"Cycle {number} started")
        self._cues.play(CueType.CYCLE_START)

        token = CancellationToken()
        self._start_supervisor(token, number)

        period = self._params.get_period()
        logger.info(f"{period} minutes remaining in work period")
        halted = self._clock.wait(self._halt, period * 60)

        logger.info("Signalling micro-break supervisor to stop")
        token.cancel("controller stopped" if halted else "period ended")
        if self._join_timeout > 0:
            self._join_supervisor(self._join_timeout)
        self._raise_if_failed()
        if halted:
            return False

        logger.info(f"Cycle {number} finished")
        self._cues.play(CueType.CYCLE_END)

        rest = self._params.get_break()
        logger.info(f"{rest} minutes remaining in break")
        halted = self._clock.wait(self._halt, rest * 60)
        self._raise_if_failed()
        if halted:
            return False

        logger.info("Break over")
        with self._lock:
            self._cycles_completed += 1
        return True

    def stop(self) -> None:
        """Stop the loop and the active supervisor (idempotent)."""
        logger.info("Stop requested")
        self._halt.cancel("stop requested")
        with self._lock:
            token = self._token
        if token is not None:
            token.cancel("controller stopped")

    def _start_supervisor(self, token: CancellationToken, number: int) -> None:
        thread = threading.Thread(
            target=self._supervise,
            args=(token,),
            daemon=True,
            name=f"cadence-microbreak-{number}",
        )
        with self._lock:
            self._token = token
            self._thread = thread
        thread.start()

    def _supervise(self, token: CancellationToken) -> None:
        """Supervisor thread body; records failures and wakes the controller."""
        try:
            self._supervisor.run(token)
        except Exception as e:
            logger.error(f"Micro-break supervisor failed: {e}")
            with self._lock:
                if self._failure is None:
                    self._failure = e
            self._halt.cancel("supervisor failed")

    def _join_supervisor(self, timeout: float) -> None:
        thread = self.supervisor_thread
        if thread is None:
            return
        thread.join(timeout=timeout)
        if thread.is_alive():
            logger.warning(f"Micro-break supervisor still running after {timeout}s")

    def _raise_if_failed(self) -> None:
        with self._lock:
            failure = self._failure
        if failure is not None:
            raise failure


__all__ = ["PeriodController"]
