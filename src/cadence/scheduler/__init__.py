"""Interval scheduling for Cadence.

The period controller drives work/rest cycles; during each work period a
micro-break supervisor runs in its own thread until the controller cancels
its token. Shared parameters live in a lock-guarded store.
"""

from .cancellation import CancellationToken
from .clock import Clock, MockClock, SystemClock
from .controller import PeriodController
from .microbreak import MicrobreakSupervisor, draw_wait_seconds
from .parameters import ParameterSnapshot, RuntimeParameters

__all__ = [
    "CancellationToken",
    "Clock",
    "MicrobreakSupervisor",
    "MockClock",
    "ParameterSnapshot",
    "PeriodController",
    "RuntimeParameters",
    "SystemClock",
    "draw_wait_seconds",
]
