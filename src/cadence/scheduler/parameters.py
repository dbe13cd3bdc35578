"""Runtime parameter store.

Holds the period length, break length and micro-break bounds shared by the
period controller, the micro-break supervisor and the reconfiguration
listener. All access is serialized by a single lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import ParameterError

if TYPE_CHECKING:
    from ..config import ScheduleConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterSnapshot:
    """Consistent view of every runtime parameter (minutes)."""

    period_minutes: int
    break_minutes: int
    lower_minutes: int
    upper_minutes: int


def _check_minutes(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParameterError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ParameterError(f"{name} must be non-negative, got {value}")
    return value


def _check_bounds(lower: int, upper: int) -> tuple[int, int]:
    _check_minutes("lower bound", lower)
    _check_minutes("upper bound", upper)
    if lower > upper:
        raise ParameterError(f"lower bound {lower} exceeds upper bound {upper}")
    return lower, upper


class RuntimeParameters:
    """Thread-safe store for the schedule parameters.

    Invalid writes raise ParameterError and leave the stored values
    untouched; ``lower > upper`` is rejected rather than clamped.
    """

    def __init__(
        self,
        period_minutes: int = 90,
        break_minutes: int = 20,
        lower_minutes: int = 5,
        upper_minutes: int = 7,
    ) -> None:
        """Initialize the store.

        Args:
            period_minutes: Work period length
            break_minutes: Rest length
            lower_minutes: Lower bound of the micro-break wait range
            upper_minutes: Upper bound of the micro-break wait range

        Raises:
            ParameterError: If any value is invalid
        """
        self._period = _check_minutes("period", period_minutes)
        self._break = _check_minutes("break", break_minutes)
        self._lower, self._upper = _check_bounds(lower_minutes, upper_minutes)
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ScheduleConfig) -> RuntimeParameters:
        """Create a store seeded from schedule configuration."""
        return cls(
            period_minutes=config.period_minutes,
            break_minutes=config.break_minutes,
            lower_minutes=config.lower_minutes,
            upper_minutes=config.upper_minutes,
        )

    def get_period(self) -> int:
        """Get the work period length in minutes."""
        with self._lock:
            return self._period

    def get_break(self) -> int:
        """Get the rest length in minutes."""
        with self._lock:
            return self._break

    def get_microbreak_bounds(self) -> tuple[int, int]:
        """Get the (lower, upper) micro-break bounds in minutes."""
        with self._lock:
            return self._lower, self._upper

    def snapshot(self) -> ParameterSnapshot:
        """Get all parameters as one consistent snapshot."""
        with self._lock:
            return ParameterSnapshot(
                period_minutes=self._period,
                break_minutes=self._break,
                lower_minutes=self._lower,
                upper_minutes=self._upper,
            )

    def set_microbreak_bounds(self, lower: int, upper: int) -> None:
        """Replace both micro-break bounds atomically.

        Raises:
            ParameterError: If either bound is negative or lower > upper
        """
        lower, upper = _check_bounds(lower, upper)
        with self._lock:
            self._lower, self._upper = lower, upper
        logger.info(f"Micro-break window set to {lower}-{upper} minutes")

    def set_period(self, minutes: int) -> None:
        """Replace the work period length (applies from the next cycle)."""
        minutes = _check_minutes("period", minutes)
        with self._lock:
            self._period = minutes
        logger.info(f"Work period set to {minutes} minutes")

    def set_break(self, minutes: int) -> None:
        """Replace the rest length (applies from the next break)."""
        minutes = _check_minutes("break", minutes)
        with self._lock:
            self._break = minutes
        logger.info(f"Break set to {minutes} minutes")


__all__ = ["ParameterSnapshot", "RuntimeParameters"]
