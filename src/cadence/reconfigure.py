"""Runtime reconfiguration from a line-oriented text stream.

Accepted lines:
- ``<lower> <upper>``: new micro-break bounds in minutes
- ``period <minutes>``: new work period length (from the next cycle)
- ``break <minutes>``: new break length (from the next break)

Malformed or rejected lines are logged and ignored; the parameter store
keeps its previous values.
"""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, TextIO

from .errors import ParameterError, ReconfigureError

if TYPE_CHECKING:
    from .scheduler.parameters import RuntimeParameters

logger = logging.getLogger(__name__)


class CommandKind(Enum):
    """Kinds of reconfiguration command."""

    BOUNDS = "bounds"
    PERIOD = "period"
    BREAK = "break"


@dataclass(frozen=True)
class ReconfigureCommand:
    """A parsed reconfiguration line."""

    kind: CommandKind
    values: tuple[int, ...]


def _parse_int(text: str, line: str) -> int:
    try:
        return int(text)
    except ValueError as e:
        raise ReconfigureError(f"Not an integer: {text!r}", line=line) from e


def parse_command(line: str) -> ReconfigureCommand:
    """Parse one reconfiguration line.

    Raises:
        ReconfigureError: If the line matches no accepted format
    """
    fields = line.split()
    if len(fields) != 2:
        raise ReconfigureError(
            "Expected '<lower> <upper>', 'period <minutes>' or 'break <minutes>'",
            line=line,
        )

    keyword = fields[0].lower()
    if keyword == CommandKind.PERIOD.value:
        return ReconfigureCommand(CommandKind.PERIOD, (_parse_int(fields[1], line),))
    if keyword == CommandKind.BREAK.value:
        return ReconfigureCommand(CommandKind.BREAK, (_parse_int(fields[1], line),))

    lower = _parse_int(fields[0], line)
    upper = _parse_int(fields[1], line)
    return ReconfigureCommand(CommandKind.BOUNDS, (lower, upper))


class ReconfigureListener:
    """Reads reconfiguration lines and applies them to the parameter store.

    Usage:
        listener = ReconfigureListener(params)
        listener.start()  # reads sys.stdin in a daemon thread
    """

    def __init__(
        self,
        params: RuntimeParameters,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize listener.

        Args:
            params: Parameter store to update
            stream: Line source (defaults to sys.stdin)
        """
        self._params = params
        self._stream = stream if stream is not None else sys.stdin
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._applied = 0
        self._rejected = 0

    @property
    def applied_count(self) -> int:
        """Get the number of lines applied."""
        return self._applied

    @property
    def rejected_count(self) -> int:
        """Get the number of lines ignored as malformed or invalid."""
        return self._rejected

    @property
    def is_running(self) -> bool:
        """Return True while the reader thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def handle_line(self, line: str) -> bool:
        """Parse and apply one line.

        Returns:
            True if the store was updated, False if the line was ignored
        """
        try:
            command = parse_command(line)
            if command.kind is CommandKind.BOUNDS:
                self._params.set_microbreak_bounds(*command.values)
            elif command.kind is CommandKind.PERIOD:
                self._params.set_period(command.values[0])
            else:
                self._params.set_break(command.values[0])
        except ReconfigureError as e:
            logger.warning(f"Ignoring malformed input {line.strip()!r}: {e}")
            self._rejected += 1
            return False
        except ParameterError as e:
            logger.warning(f"Ignoring rejected input {line.strip()!r}: {e}")
            self._rejected += 1
            return False

        self._applied += 1
        return True

    def start(self) -> None:
        """Start reading lines in a daemon thread (idempotent)."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._read_loop,
            daemon=True,
            name="cadence-reconfigure",
        )
        self._thread.start()
        logger.debug("Reconfiguration listener started")

    def stop(self) -> None:
        """Stop applying input.

        A reader blocked on the stream exits once the next line or EOF
        arrives; the thread is a daemon and never delays process exit.
        """
        self._stop_event.set()

    def _read_loop(self) -> None:
        for line in self._stream:
            if self._stop_event.is_set():
                break
            self.handle_line(line)
        logger.debug("Reconfiguration listener finished")


__all__ = [
    "CommandKind",
    "ReconfigureCommand",
    "ReconfigureListener",
    "parse_command",
]
