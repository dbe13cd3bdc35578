"""Error types for Cadence.

Startup configuration errors and cue failures are fatal; malformed
reconfiguration input is recoverable.
"""


class CadenceError(Exception):
    """Base exception for Cadence errors."""

    pass


class ConfigError(CadenceError):
    """Raised when the startup configuration is invalid."""

    pass


class ParameterError(CadenceError, ValueError):
    """Raised when a runtime parameter write is rejected."""

    pass


class ReconfigureError(CadenceError, ValueError):
    """Raised when a reconfiguration line cannot be parsed."""

    def __init__(self, message: str, line: str | None = None) -> None:
        """Initialize reconfiguration error.

        Args:
            message: Error message.
            line: The offending input line, if available.
        """
        super().__init__(message)
        self.line = line


class CueError(CadenceError):
    """Raised when an audio cue cannot be loaded, decoded or played."""

    def __init__(self, message: str, cue: str | None = None) -> None:
        """Initialize cue error.

        Args:
            message: Error message.
            cue: Name of the cue involved, if known.
        """
        super().__init__(message)
        self.cue = cue


__all__ = [
    "CadenceError",
    "ConfigError",
    "CueError",
    "ParameterError",
    "ReconfigureError",
]
