"""Audio cue module for Cadence.

Provides the named cues played at cycle boundaries and around
micro-breaks.
"""

from enum import Enum
from typing import Protocol


class CueType(Enum):
    """Named audio cues."""

    CYCLE_START = "start"
    CYCLE_END = "finish"
    MICROBREAK_START = "replay"
    MICROBREAK_END = "replay_end"  # Same sound as CYCLE_START unless overridden


class CuePlayer(Protocol):
    """Interface for playing audio cues.

    Implementations block until the cue has finished playing and raise
    CueError on any load, decode or playback failure.
    """

    def play(self, cue: CueType) -> None:
        """Play the cue synchronously.

        Args:
            cue: The cue to play

        Raises:
            CueError: If the cue cannot be played
        """
        ...


__all__ = [
    "CuePlayer",
    "CueType",
]
