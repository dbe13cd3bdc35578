"""Audio playback protocol.

Defines the interface for audio output that all backends must follow.
"""

from typing import Protocol


class AudioPlayback(Protocol):
    """Interface for audio output playback.

    Backends (PyAudio, mock) implement this protocol so the cue player
    does not depend on a particular output library.
    """

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Play audio data synchronously.

        Blocks until playback is complete.

        Args:
            audio: Raw PCM audio bytes (16-bit, mono)
            sample_rate: Sample rate in Hz

        Raises:
            RuntimeError: If playback fails
        """
        ...

    def stop(self) -> None:
        """Stop current playback.

        Safe to call even if nothing is playing.
        """
        ...

    @property
    def is_playing(self) -> bool:
        """Return True if audio is currently playing."""
        ...

    @property
    def sample_rate(self) -> int:
        """Get the configured output sample rate in Hz."""
        ...


__all__ = ["AudioPlayback"]
