"""Mock audio playback for testing without an output device."""

import threading


class MockAudioPlayback:
    """Mock audio playback for testing.

    Records all audio that would be played for later verification.
    Implements the AudioPlayback protocol.
    """

    def __init__(self, sample_rate: int = 22050, fail: bool = False) -> None:
        """Initialize mock playback.

        Args:
            sample_rate: Output sample rate in Hz
            fail: If True, every play() raises RuntimeError
        """
        self._sample_rate = sample_rate
        self._fail = fail
        self._is_playing = False
        self._played_audio: list[tuple[bytes, int]] = []  # (audio, sample_rate) pairs
        self._lock = threading.Lock()

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Record audio that would be played (synchronous)."""
        if self._fail:
            raise RuntimeError("Mock output device failure")
        with self._lock:
            self._played_audio.append((audio, sample_rate))

    def stop(self) -> None:
        """Stop mock playback."""
        self._is_playing = False

    @property
    def is_playing(self) -> bool:
        """Return True if 'playing'."""
        return self._is_playing

    @property
    def sample_rate(self) -> int:
        """Get output sample rate."""
        return self._sample_rate

    @property
    def play_count(self) -> int:
        """Get number of times play was called."""
        with self._lock:
            return len(self._played_audio)

    @property
    def played_audio(self) -> bytes | None:
        """Get the last played audio bytes (convenience property)."""
        with self._lock:
            if not self._played_audio:
                return None
            return self._played_audio[-1][0]

    @property
    def all_played_audio(self) -> list[tuple[bytes, int]]:
        """Get list of all (audio, sample_rate) pairs that were played."""
        with self._lock:
            return self._played_audio.copy()

    def clear(self) -> None:
        """Clear recorded audio."""
        with self._lock:
            self._played_audio.clear()


__all__ = ["MockAudioPlayback"]
