"""PortAudio output backend using PyAudio.

Works on macOS, Linux and Raspberry Pi wherever PortAudio is installed.
"""

import threading
from typing import Any

# PyAudio import with fallback for type hints
try:
    import pyaudio

    PYAUDIO_AVAILABLE = True
except ImportError:
    PYAUDIO_AVAILABLE = False
    pyaudio = None

CHUNK_FRAMES = 1024


class PyAudioPlayback:
    """Audio playback using PyAudio.

    Implements the AudioPlayback protocol. Each play() call opens a fresh
    PortAudio session so that a device error in one cue does not leave a
    half-initialized stream behind.
    """

    def __init__(
        self,
        device_name: str = "default",
        sample_rate: int = 22050,
    ) -> None:
        """Initialize PyAudio playback.

        Args:
            device_name: Audio output device name or "default"
            sample_rate: Default output sample rate in Hz

        Raises:
            RuntimeError: If PyAudio is not available
        """
        if not PYAUDIO_AVAILABLE:
            raise RuntimeError(
                "PyAudio not available. Install with: pip install 'cadence[audio]'"
            )

        self._device_name = device_name
        self._sample_rate = sample_rate
        self._is_playing = False
        self._stop_flag = threading.Event()

    def _get_device_index(self, pa: Any) -> int | None:
        """Get device index for configured device name."""
        if self._device_name == "default":
            return None

        for i in range(pa.get_device_count()):
            info = pa.get_device_info_by_index(i)
            if self._device_name.lower() in info["name"].lower() and info["maxOutputChannels"] > 0:
                return i

        raise RuntimeError(f"Audio output device not found: {self._device_name}")

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Play audio synchronously."""
        self._is_playing = True
        self._stop_flag.clear()

        pa = pyaudio.PyAudio()
        try:
            device_index = self._get_device_index(pa)
            try:
                stream = pa.open(
                    format=pyaudio.paInt16,
                    channels=1,
                    rate=sample_rate,
                    output=True,
                    output_device_index=device_index,
                )
            except OSError as e:
                raise RuntimeError(f"Failed to open output device: {e}") from e

            try:
                for i in range(0, len(audio), CHUNK_FRAMES * 2):
                    if self._stop_flag.is_set():
                        break
                    stream.write(audio[i : i + CHUNK_FRAMES * 2])
            finally:
                stream.stop_stream()
                stream.close()
        finally:
            pa.terminate()
            self._is_playing = False

    def stop(self) -> None:
        """Stop current playback."""
        self._stop_flag.set()
        self._is_playing = False

    @property
    def is_playing(self) -> bool:
        """Return True if audio is playing."""
        return self._is_playing

    @property
    def sample_rate(self) -> int:
        """Get output sample rate."""
        return self._sample_rate


__all__ = ["PYAUDIO_AVAILABLE", "PyAudioPlayback"]
