"""Audio output module for Cadence.

Provides blocking audio playback behind a small protocol so cues can be
played on a real device or recorded by a mock.

Usage:
    playback = create_audio_playback(config.audio)

    # For testing, use the mock implementation
    from cadence.audio.mock_playback import MockAudioPlayback
"""

from typing import TYPE_CHECKING

from .playback import AudioPlayback

if TYPE_CHECKING:
    from ..config import AudioConfig


def create_audio_playback(
    config: "AudioConfig | None" = None,
    use_mock: bool = False,
) -> AudioPlayback:
    """Create an audio playback instance.

    Args:
        config: Audio configuration (uses defaults if None)
        use_mock: If True, return mock implementation for testing

    Returns:
        AudioPlayback implementation

    Raises:
        RuntimeError: If no suitable audio backend is available
    """
    device_name = "default"
    sample_rate = 22050

    if config is not None:
        device_name = config.output_device
        sample_rate = config.sample_rate

    if use_mock:
        from .mock_playback import MockAudioPlayback

        return MockAudioPlayback(sample_rate=sample_rate)

    from .backends.pyaudio_backend import PyAudioPlayback

    return PyAudioPlayback(device_name=device_name, sample_rate=sample_rate)


__all__ = [
    "AudioPlayback",
    "create_audio_playback",
]
