"""Audio cue playback.

Cues come from:
- WAV files configured per cue (16-bit mono PCM)
- Built-in synthesized chimes (when no file is configured)

Unlike best-effort UI feedback, a cue that cannot be loaded or played is
fatal, so every failure surfaces as CueError.
"""

import contextlib
import logging
import math
import struct
import threading
import wave
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import CueError
from . import CueType

if TYPE_CHECKING:
    from ..audio.playback import AudioPlayback
    from ..config import AudioConfig, CuesConfig

logger = logging.getLogger(__name__)

# Built-in chimes as (frequency Hz, duration ms) notes
CHIME_NOTES: dict[CueType, list[tuple[int, int]]] = {
    CueType.CYCLE_START: [(523, 150), (659, 150), (784, 300)],  # C5 E5 G5, rising
    CueType.CYCLE_END: [(784, 200), (659, 200), (523, 450)],  # G5 E5 C5, falling
    CueType.MICROBREAK_START: [(880, 120), (0, 80), (880, 120)],  # A5 double tap
    CueType.MICROBREAK_END: [(523, 150), (659, 150), (784, 300)],
}

NOTE_GAP_MS = 30


def generate_tone(frequency: int, duration_ms: int, sample_rate: int = 22050) -> bytes:
    """Generate a simple sine wave tone.

    Args:
        frequency: Tone frequency in Hz (0 yields silence)
        duration_ms: Duration in milliseconds
        sample_rate: Sample rate in Hz

    Returns:
        Raw PCM audio bytes (16-bit mono)
    """
    num_samples = int(sample_rate * duration_ms / 1000)
    if frequency <= 0:
        return bytes(num_samples * 2)

    audio_data = []
    attack_samples = int(sample_rate * 0.01)  # 10ms attack
    release_samples = int(sample_rate * 0.01)  # 10ms release

    for i in range(num_samples):
        t = i / sample_rate
        # Envelope avoids clicks at note edges
        envelope = 1.0
        if i < attack_samples:
            envelope = i / attack_samples
        elif i > num_samples - release_samples:
            envelope = (num_samples - i) / release_samples

        sample = int(32767 * 0.5 * envelope * math.sin(2 * math.pi * frequency * t))
        audio_data.append(struct.pack("<h", sample))

    return b"".join(audio_data)


def generate_chime(notes: Iterable[tuple[int, int]], sample_rate: int = 22050) -> bytes:
    """Generate a sequence of tones separated by short gaps."""
    gap = generate_tone(0, NOTE_GAP_MS, sample_rate)
    return gap.join(generate_tone(freq, ms, sample_rate) for freq, ms in notes)


def apply_volume(audio: bytes, volume: float, base: float = 2.0) -> bytes:
    """Scale 16-bit PCM samples by ``base ** volume``.

    A volume of 0 leaves the audio untouched; negative values attenuate.
    Samples are clipped to the 16-bit range.
    """
    if volume == 0:
        return audio

    gain = base**volume
    count = len(audio) // 2
    samples = struct.unpack(f"<{count}h", audio[: count * 2])
    scaled = (max(-32768, min(32767, int(s * gain))) for s in samples)
    return struct.pack(f"<{count}h", *scaled)


def load_wav_file(path: Path) -> tuple[bytes, int]:
    """Load a WAV file and return audio data and sample rate.

    Args:
        path: Path to WAV file

    Returns:
        Tuple of (audio_bytes, sample_rate)

    Raises:
        CueError: If the file is missing, unreadable or not 16-bit mono PCM
    """
    if not path.exists():
        raise CueError(f"Cue file not found: {path}")

    try:
        with wave.open(str(path), "rb") as wf:
            if wf.getsampwidth() != 2 or wf.getnchannels() != 1:
                raise CueError(
                    f"Unsupported WAV format in {path}: "
                    f"{wf.getnchannels()} channel(s), {wf.getsampwidth() * 8}-bit "
                    "(expected 16-bit mono)"
                )
            sample_rate = wf.getframerate()
            audio_data = wf.readframes(wf.getnframes())
    except (wave.Error, EOFError, OSError) as e:
        raise CueError(f"Failed to decode cue file {path}: {e}") from e

    return audio_data, sample_rate


class SoundCuePlayer:
    """Plays cues through an AudioPlayback device.

    Every cue is loaded at construction so that a missing or broken file
    is reported before the first cycle starts.
    """

    def __init__(
        self,
        playback: "AudioPlayback",
        cues_config: "CuesConfig | None" = None,
        audio_config: "AudioConfig | None" = None,
    ) -> None:
        """Initialize cue player.

        Args:
            playback: AudioPlayback instance for playing sounds
            cues_config: Cue file configuration
            audio_config: Volume and playback serialization settings

        Raises:
            CueError: If a configured cue file cannot be loaded
        """
        self._playback = playback
        self._sounds_dir: Path | None = None
        self._sound_files: dict[CueType, str] = {}
        self._cache: dict[CueType, tuple[bytes, int]] = {}

        volume = -2.0
        volume_base = 2.0
        serialize = False
        if audio_config is not None:
            volume = audio_config.volume
            volume_base = audio_config.volume_base
            serialize = audio_config.serialize_playback

        if cues_config is not None:
            if cues_config.sounds_dir:
                self._sounds_dir = Path(cues_config.sounds_dir).expanduser()
            for key, filename in cues_config.sounds.items():
                try:
                    cue = CueType(key)
                except ValueError as e:
                    raise CueError(f"Unknown cue name in config: {key!r}") from e
                if filename:
                    self._sound_files[cue] = filename

        # Off by default: overlapping cues from the controller and a
        # trailing micro-break are left to the audio device
        self._play_lock: threading.Lock | None = threading.Lock() if serialize else None

        self._preload_sounds(volume, volume_base)

    def _preload_sounds(self, volume: float, volume_base: float) -> None:
        """Load or synthesize every cue into the cache."""
        for cue in CueType:
            filename = self._sound_files.get(cue)
            if filename is None and cue is CueType.MICROBREAK_END:
                filename = self._sound_files.get(CueType.CYCLE_START)
            if filename is not None:
                path = Path(filename).expanduser()
                if not path.is_absolute() and self._sounds_dir is not None:
                    path = self._sounds_dir / path
                audio_data, sample_rate = load_wav_file(path)
                logger.debug(f"Loaded cue '{cue.value}' from {path}")
            else:
                sample_rate = self._playback.sample_rate
                audio_data = generate_chime(CHIME_NOTES[cue], sample_rate)

            self._cache[cue] = (apply_volume(audio_data, volume, volume_base), sample_rate)

    def play(self, cue: CueType) -> None:
        """Play the cue and block until it finishes."""
        audio_data, sample_rate = self._cache[cue]
        guard = self._play_lock if self._play_lock is not None else contextlib.nullcontext()

        try:
            with guard:
                self._playback.play(audio_data, sample_rate)
        except Exception as e:
            raise CueError(f"Failed to play cue '{cue.value}': {e}", cue=cue.value) from e

    @property
    def serializes_playback(self) -> bool:
        """Return True if cue playback is serialized across threads."""
        return self._play_lock is not None


class MockCuePlayer:
    """Mock cue player for testing.

    Records every cue without playing sound. Thread-safe so that the
    controller and supervisor threads can share one instance.
    """

    def __init__(
        self,
        on_play: Callable[[CueType], None] | None = None,
        fail_on: Iterable[CueType] = (),
    ) -> None:
        """Initialize mock cue player.

        Args:
            on_play: Optional hook called after each cue is recorded
            fail_on: Cues that raise CueError instead of playing
        """
        self._on_play = on_play
        self._fail_on = frozenset(fail_on)
        self._events: list[CueType] = []
        self._lock = threading.Lock()

    def play(self, cue: CueType) -> None:
        """Record cue, or raise CueError if configured to fail on it."""
        if cue in self._fail_on:
            raise CueError(f"Simulated failure playing '{cue.value}'", cue=cue.value)
        with self._lock:
            self._events.append(cue)
        if self._on_play is not None:
            self._on_play(cue)

    @property
    def events(self) -> list[CueType]:
        """Get list of recorded cues."""
        with self._lock:
            return self._events.copy()

    def count(self, cue: CueType) -> int:
        """Get how many times cue was played."""
        with self._lock:
            return self._events.count(cue)

    def clear(self) -> None:
        """Clear recorded cues."""
        with self._lock:
            self._events.clear()


__all__ = [
    "CHIME_NOTES",
    "MockCuePlayer",
    "SoundCuePlayer",
    "apply_volume",
    "generate_chime",
    "generate_tone",
    "load_wav_file",
]
