"""Configuration module for Cadence.

This module provides the configuration dataclasses, validation, and
re-exports of the loader and profile helpers.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..errors import ConfigError


@dataclass
class ScheduleConfig:
    """Work/rest schedule configuration (minutes unless noted)."""

    period_minutes: int = 90
    break_minutes: int = 20
    lower_minutes: int = 5
    upper_minutes: int = 7
    hold_seconds: int = 12
    supervisor_join_timeout: float = 0.0  # 0 = do not wait for the supervisor


@dataclass
class AudioConfig:
    """Audio output configuration."""

    output_device: str = "default"
    sample_rate: int = 22050
    volume: float = -2.0  # Exponent applied to volume_base; negative attenuates
    volume_base: float = 2.0
    serialize_playback: bool = False


@dataclass
class CuesConfig:
    """Cue sound file configuration.

    ``sounds`` maps cue names (start, finish, replay, replay_end) to WAV
    files, relative to ``sounds_dir`` unless absolute. Cues without a file
    use the built-in chimes.
    """

    sounds_dir: str | None = None
    sounds: dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class TestingConfig:
    """Testing configuration."""

    __test__ = False  # Not a pytest test class

    mock_audio_enabled: bool = False
    time_scale: float = 1.0


@dataclass
class CadenceConfig:
    """Main Cadence configuration."""

    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    cues: CuesConfig = field(default_factory=CuesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    testing: TestingConfig = field(default_factory=TestingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> CadenceConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> CadenceConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: CadenceConfig) -> None:
    """Check the startup configuration.

    Raises:
        ConfigError: On mistyped or negative durations, invalid micro-break
            bounds, a non-positive time scale, or unusable audio settings
    """
    schedule = config.schedule
    for name in (
        "period_minutes",
        "break_minutes",
        "lower_minutes",
        "upper_minutes",
        "hold_seconds",
    ):
        value = getattr(schedule, name)
        if not _is_integer(value):
            raise ConfigError(f"schedule.{name} must be an integer, got {value!r}")
        if value < 0:
            raise ConfigError(f"schedule.{name} must be non-negative, got {value}")

    if schedule.lower_minutes > schedule.upper_minutes:
        raise ConfigError(
            f"schedule.lower_minutes ({schedule.lower_minutes}) exceeds "
            f"schedule.upper_minutes ({schedule.upper_minutes})"
        )

    timeout = schedule.supervisor_join_timeout
    if not _is_number(timeout) or timeout < 0:
        raise ConfigError(
            f"schedule.supervisor_join_timeout must be a non-negative number, got {timeout!r}"
        )

    scale = config.testing.time_scale
    if not _is_number(scale) or scale <= 0:
        raise ConfigError(f"testing.time_scale must be a positive number, got {scale!r}")

    audio = config.audio
    if not _is_integer(audio.sample_rate) or audio.sample_rate <= 0:
        raise ConfigError(f"audio.sample_rate must be a positive integer, got {audio.sample_rate!r}")
    if not _is_number(audio.volume):
        raise ConfigError(f"audio.volume must be a number, got {audio.volume!r}")
    if not _is_number(audio.volume_base) or audio.volume_base <= 0:
        raise ConfigError(f"audio.volume_base must be a positive number, got {audio.volume_base!r}")


# Public API
__all__ = [
    "AudioConfig",
    "CadenceConfig",
    "ConfigLoader",
    "CuesConfig",
    "LoggingConfig",
    "ScheduleConfig",
    "TestingConfig",
    "validate_config",
]
