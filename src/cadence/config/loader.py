"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
"""

from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigError
from . import (
    AudioConfig,
    CadenceConfig,
    CuesConfig,
    LoggingConfig,
    ScheduleConfig,
    TestingConfig,
)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    # Handle inheritance
    if "extends" in config:
        base_name = config.pop("extends")
        base_path = path.parent / base_name
        base_config = load_yaml_with_inheritance(base_path)
        config = deep_merge(base_config, config)

    return config


def dict_to_config(data: dict[str, Any]) -> CadenceConfig:
    """Convert raw dict to typed CadenceConfig dataclass.

    Raises:
        ConfigError: If a section contains unknown keys
    """
    cadence_data = data.get("cadence", {}) or {}

    # Helper to safely get dict values (handles None from YAML)
    def safe_get(key: str) -> dict[str, Any]:
        value = cadence_data.get(key, {})
        return value if value is not None else {}

    try:
        return CadenceConfig(
            schedule=ScheduleConfig(**safe_get("schedule")),
            audio=AudioConfig(**safe_get("audio")),
            cues=_parse_cues_config(safe_get("cues")),
            logging=LoggingConfig(**safe_get("logging")),
            testing=TestingConfig(**safe_get("testing")),
        )
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _parse_cues_config(data: dict[str, Any]) -> CuesConfig:
    """Parse cues config, handling nested sounds dict."""
    sounds = data.get("sounds") or {}
    return CuesConfig(
        sounds_dir=data.get("sounds_dir"),
        sounds={str(key): str(value) for key, value in sounds.items()},
    )


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self._config_dir = config_dir

    def load(self, path: Path) -> CadenceConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed CadenceConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return dict_to_config(raw_config)

    def load_profile(self, profile: str) -> CadenceConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod', 'test')

        Returns:
            Parsed CadenceConfig for the profile
        """
        config_path = self._config_dir / f"{profile}.yaml"
        return self.load(config_path)

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> CadenceConfig:
    """Load Cadence configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod', 'test') if path not given

    Returns:
        Parsed CadenceConfig; built-in defaults when neither is given

    Examples:
        >>> config = load_config(profile="test")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    elif profile is not None:
        return loader.load_profile(profile)
    else:
        return CadenceConfig()


__all__ = [
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
