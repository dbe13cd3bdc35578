"""Configuration profile management.

Profiles select one of the YAML files shipped in ``config/``.
"""

import os
from enum import Enum
from pathlib import Path

PROFILE_ENV_VAR = "CADENCE_PROFILE"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def detect_profile() -> Profile | None:
    """Detect the configuration profile from the environment.

    Returns:
        Profile named by CADENCE_PROFILE, or None if unset or unknown
    """
    env_profile = os.environ.get(PROFILE_ENV_VAR, "").strip().lower()
    for profile in Profile:
        if profile.value == env_profile:
            return profile
    return None


def get_profile_path(profile: Profile, config_dir: Path | None = None) -> Path:
    """Get path to profile configuration file.

    Args:
        profile: Profile to use
        config_dir: Configuration directory, or None for default

    Returns:
        Path to profile YAML file
    """
    if config_dir is None:
        # Default: config/ relative to project root
        config_dir = Path(__file__).parent.parent.parent.parent / "config"

    return config_dir / f"{profile.value}.yaml"


__all__ = [
    "PROFILE_ENV_VAR",
    "Profile",
    "detect_profile",
    "get_profile_path",
]
