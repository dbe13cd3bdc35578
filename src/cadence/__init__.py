"""Cadence - work/rest interval timer with randomized micro-breaks.

Cadence plays audio cues:
- at the start and end of every work period
- around short micro-breaks drawn at random inside each work period

Usage:
    python -m cadence --period 90 --break 20
    python -m cadence --profile test
"""

__version__ = "0.1.0"

from .config import CadenceConfig
from .config.loader import load_config

__all__ = [
    "CadenceConfig",
    "__version__",
    "load_config",
]
