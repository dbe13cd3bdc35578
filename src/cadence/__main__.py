"""Cadence entry point.

Usage:
    python -m cadence [OPTIONS]

Options:
    -p, --period MIN    Work period length in minutes
    -b, --break MIN     Break length in minutes
    -l, --lower MIN     Lower bound of the micro-break wait
    -u, --upper MIN     Upper bound of the micro-break wait
    --config PATH       Path to YAML config file
    --profile NAME      Profile name (dev, prod, test)
    --help              Show this help message
    --version           Show version
"""

import argparse
import logging
import signal
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv

from . import __version__
from .audio import create_audio_playback
from .config import CadenceConfig, validate_config
from .config.loader import load_config
from .config.profiles import Profile, detect_profile
from .cues.player import SoundCuePlayer
from .errors import ConfigError, CueError
from .reconfigure import ReconfigureListener
from .scheduler import PeriodController, RuntimeParameters, SystemClock

logger = logging.getLogger("cadence")


def load_environment() -> None:
    """Load .env from the project root, falling back to the working directory."""
    project_root = Path(__file__).parent.parent.parent
    env_file = project_root / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        load_dotenv()


def setup_logging(level: str, fmt: str | None = None) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=fmt or "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="cadence",
        description="Cadence - work/rest interval timer with randomized micro-breaks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cadence                      # 90 min work, 20 min break
  python -m cadence -p 50 -b 10          # Custom period and break
  python -m cadence -l 3 -u 6            # Micro-breaks every 3-6 minutes
  python -m cadence --profile test       # Compressed schedule, mock audio

While running, type "<lower> <upper>" (e.g. "4 8") and press Enter to
change the micro-break window, or "period N" / "break N" to change the
next cycle's lengths.

Environment:
  CADENCE_PROFILE    Set profile (dev, prod, test)
""",
    )

    parser.add_argument("-p", "--period", dest="period_minutes", type=int, metavar="MIN",
                        help="Work period length in minutes (default: 90)")
    parser.add_argument("-b", "--break", dest="break_minutes", type=int, metavar="MIN",
                        help="Break length in minutes (default: 20)")
    parser.add_argument("-l", "--lower", dest="lower_minutes", type=int, metavar="MIN",
                        help="Lower bound of the micro-break wait in minutes (default: 5)")
    parser.add_argument("-u", "--upper", dest="upper_minutes", type=int, metavar="MIN",
                        help="Upper bound of the micro-break wait in minutes (default: 7)")

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=[p.value for p in Profile],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--mock-audio",
        action="store_true",
        help="Record cues instead of playing them (for testing without hardware)",
    )

    parser.add_argument(
        "--time-scale",
        type=float,
        metavar="FACTOR",
        help="Multiply every delay by FACTOR (e.g. 0.01 to compress a run)",
    )

    parser.add_argument(
        "--cycles",
        type=int,
        metavar="N",
        help="Exit after N cycles instead of running forever",
    )

    parser.add_argument(
        "--no-stdin",
        action="store_true",
        help="Do not read reconfiguration commands from standard input",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load and validate config, then exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Cadence v{__version__}",
    )

    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> CadenceConfig:
    """Load the configuration and apply command line overrides.

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the config file is malformed
    """
    if args.config:
        config = load_config(path=args.config)
    elif args.profile:
        config = load_config(profile=args.profile)
    else:
        profile = detect_profile()
        config = load_config(profile=profile.value) if profile else load_config()

    schedule = config.schedule
    for name in ("period_minutes", "break_minutes", "lower_minutes", "upper_minutes"):
        value = getattr(args, name)
        if value is not None:
            setattr(schedule, name, value)

    if args.time_scale is not None:
        config.testing.time_scale = args.time_scale
    if args.mock_audio:
        config.testing.mock_audio_enabled = True
    if args.log_level:
        config.logging.level = args.log_level

    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Cadence.

    Returns:
        Exit code (0 on external termination or after --cycles, 1 on errors)
    """
    load_environment()
    args = parse_args(argv)

    try:
        config = resolve_config(args)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except (ConfigError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level, config.logging.format)

    try:
        validate_config(config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    schedule = config.schedule
    logger.info(f"Cadence v{__version__}")
    logger.info(
        f"Period {schedule.period_minutes} min, break {schedule.break_minutes} min, "
        f"micro-breaks every {schedule.lower_minutes}-{schedule.upper_minutes} min"
    )

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        return 0

    try:
        playback = create_audio_playback(config.audio, use_mock=config.testing.mock_audio_enabled)
        cues = SoundCuePlayer(playback, config.cues, config.audio)
    except (RuntimeError, CueError) as e:
        logger.error(f"Failed to initialize audio: {e}")
        return 1

    params = RuntimeParameters.from_config(schedule)
    clock = SystemClock(scale=config.testing.time_scale)
    controller = PeriodController.from_config(config, params, cues, clock)

    listener: ReconfigureListener | None = None
    if not args.no_stdin:
        listener = ReconfigureListener(params)
        listener.start()
        print('Type "<lower> <upper>" and press Enter to change the micro-break window.')

    stop_requests = 0

    def signal_handler(_signum: int, _frame: object) -> None:
        nonlocal stop_requests
        stop_requests += 1
        if stop_requests > 1:
            logger.warning("Force quit requested")
            sys.exit(1)
        controller.stop()

    previous_handlers = {
        sig: signal.signal(sig, signal_handler) for sig in (signal.SIGINT, signal.SIGTERM)
    }

    try:
        controller.run(cycles=args.cycles)
    except CueError as e:
        logger.error(f"Audio cue failed: {e}")
        return 1
    finally:
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)
        if listener is not None:
            listener.stop()
        if not controller.is_stopped:
            controller.stop()

    logger.info(f"Cadence stopped after {controller.cycles_completed} cycle(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
