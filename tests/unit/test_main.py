"""Unit tests for the command line entry point."""

import signal
from pathlib import Path

import pytest
import yaml

from cadence.__main__ import main, parse_args, resolve_config


@pytest.fixture(autouse=True)
def no_profile_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CADENCE_PROFILE from leaking into tests."""
    monkeypatch.delenv("CADENCE_PROFILE", raising=False)


class TestParseArgs:
    """Tests for argument parsing."""

    def test_short_flags(self) -> None:
        """Test -p/-b/-l/-u short options."""
        args = parse_args(["-p", "50", "-b", "10", "-l", "3", "-u", "6"])
        assert (args.period_minutes, args.break_minutes) == (50, 10)
        assert (args.lower_minutes, args.upper_minutes) == (3, 6)

    def test_long_flags(self) -> None:
        """Test long options."""
        args = parse_args(["--period", "25", "--break", "5", "--lower", "1", "--upper", "2"])
        assert (args.period_minutes, args.break_minutes) == (25, 5)
        assert (args.lower_minutes, args.upper_minutes) == (1, 2)

    def test_unset_flags_are_none(self) -> None:
        """Test that omitted options do not override config."""
        args = parse_args([])
        assert args.period_minutes is None
        assert args.cycles is None

    def test_non_integer_period_exits(self) -> None:
        """Test that argparse rejects a non-integer period."""
        with pytest.raises(SystemExit):
            parse_args(["-p", "ten"])


class TestResolveConfig:
    """Tests for merging config and flags."""

    def test_flags_override_defaults(self) -> None:
        """Test that flags replace config values."""
        config = resolve_config(parse_args(["-p", "45", "-u", "9", "--mock-audio", "--time-scale", "0.5"]))
        assert config.schedule.period_minutes == 45
        assert config.schedule.break_minutes == 20
        assert config.schedule.upper_minutes == 9
        assert config.testing.mock_audio_enabled is True
        assert config.testing.time_scale == 0.5

    def test_profile_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that CADENCE_PROFILE selects a profile."""
        monkeypatch.setenv("CADENCE_PROFILE", "test")
        config = resolve_config(parse_args([]))
        assert config.testing.mock_audio_enabled is True


class TestMainExitCodes:
    """Tests for process exit codes."""

    def test_dry_run(self) -> None:
        """Test that a valid config exits 0 in dry-run mode."""
        assert main(["--dry-run"]) == 0

    def test_negative_period(self) -> None:
        """Test that a negative period is a startup error."""
        assert main(["-p", "-5", "--dry-run"]) == 1

    def test_negative_break(self) -> None:
        """Test that a negative break is a startup error."""
        assert main(["-b", "-1", "--dry-run"]) == 1

    def test_inverted_bounds(self) -> None:
        """Test that lower > upper is a startup error."""
        assert main(["-l", "8", "-u", "3", "--dry-run"]) == 1

    def test_missing_config_file(self, tmp_path: Path) -> None:
        """Test that a missing config file exits 1."""
        assert main(["--config", str(tmp_path / "missing.yaml")]) == 1

    def test_missing_cue_file(self, tmp_path: Path) -> None:
        """Test that an unloadable cue file exits 1 before the loop."""
        config_path = tmp_path / "cues.yaml"
        config_path.write_text(
            yaml.dump(
                {
                    "cadence": {
                        "cues": {"sounds_dir": str(tmp_path), "sounds": {"start": "missing.wav"}},
                        "testing": {"mock_audio_enabled": True},
                    }
                }
            )
        )

        assert main(["--config", str(config_path), "--no-stdin"]) == 1

    def test_compressed_run(self) -> None:
        """Test a full compressed cycle with mock audio."""
        before = signal.getsignal(signal.SIGINT)

        assert main(["--profile", "test", "--no-stdin", "--cycles", "1"]) == 0

        # Signal handlers are restored afterwards
        assert signal.getsignal(signal.SIGINT) is before

    @pytest.mark.parametrize("hold", [10.5, "12"])
    def test_mistyped_hold_seconds(self, tmp_path: Path, hold: object) -> None:
        """Test that a non-integer hold time is a startup error."""
        config_path = tmp_path / "hold.yaml"
        config_path.write_text(
            yaml.dump(
                {
                    "cadence": {
                        "schedule": {"hold_seconds": hold},
                        "testing": {"mock_audio_enabled": True},
                    }
                }
            )
        )

        assert main(["--config", str(config_path), "--no-stdin", "--cycles", "1"]) == 1

    def test_zero_volume_base(self, tmp_path: Path) -> None:
        """Test that a zero volume base is a startup error."""
        config_path = tmp_path / "volume.yaml"
        config_path.write_text(
            yaml.dump(
                {
                    "cadence": {
                        "audio": {"volume_base": 0, "volume": -2.0},
                        "testing": {"mock_audio_enabled": True},
                    }
                }
            )
        )

        assert main(["--config", str(config_path), "--no-stdin", "--cycles", "1"]) == 1
