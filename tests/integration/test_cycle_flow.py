"""Integration tests for full work/rest cycles.

Runs the real controller and supervisor on a compressed wall clock
(one simulated second = 10ms) against mock audio.
"""

import io
import random
import time

import pytest

from cadence.audio.mock_playback import MockAudioPlayback
from cadence.config import AudioConfig, CadenceConfig, ScheduleConfig
from cadence.cues import CueType
from cadence.cues.player import MockCuePlayer, SoundCuePlayer
from cadence.reconfigure import ReconfigureListener
from cadence.scheduler import PeriodController, RuntimeParameters, SystemClock

TIME_SCALE = 0.01


@pytest.fixture
def config() -> CadenceConfig:
    """Create a one-minute schedule with immediate micro-breaks."""
    return CadenceConfig(
        schedule=ScheduleConfig(
            period_minutes=1,
            break_minutes=1,
            lower_minutes=0,
            upper_minutes=0,
            hold_seconds=12,
        )
    )


@pytest.mark.slow
class TestCycleFlow:
    """End-to-end cycle behavior."""

    def test_one_cycle_with_back_to_back_microbreaks(self, config: CadenceConfig) -> None:
        """Test micro-break pairs until the period ends, then the end cue and break."""
        params = RuntimeParameters.from_config(config.schedule)
        cues = MockCuePlayer()
        clock = SystemClock(scale=TIME_SCALE)
        controller = PeriodController.from_config(config, params, cues, clock, rng=random.Random(0))

        start = time.monotonic()
        assert controller.run(cycles=1) == 1
        elapsed = time.monotonic() - start

        # 60s period + 60s break, compressed
        assert elapsed >= 1.2 * 0.9

        thread = controller.supervisor_thread
        assert thread is not None
        thread.join(timeout=2.0)
        assert not thread.is_alive()

        events = cues.events
        assert events[0] is CueType.CYCLE_START
        assert CueType.CYCLE_END in events

        before_end = events[: events.index(CueType.CYCLE_END)]
        # 60s period with 12s holds leaves room for at least one pair
        assert before_end.count(CueType.MICROBREAK_START) >= 1

        # Supervisor is gone: no further cues appear
        settled = len(cues.events)
        time.sleep(0.1)
        assert len(cues.events) == settled

    def test_two_cycles_restart_supervisor(self, config: CadenceConfig) -> None:
        """Test that each cycle starts a new supervisor thread."""
        params = RuntimeParameters.from_config(config.schedule)
        cues = MockCuePlayer()
        controller = PeriodController.from_config(config, params, cues, SystemClock(scale=TIME_SCALE))

        controller.run(cycles=2)

        events = cues.events
        assert events.count(CueType.CYCLE_START) == 2
        assert events.count(CueType.CYCLE_END) == 2

        thread = controller.supervisor_thread
        assert thread is not None
        assert thread.name == "cadence-microbreak-2"

    def test_reconfiguration_applies_to_next_draw(self, config: CadenceConfig) -> None:
        """Test that new bounds from the listener stop immediate micro-breaks."""
        params = RuntimeParameters.from_config(config.schedule)
        cues = MockCuePlayer()
        controller = PeriodController.from_config(config, params, cues, SystemClock(scale=TIME_SCALE))

        # Widen the window beyond the period before the run starts
        listener = ReconfigureListener(params, stream=io.StringIO("abc\n5 7\n"))
        listener.start()
        assert listener._thread is not None
        listener._thread.join(timeout=2.0)

        controller.run(cycles=1)

        assert params.get_microbreak_bounds() == (5, 7)
        assert cues.events == [CueType.CYCLE_START, CueType.CYCLE_END]

    def test_sound_cues_through_mock_device(self, config: CadenceConfig) -> None:
        """Test the full stack down to the audio device with serialized playback."""
        playback = MockAudioPlayback(sample_rate=8000)
        audio_config = AudioConfig(sample_rate=8000, serialize_playback=True)
        cues = SoundCuePlayer(playback, config.cues, audio_config)
        params = RuntimeParameters.from_config(config.schedule)
        controller = PeriodController.from_config(config, params, cues, SystemClock(scale=TIME_SCALE))

        controller.run(cycles=1)

        # Start and end cues plus at least one micro-break pair
        assert playback.play_count >= 4
