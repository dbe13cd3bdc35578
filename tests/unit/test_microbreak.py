"""Unit tests for the micro-break supervisor."""

import random

import pytest

from cadence.cues import CueType
from cadence.cues.player import MockCuePlayer
from cadence.errors import CueError, ParameterError
from cadence.scheduler.cancellation import CancellationToken
from cadence.scheduler.clock import MockClock
from cadence.scheduler.microbreak import MicrobreakSupervisor, draw_wait_seconds
from cadence.scheduler.parameters import RuntimeParameters


class TestDrawWaitSeconds:
    """Tests for the randomized wait draw."""

    def test_degenerate_range(self) -> None:
        """Test that lower == upper always yields lower * 60."""
        rng = random.Random(1)
        assert {draw_wait_seconds(5, 5, rng) for _ in range(200)} == {300}

    def test_zero_range(self) -> None:
        """Test that 0-0 yields an immediate micro-break."""
        rng = random.Random(2)
        assert draw_wait_seconds(0, 0, rng) == 0

    def test_draws_within_closed_range(self) -> None:
        """Test that 5-7 minutes yields values in [300, 420]."""
        rng = random.Random(3)
        draws = [draw_wait_seconds(5, 7, rng) for _ in range(2000)]

        assert min(draws) >= 300
        assert max(draws) <= 420
        # Both ends are reachable
        assert len(set(draws)) > 100

    def test_endpoints_inclusive(self) -> None:
        """Test that both ends of a one-second range are drawn."""
        rng = random.Random(4)
        # (upper - lower) * 60 == 60, so 61 possible values
        draws = {draw_wait_seconds(1, 2, rng) for _ in range(5000)}
        assert 60 in draws
        assert 120 in draws

    @pytest.mark.parametrize("lower,upper", [(-1, 3), (3, -1), (7, 5)])
    def test_invalid_bounds_rejected(self, lower: int, upper: int) -> None:
        """Test that invalid bounds raise instead of drawing."""
        with pytest.raises(ParameterError):
            draw_wait_seconds(lower, upper, random.Random())


class TestMicrobreakSupervisor:
    """Tests for the supervisor loop."""

    @pytest.fixture
    def clock(self) -> MockClock:
        """Create a simulated clock."""
        return MockClock()

    def test_cancel_during_wait_plays_nothing(self, clock: MockClock) -> None:
        """Test that cancellation during the wait stops before any cue."""
        params = RuntimeParameters(lower_minutes=5, upper_minutes=5)
        cues = MockCuePlayer()
        token = CancellationToken()
        clock.call_at(150, token.cancel)

        MicrobreakSupervisor(params, cues, clock).run(token)

        assert cues.events == []
        assert clock.now == 150

    def test_cancel_observed_within_one_second(self, clock: MockClock) -> None:
        """Test that a mid-tick cancellation is observed in under a second."""
        params = RuntimeParameters(lower_minutes=5, upper_minutes=5)
        token = CancellationToken()
        clock.call_at(150.5, token.cancel)

        MicrobreakSupervisor(params, MockCuePlayer(), clock).run(token)

        assert clock.now - 150.5 < 1.0

    def test_cancel_during_hold_skips_end_cue(self, clock: MockClock) -> None:
        """Test that cancellation during the hold suppresses the end cue."""
        params = RuntimeParameters(lower_minutes=1, upper_minutes=1)
        cues = MockCuePlayer()
        token = CancellationToken()
        clock.call_at(65, token.cancel)

        MicrobreakSupervisor(params, cues, clock, hold_seconds=12).run(token)

        assert cues.events == [CueType.MICROBREAK_START]
        assert clock.now == 65

    def test_back_to_back_pairs_until_cancelled(self, clock: MockClock) -> None:
        """Test repeated start/end pairs with a zero-length window."""
        params = RuntimeParameters(lower_minutes=0, upper_minutes=0)
        token = CancellationToken()

        def cancel_after_three(cue: CueType) -> None:
            if cue is CueType.MICROBREAK_END and cues.count(CueType.MICROBREAK_END) == 3:
                token.cancel()

        cues = MockCuePlayer(on_play=cancel_after_three)
        supervisor = MicrobreakSupervisor(params, cues, clock, hold_seconds=12)
        supervisor.run(token)

        assert cues.events == [CueType.MICROBREAK_START, CueType.MICROBREAK_END] * 3
        assert supervisor.microbreaks_completed == 3
        assert clock.now == 36

    def test_bounds_read_fresh_each_iteration(self, clock: MockClock) -> None:
        """Test that a reconfiguration applies to the next draw only."""
        params = RuntimeParameters(lower_minutes=1, upper_minutes=1)
        token = CancellationToken()
        start_times: list[float] = []

        def on_play(cue: CueType) -> None:
            if cue is CueType.MICROBREAK_START:
                start_times.append(clock.now)
                if len(start_times) == 2:
                    token.cancel()
            elif cue is CueType.MICROBREAK_END:
                params.set_microbreak_bounds(2, 2)

        cues = MockCuePlayer(on_play=on_play)
        MicrobreakSupervisor(params, cues, clock, hold_seconds=12).run(token)

        # 60s wait, 12s hold, then the new 120s wait
        assert start_times == [60, 192]

    def test_cue_failure_propagates(self, clock: MockClock) -> None:
        """Test that a cue failure escapes run()."""
        params = RuntimeParameters(lower_minutes=0, upper_minutes=0)
        cues = MockCuePlayer(fail_on=[CueType.MICROBREAK_START])

        with pytest.raises(CueError):
            MicrobreakSupervisor(params, cues, clock).run(CancellationToken())

    def test_already_cancelled_token_returns_immediately(self, clock: MockClock) -> None:
        """Test that a pre-cancelled token stops the supervisor at once."""
        params = RuntimeParameters(lower_minutes=1, upper_minutes=2)
        cues = MockCuePlayer()
        token = CancellationToken()
        token.cancel()

        MicrobreakSupervisor(params, cues, clock).run(token)

        assert cues.events == []
        assert clock.now == 0
