"""
Unit tests for the adaptive pacing engine.

Covers the control loop (speed up, slow down, dead zone, error penalty),
commit smoothing, phase/difficulty derivation and the clamps.
"""

import pytest

from axon.adaptive.engine import (
    AdaptiveConfig,
    AdaptiveEngine,
    AdaptivePhase,
    difficulty_for,
    phase_for_speed,
)
from axon.core.errors import ConfigurationError
from axon.core.modes import MiniGameType


def fast(engine: AdaptiveEngine) -> int:
    """10% of the allowed time: always below the speed-up threshold."""
    return int(engine.allowed_time_ms * 0.1)


class TestPhaseAndDifficulty:
    @pytest.mark.parametrize(
        "speed, phase",
        [
            (0.5, AdaptivePhase.WARMUP),
            (1.19, AdaptivePhase.WARMUP),
            (1.2, AdaptivePhase.RAMPING),
            (1.49, AdaptivePhase.RAMPING),
            (1.5, AdaptivePhase.OVERDRIVE),
            (2.5, AdaptivePhase.OVERDRIVE),
        ],
    )
    def test_phase_breakpoints(self, speed, phase):
        assert phase_for_speed(speed) == phase

    def test_difficulty_adds_phase_bonus(self):
        assert difficulty_for(1.0, AdaptivePhase.WARMUP) == 4
        assert difficulty_for(1.2, AdaptivePhase.RAMPING) == 5
        assert difficulty_for(2.0, AdaptivePhase.OVERDRIVE) == 10

    def test_difficulty_is_clamped(self):
        assert difficulty_for(2.5, AdaptivePhase.OVERDRIVE) == 10
        assert difficulty_for(0.1, AdaptivePhase.WARMUP) == 1


class TestControlLoop:
    def test_fast_answers_commit_every_third(self):
        engine = AdaptiveEngine()

        engine.process_answer(True, fast(engine))
        state = engine.process_answer(True, fast(engine))
        assert state.game_speed == 1.0
        assert state.pending_speed == pytest.approx(1.05)
        assert state.answers_since_commit == 2

        state = engine.process_answer(True, fast(engine))
        assert state.game_speed == pytest.approx(1.05)
        assert state.answers_since_commit == 0
        assert state.questions_answered == 3

    def test_ten_fast_answers(self):
        engine = AdaptiveEngine()
        speeds = [engine.process_answer(True, fast(engine)).game_speed for _ in range(10)]

        assert speeds[2] == pytest.approx(1.05)
        assert speeds[5] == pytest.approx(1.10)
        assert speeds[8] == pytest.approx(1.15)
        assert speeds[9] == pytest.approx(1.15)

    def test_sustained_fast_play_reaches_each_phase_and_caps(self):
        engine = AdaptiveEngine()
        seen = {}
        for _ in range(120):
            state = engine.process_answer(True, fast(engine))
            seen.setdefault(state.phase, state.game_speed)
            assert 0.5 <= state.game_speed <= 2.5

        assert seen[AdaptivePhase.RAMPING] == pytest.approx(1.2)
        assert seen[AdaptivePhase.OVERDRIVE] == pytest.approx(1.5)
        assert engine.state.game_speed == 2.5
        assert engine.state.peak_game_speed == 2.5

    def test_slow_correct_answers_slow_down(self):
        engine = AdaptiveEngine()
        for _ in range(3):
            state = engine.process_answer(True, 4500)
        assert state.game_speed == pytest.approx(0.95)

    def test_dead_zone_keeps_speed(self):
        engine = AdaptiveEngine()
        for _ in range(6):
            state = engine.process_answer(True, 2500)
        assert state.game_speed == 1.0

    def test_wrong_answer_commits_penalty_immediately(self):
        engine = AdaptiveEngine()
        engine.process_answer(True, fast(engine))

        state = engine.process_answer(False, 100)

        assert state.game_speed == pytest.approx(0.9)
        assert state.answers_since_commit == 0
        assert state.phase == AdaptivePhase.WARMUP
        assert state.difficulty == 3

    def test_penalty_respects_min_speed(self):
        engine = AdaptiveEngine(AdaptiveConfig(min_speed=0.5))
        for _ in range(20):
            state = engine.process_answer(False, 0)
        assert state.game_speed == 0.5

    def test_peak_survives_penalty(self):
        engine = AdaptiveEngine()
        for _ in range(3):
            engine.process_answer(True, fast(engine))
        state = engine.process_answer(False, 0)

        assert state.game_speed == pytest.approx(0.945)
        assert state.peak_game_speed == pytest.approx(1.05)

    def test_negative_latency_is_clamped(self):
        engine = AdaptiveEngine()
        for _ in range(3):
            state = engine.process_answer(True, -250)
        assert state.game_speed == pytest.approx(1.05)
        assert engine.average_response_ms == 0.0

    def test_difficulty_always_in_range(self):
        engine = AdaptiveEngine()
        pattern = [True, True, False, True, True, True, False, False, True]
        for i in range(200):
            state = engine.process_answer(pattern[i % len(pattern)], (i * 137) % 6000)
            assert 1 <= state.difficulty <= 10
            assert state.phase == phase_for_speed(state.game_speed)


class TestHelpers:
    def test_per_game_base_time(self):
        engine = AdaptiveEngine()
        assert engine.allowed_time_ms == 5000

        engine.set_current_game(MiniGameType.SPEED_MATH)
        assert engine.allowed_time_ms == 10000

        engine.set_current_game(MiniGameType.SUIT_DECEPTION)
        assert engine.allowed_time_ms == 5000

    def test_average_response_ignores_wrong_answers(self):
        engine = AdaptiveEngine()
        engine.process_answer(True, 1000)
        engine.process_answer(False, 9000)
        engine.process_answer(True, 2000)
        assert engine.average_response_ms == 1500

    def test_response_window_is_bounded(self):
        engine = AdaptiveEngine(AdaptiveConfig(response_window=2))
        for ms in (100, 2000, 3000):
            engine.process_answer(True, ms)
        assert engine.average_response_ms == 2500

    def test_session_duration(self, clock):
        engine = AdaptiveEngine(clock=clock)
        clock.advance(12.7)
        assert engine.session_duration_sec() == 12

    def test_state_is_a_snapshot(self):
        engine = AdaptiveEngine()
        snapshot = engine.state
        snapshot.game_speed = 2.0
        assert engine.state.game_speed == 1.0

    def test_reset(self, clock):
        engine = AdaptiveEngine(clock=clock)
        engine.set_current_game(MiniGameType.CUBE_COUNT)
        for _ in range(9):
            engine.process_answer(True, 0)
        clock.advance(30)

        engine.reset()
        state = engine.state

        assert state.game_speed == 1.0
        assert state.phase == AdaptivePhase.WARMUP
        assert state.difficulty == 1
        assert state.questions_answered == 0
        assert state.session_start_time == clock.now
        assert engine.current_game is None
        assert engine.average_response_ms == 0.0

    def test_config_from_settings(self):
        from config import Settings

        settings = Settings(adaptive_commit_interval=5, adaptive_max_speed=2.0)
        cfg = AdaptiveConfig.from_settings(settings)
        assert cfg.commit_interval == 5
        assert cfg.max_speed == 2.0
        assert cfg.base_time_for(MiniGameType.FLASH_MEMORY) == 12000

    @pytest.mark.parametrize(
        "overrides",
        [
            {"min_speed": 0},
            {"min_speed": -0.5},
            {"min_speed": 3.0, "max_speed": 2.5},
            {"commit_interval": 0},
            {"base_time_ms": 0},
        ],
    )
    def test_unusable_tunables_are_rejected(self, overrides):
        with pytest.raises(ConfigurationError):
            AdaptiveConfig(**overrides)

    def test_settings_reject_zero_min_speed(self):
        from pydantic import ValidationError

        from config import Settings

        with pytest.raises(ValidationError):
            Settings(adaptive_min_speed=0)
