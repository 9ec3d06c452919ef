"""
Adaptive Pacing Engine.

Converts every answer's correctness and latency into a game speed, a coarse
pacing phase and a 1-10 difficulty level.

Control loop:
1. allowed_time = base_time / speed
2. Wrong answer  -> flat multiplicative penalty (latency ignored)
3. Correct answer -> response_ratio = latency / allowed_time
   - ratio < speed_up_threshold   -> speed up by one increment
   - ratio > slow_down_threshold  -> slow down by one decrement
   - otherwise                    -> dead zone, no change
4. Smoothing: a candidate speed is committed every `commit_interval`
   answers, or immediately on a wrong answer
5. phase and difficulty are derived from the committed speed

Phases:
    warmup    speed < 1.2
    ramping   1.2 <= speed < 1.5
    overdrive speed >= 1.5
"""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum

from loguru import logger

from axon.core.errors import ConfigurationError
from axon.core.modes import MiniGameType


class AdaptivePhase(str, Enum):
    """Coarse pacing bucket derived from game speed."""

    WARMUP = "warmup"
    RAMPING = "ramping"
    OVERDRIVE = "overdrive"


RAMPING_SPEED = 1.2
OVERDRIVE_SPEED = 1.5

PHASE_BONUS = {
    AdaptivePhase.WARMUP: 0,
    AdaptivePhase.RAMPING: 1,
    AdaptivePhase.OVERDRIVE: 2,
}

# Per-game thinking time budgets (ms) at speed 1.0
GAME_BASE_TIMES: dict[MiniGameType, int] = {
    MiniGameType.SPEED_MATH: 10000,  # Mental math needs thinking time
    MiniGameType.COLOR_MATCH: 5000,  # Reaction-based, should be snappy
    MiniGameType.FLASH_MEMORY: 12000,  # Memorization phase included
    MiniGameType.PARADOX_FLOW: 7000,
    MiniGameType.PATTERN_HUNTER: 8000,
    MiniGameType.OPERATOR_CHAOS: 10000,
    MiniGameType.SPATIAL_STACK: 9000,
    MiniGameType.WORD_CONNECT: 8000,
    MiniGameType.SUIT_DECEPTION: 5000,
    MiniGameType.CHIMP_MEMORY: 10000,
    MiniGameType.CUBE_COUNT: 8000,
}

# Committed speeds are rounded so repeated increments never drift across a breakpoint
SPEED_PRECISION = 4


def phase_for_speed(speed: float) -> AdaptivePhase:
    """Map a game speed to its pacing phase."""
    if speed < RAMPING_SPEED:
        return AdaptivePhase.WARMUP
    if speed < OVERDRIVE_SPEED:
        return AdaptivePhase.RAMPING
    return AdaptivePhase.OVERDRIVE


def difficulty_for(speed: float, phase: AdaptivePhase) -> int:
    """Difficulty level (1-10): 1.0 -> 4, 2.0 -> 8 (+ phase bonus)."""
    base_level = math.floor(speed * 4)
    return min(10, max(1, base_level + PHASE_BONUS[phase]))


@dataclass
class AdaptiveConfig:
    """Tunables for the pacing control loop."""

    base_time_ms: int = 5000
    min_speed: float = 0.5
    max_speed: float = 2.5
    speed_up_threshold: float = 0.30  # Faster than 30% of allowed time = speed up
    slow_down_threshold: float = 0.80  # Slower than 80% = slow down
    speed_increment: float = 0.05
    speed_decrement: float = 0.05
    error_penalty: float = 0.90  # Multiply speed by this on error
    commit_interval: int = 3
    response_window: int = 5
    game_base_times: dict[MiniGameType, int] = field(default_factory=lambda: dict(GAME_BASE_TIMES))

    def __post_init__(self):
        if self.min_speed <= 0:
            raise ConfigurationError(f"min_speed must be positive, got {self.min_speed}")
        if self.min_speed > self.max_speed:
            raise ConfigurationError(f"min_speed {self.min_speed} exceeds max_speed {self.max_speed}")
        if self.base_time_ms <= 0:
            raise ConfigurationError(f"base_time_ms must be positive, got {self.base_time_ms}")
        if self.commit_interval < 1:
            raise ConfigurationError(f"commit_interval must be at least 1, got {self.commit_interval}")

    @classmethod
    def from_settings(cls, settings=None) -> AdaptiveConfig:
        """Build from application settings (defaults to the cached settings)."""
        if settings is None:
            from config import get_settings

            settings = get_settings()
        return cls(**settings.get_adaptive_config())

    def base_time_for(self, game: MiniGameType | None) -> int:
        """Thinking time budget for a game, falling back to base_time_ms."""
        if game is None:
            return self.base_time_ms
        return self.game_base_times.get(game, self.base_time_ms)


@dataclass
class AdaptiveState:
    """
    Pacing state for one session.

    Attributes:
        game_speed: Committed speed, always within [min_speed, max_speed]
        phase: Pure function of game_speed
        difficulty: Pure function of (game_speed, phase) once answers arrive
        questions_answered: Incremented on every processed answer
        peak_game_speed: Highest committed speed this session
        session_start_time: Epoch seconds when the session started
        answers_since_commit: Answers processed since the last committed change
        pending_speed: Latest candidate speed awaiting commit
    """

    game_speed: float = 1.0
    phase: AdaptivePhase = AdaptivePhase.WARMUP
    difficulty: int = 1
    questions_answered: int = 0
    peak_game_speed: float = 1.0
    session_start_time: float = 0.0
    answers_since_commit: int = 0
    pending_speed: float = 1.0


class AdaptiveEngine:
    """
    Latency-driven difficulty controller.

    Each call to process_answer returns a fresh AdaptiveState snapshot; the
    engine holds the only mutable copy.
    """

    def __init__(
        self,
        config: AdaptiveConfig | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or AdaptiveConfig()
        self._clock = clock
        self._response_times: deque[int] = deque(maxlen=self.config.response_window)
        self._current_game: MiniGameType | None = None
        self._state = AdaptiveState(session_start_time=self._clock())

    @property
    def state(self) -> AdaptiveState:
        """Snapshot of the current pacing state."""
        return replace(self._state)

    @property
    def current_game(self) -> MiniGameType | None:
        return self._current_game

    @property
    def allowed_time_ms(self) -> int:
        """Time allowed for the current question at the committed speed."""
        base_time = self.config.base_time_for(self._current_game)
        return math.floor(base_time / self._state.game_speed)

    @property
    def average_response_ms(self) -> float:
        """Mean latency over the recent correct-answer window (0.0 when empty)."""
        if not self._response_times:
            return 0.0
        return sum(self._response_times) / len(self._response_times)

    def set_current_game(self, game: MiniGameType | None) -> None:
        """Switch the thinking time budget to the given mini-game."""
        self._current_game = game

    def session_duration_sec(self) -> int:
        """Whole seconds elapsed since the session started."""
        return max(0, math.floor(self._clock() - self._state.session_start_time))

    def process_answer(self, is_correct: bool, response_time_ms: int) -> AdaptiveState:
        """
        Feed one answer into the control loop.

        Args:
            is_correct: Whether the answer was right
            response_time_ms: Time the player took (negative values clamp to 0)

        Returns:
            Updated AdaptiveState snapshot
        """
        cfg = self.config
        state = self._state
        current = state.game_speed
        response_time_ms = max(0, response_time_ms)
        allowed_time = cfg.base_time_for(self._current_game) / current

        if not is_correct:
            candidate = max(cfg.min_speed, current * cfg.error_penalty)
        else:
            self._response_times.append(response_time_ms)
            response_ratio = response_time_ms / allowed_time
            if response_ratio < cfg.speed_up_threshold:
                candidate = min(cfg.max_speed, current + cfg.speed_increment)
            elif response_ratio > cfg.slow_down_threshold:
                candidate = max(cfg.min_speed, current - cfg.speed_decrement)
            else:
                candidate = current

        state.questions_answered += 1
        state.answers_since_commit += 1
        state.pending_speed = candidate

        if not is_correct or state.answers_since_commit >= cfg.commit_interval:
            self._commit(candidate)

        state.phase = phase_for_speed(state.game_speed)
        state.difficulty = difficulty_for(state.game_speed, state.phase)
        return self.state

    def _commit(self, speed: float) -> None:
        cfg = self.config
        state = self._state
        speed = round(min(cfg.max_speed, max(cfg.min_speed, speed)), SPEED_PRECISION)
        previous_phase = state.phase

        state.game_speed = speed
        state.pending_speed = speed
        state.answers_since_commit = 0
        state.peak_game_speed = max(state.peak_game_speed, speed)

        if phase_for_speed(speed) != previous_phase:
            logger.debug(
                f"Pacing phase {previous_phase.value} -> {phase_for_speed(speed).value} at speed {speed}"
            )

    def reset(self) -> None:
        """Reinitialize for a new session."""
        self._response_times.clear()
        self._current_game = None
        self._state = AdaptiveState(session_start_time=self._clock())
