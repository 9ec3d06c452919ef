"""
Scoring Ledger.

Turns answers into points and finished sessions into durable progress:

- score_answer: per-answer points from streak, speed and tier
- compute_session_xp: correct x 10 + (streak // 5) x 25
- finalize_session: merges one session into UserStats exactly once
  (high score, day streak, totals, per-game mastery, daily challenge)
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

from loguru import logger

from axon.adaptive.engine import AdaptiveState
from axon.adaptive.tiers import tier_score_multiplier
from axon.core.modes import GameMode, MiniGameType
from axon.persistence.models import UserStats
from axon.persistence.repository import ProgressRepository

# Scoring constants
BASE_POINTS = 10
STREAK_BONUS_STEP = 0.1
MAX_STREAK_MULTIPLIER = 2.0
CLASSIC_WRONG_PENALTY = 50

# XP constants
XP_PER_CORRECT = 10
XP_PER_STREAK_BLOCK = 25
STREAK_BLOCK = 5

# Daily challenge: correct answers needed today grow with games played
DAILY_CHALLENGE_BASE_TARGET = 10
DAILY_CHALLENGE_MAX_TARGET = 30
DAILY_CHALLENGE_GAMES_PER_STEP = 5
DAILY_CHALLENGE_BONUS_XP = 500

# Cumulative mastery XP needed for levels 1..10
MASTERY_THRESHOLDS = (0, 30, 80, 160, 300, 500, 800, 1200, 1800, 2500)


class LastResult(str, Enum):
    NONE = "none"
    CORRECT = "correct"
    WRONG = "wrong"


@dataclass
class GameTally:
    """Correct/wrong counts for one mini-game within a session."""

    correct: int = 0
    wrong: int = 0


@dataclass
class FinalizedSession:
    """Outcome of merging a session into UserStats."""

    xp_gained: int
    is_new_high_score: bool
    updated_stats: UserStats
    accuracy: float = 0.0
    peak_game_speed: float = 1.0
    daily_challenge_completed: bool = False
    daily_bonus_xp: int = 0


@dataclass
class GameSessionState:
    """
    Running tallies of one session.

    In endless mode a wrong answer zeroes the live streak (the controller
    keeps the pre-death snapshot); in classic mode it resets the streak and
    play goes on until the clock expires.
    """

    mode: GameMode
    current_mini_game: MiniGameType
    score: int = 0
    correct: int = 0
    wrong: int = 0
    streak: int = 0
    best_streak: int = 0
    speed_multiplier: float = 1.0
    last_result: LastResult = LastResult.NONE
    game_breakdown: dict[MiniGameType, GameTally] = field(default_factory=dict)
    started_at: float = field(default_factory=time.time)
    finalized: bool = False
    result: FinalizedSession | None = None

    def tally_for(self, game: MiniGameType) -> GameTally:
        return self.game_breakdown.setdefault(game, GameTally())


# =============================================================================
# Pure scoring rules
# =============================================================================


def streak_multiplier(streak: int) -> float:
    """1.0 at no streak, +0.1 per consecutive correct answer, capped at 2.0."""
    return min(1 + max(0, streak) * STREAK_BONUS_STEP, MAX_STREAK_MULTIPLIER)


def score_answer(
    streak: int,
    game_speed: float = 1.0,
    tier: int = 1,
    speed_bonus: float = 0.0,
) -> int:
    """
    Points for one correct answer.

    Args:
        streak: Streak before this answer
        game_speed: Committed adaptive speed
        tier: Current tier (1-5)
        speed_bonus: Extra base points awarded by the mini-game for speed

    Returns:
        floor((10 + speed_bonus) * streak_mult * game_speed * tier_mult)
    """
    raw = (BASE_POINTS + speed_bonus) * streak_multiplier(streak) * game_speed * tier_score_multiplier(tier)
    return max(0, math.floor(raw))


def compute_session_xp(correct: int, streak: int) -> int:
    return max(0, correct) * XP_PER_CORRECT + (max(0, streak) // STREAK_BLOCK) * XP_PER_STREAK_BLOCK


def accuracy_percent(correct: int, wrong: int) -> float:
    """Accuracy as 0-100; 0.0 when nothing was attempted."""
    attempts = correct + wrong
    if attempts <= 0:
        return 0.0
    return correct / attempts * 100


def mastery_level_for(mastery_xp: int) -> int:
    level = sum(1 for threshold in MASTERY_THRESHOLDS if mastery_xp >= threshold)
    return max(1, min(len(MASTERY_THRESHOLDS), level))


def daily_challenge_target(total_games_played: int) -> int:
    return min(
        DAILY_CHALLENGE_MAX_TARGET,
        DAILY_CHALLENGE_BASE_TARGET + max(0, total_games_played) // DAILY_CHALLENGE_GAMES_PER_STEP,
    )


def next_day_streak(previous: int, last_played: date | None, today: date) -> int:
    """Same day keeps the streak, yesterday extends it, anything else restarts at 1."""
    if last_played == today:
        return previous
    if last_played == today - timedelta(days=1):
        return previous + 1
    return 1


# =============================================================================
# Ledger
# =============================================================================


class ScoringLedger:
    """Applies scoring rules to sessions and persists the results."""

    def __init__(self, repository: ProgressRepository):
        self.repository = repository

    @property
    def stats(self) -> UserStats:
        return self.repository.user_stats

    def new_session(self, mode: GameMode, first_game: MiniGameType, start_streak: int = 0) -> GameSessionState:
        return GameSessionState(
            mode=mode,
            current_mini_game=first_game,
            streak=start_streak,
            best_streak=start_streak,
        )

    def record_answer(
        self,
        session: GameSessionState,
        correct: bool,
        game_speed: float = 1.0,
        tier: int = 1,
        speed_bonus: float = 0.0,
    ) -> int:
        """
        Apply one answer to the session tallies.

        Returns:
            Points gained (negative for the classic wrong-answer penalty)
        """
        tally = session.tally_for(session.current_mini_game)
        session.speed_multiplier = game_speed

        if correct:
            points = score_answer(session.streak, game_speed, tier, speed_bonus)
            session.score += points
            session.correct += 1
            session.streak += 1
            session.best_streak = max(session.best_streak, session.streak)
            session.last_result = LastResult.CORRECT
            tally.correct += 1
            return points

        session.wrong += 1
        session.streak = 0
        session.last_result = LastResult.WRONG
        tally.wrong += 1

        if session.mode == GameMode.CLASSIC:
            before = session.score
            session.score = max(0, session.score - CLASSIC_WRONG_PENALTY)
            return session.score - before
        return 0

    def finalize_session(
        self,
        session: GameSessionState,
        adaptive_state: AdaptiveState | None = None,
        explicit_xp: int | None = None,
        today: date | None = None,
    ) -> FinalizedSession:
        """
        Merge a finished session into UserStats.

        Guarded by session.finalized: a second call returns the first
        result without touching stats again.

        Args:
            session: Finished session tallies
            adaptive_state: Final pacing state (for peak speed reporting)
            explicit_xp: Authoritative XP from the caller; wins over the formula
            today: Calendar date of the session (defaults to date.today())
        """
        if session.finalized and session.result is not None:
            logger.debug("finalize_session called twice; returning cached result")
            return session.result

        today = today or date.today()
        if explicit_xp is not None:
            xp_gained = max(0, explicit_xp)
        else:
            xp_gained = compute_session_xp(session.correct, session.streak)

        stats = self.stats.model_copy(deep=True)

        if session.mode == GameMode.CLASSIC:
            is_new_high_score = session.score > stats.classic_high_score
            if is_new_high_score:
                stats.classic_high_score = session.score
        else:
            is_new_high_score = session.streak > stats.endless_best_streak
            if is_new_high_score:
                stats.endless_best_streak = session.streak

        stats.day_streak = next_day_streak(stats.day_streak, stats.last_played_date, today)
        stats.last_played_date = today
        stats.total_games_played += 1
        stats.total_correct_answers += session.correct
        stats.total_xp += xp_gained

        mastery_xp = dict(stats.game_mastery_xp)
        levels = dict(stats.game_levels)
        for game, tally in session.game_breakdown.items():
            key = game.value
            mastery_xp[key] = mastery_xp.get(key, 0) + tally.correct
            new_level = mastery_level_for(mastery_xp[key])
            if new_level > levels.get(key, 1):
                logger.info(f"{key} mastery reached level {new_level}")
            levels[key] = new_level
        stats.game_mastery_xp = mastery_xp
        stats.game_levels = levels

        daily_completed = self._advance_daily_challenge(stats, session.correct, today)
        daily_bonus = DAILY_CHALLENGE_BONUS_XP if daily_completed else 0
        stats.total_xp += daily_bonus

        self.repository.save_user_stats(stats)

        result = FinalizedSession(
            xp_gained=xp_gained,
            is_new_high_score=is_new_high_score,
            updated_stats=stats,
            accuracy=accuracy_percent(session.correct, session.wrong),
            peak_game_speed=adaptive_state.peak_game_speed if adaptive_state else session.speed_multiplier,
            daily_challenge_completed=daily_completed,
            daily_bonus_xp=daily_bonus,
        )
        session.finalized = True
        session.result = result
        logger.debug(
            f"Session finalized: mode={session.mode.value} score={session.score} "
            f"streak={session.streak} xp={xp_gained}"
        )
        return result

    def _advance_daily_challenge(self, stats: UserStats, correct: int, today: date) -> bool:
        """
        Add today's correct answers to the daily challenge.

        Progress restarts on a new calendar day. Returns True only for the
        session whose answers first reach the target today; the target is
        read after total_games_played counts this session.
        """
        if stats.last_daily_challenge_date != today:
            stats.last_daily_challenge_date = today
            stats.daily_challenge_progress = 0

        before = stats.daily_challenge_progress
        already_done = before >= daily_challenge_target(stats.total_games_played - 1)
        stats.daily_challenge_progress = before + max(0, correct)
        target = daily_challenge_target(stats.total_games_played)

        if already_done or stats.daily_challenge_progress < target:
            return False
        stats.daily_challenges_completed += 1
        logger.info(f"Daily challenge complete ({stats.daily_challenge_progress}/{target})")
        return True
