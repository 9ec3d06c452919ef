"""
Tier Resolver.

Tier is the coarse, player-facing difficulty signal (1-5) derived from the
current streak. It is independent of the adaptive engine's speed, which is
latency-driven. Mini-games scale their own generation (grid size, operand
range, show time) from the tier's parameter set.

Breakpoints apply to the effective streak:
    tier 1: < 6   "Basics"
    tier 2: < 13  "Focus"
    tier 3: < 21  "Flow"
    tier 4: < 31  "Elite"
    tier 5: >= 31 "God Mode"

Endless escalates faster: effective streak = floor(streak * 1.5).
"""

from __future__ import annotations

import math
from typing import Any

from axon.core.modes import GameMode, MiniGameType

MIN_TIER = 1
MAX_TIER = 5

DEFAULT_BREAKPOINTS: tuple[int, ...] = (6, 13, 21, 31)
DEFAULT_ENDLESS_MULTIPLIER = 1.5

TIER_LABELS = {
    1: "Basics",
    2: "Focus",
    3: "Flow",
    4: "Elite",
    5: "God Mode",
}

TIER_SCORE_MULTIPLIERS = {
    1: 1.0,
    2: 1.5,
    3: 2.5,
    4: 3.0,
    5: 3.0,
}

# Mini-game parameter tables, one row per tier
GAME_TIER_PARAMS: dict[MiniGameType, dict[int, dict[str, Any]]] = {
    MiniGameType.SPEED_MATH: {
        1: {"operations": ["+", "-"], "max_operand": 20},
        2: {"operations": ["+", "-"], "max_operand": 50},
        3: {"operations": ["+", "-", "×"], "max_operand": 50},
        4: {"operations": ["+", "-", "×"], "max_operand": 80},
        5: {"operations": ["+", "-", "×", "÷"], "max_operand": 100},
    },
    MiniGameType.OPERATOR_CHAOS: {
        1: {"operator_count": 1, "max_number": 20, "timer": 8, "include_parentheses": False},
        2: {"operator_count": 2, "max_number": 30, "timer": 10, "include_parentheses": False},
        3: {"operator_count": 2, "max_number": 45, "timer": 14, "include_parentheses": True},
        4: {"operator_count": 2, "max_number": 60, "timer": 16, "include_parentheses": True},
        5: {"operator_count": 3, "max_number": 80, "timer": 20, "include_parentheses": True},
    },
    MiniGameType.SUIT_DECEPTION: {
        1: {"grid_size": 9, "grid_cols": 3, "imposters": 1, "timer": 6, "size_variation": False},
        2: {"grid_size": 16, "grid_cols": 4, "imposters": 1, "timer": 8, "size_variation": False},
        3: {"grid_size": 25, "grid_cols": 5, "imposters": 2, "timer": 10, "size_variation": False},
        4: {"grid_size": 25, "grid_cols": 5, "imposters": 3, "timer": 10, "size_variation": True},
        5: {"grid_size": 36, "grid_cols": 6, "imposters": 4, "timer": 12, "size_variation": True},
    },
    MiniGameType.CHIMP_MEMORY: {
        1: {"count": 4, "show_time": 2000, "grid_size": 16, "grid_cols": 4},
        2: {"count": 5, "show_time": 2200, "grid_size": 16, "grid_cols": 4},
        3: {"count": 6, "show_time": 2400, "grid_size": 16, "grid_cols": 4},
        4: {"count": 7, "show_time": 2600, "grid_size": 25, "grid_cols": 5},
        5: {"count": 9, "show_time": 3000, "grid_size": 25, "grid_cols": 5},
    },
    MiniGameType.CUBE_COUNT: {
        1: {"grid_size": 3, "max_height": 3},
        2: {"grid_size": 3, "max_height": 3},
        3: {"grid_size": 4, "max_height": 4},
        4: {"grid_size": 4, "max_height": 5},
        5: {"grid_size": 4, "max_height": 5},
    },
    MiniGameType.PARADOX_FLOW: {
        1: {"follow_chance": 0.7, "text_conflict": False},
        2: {"follow_chance": 0.5, "text_conflict": True},
        3: {"follow_chance": 0.5, "text_conflict": True},
        4: {"follow_chance": 0.4, "text_conflict": True},
        5: {"follow_chance": 0.3, "text_conflict": True},
    },
}


def clamp_tier(tier: int) -> int:
    """Clamp any integer into the valid tier range."""
    return min(MAX_TIER, max(MIN_TIER, tier))


def effective_streak(
    streak: int,
    mode: GameMode,
    endless_multiplier: float = DEFAULT_ENDLESS_MULTIPLIER,
) -> int:
    """Streak as seen by the breakpoints; endless runs count for more."""
    streak = max(0, streak)
    if mode == GameMode.ENDLESS:
        return math.floor(streak * endless_multiplier)
    return streak


def resolve_tier(
    streak: int,
    mode: GameMode,
    breakpoints: tuple[int, ...] = DEFAULT_BREAKPOINTS,
    endless_multiplier: float = DEFAULT_ENDLESS_MULTIPLIER,
) -> int:
    """
    Map a streak and game mode to a tier in 1..5.

    Args:
        streak: Consecutive correct answers
        mode: Game mode (endless escalates faster)
        breakpoints: Effective-streak thresholds for tiers 2..5
        endless_multiplier: Streak multiplier applied in endless mode

    Returns:
        Tier number, capped at 5
    """
    value = effective_streak(streak, mode, endless_multiplier)
    tier = MIN_TIER
    for threshold in breakpoints:
        if value < threshold:
            break
        tier += 1
    return clamp_tier(tier)


def tier_label(tier: int) -> str:
    """Player-facing name of a tier."""
    return TIER_LABELS[clamp_tier(tier)]


def tier_score_multiplier(tier: int) -> float:
    """Points multiplier awarded for answering at a tier."""
    return TIER_SCORE_MULTIPLIERS[clamp_tier(tier)]


def start_streak_for_tier(tier: int, breakpoints: tuple[int, ...] = DEFAULT_BREAKPOINTS) -> int:
    """Streak a classic run starts at so that it begins in the chosen tier."""
    tier = clamp_tier(tier)
    if tier == MIN_TIER:
        return 0
    return breakpoints[tier - 2]


def get_game_params(tier: int, mini_game: MiniGameType) -> dict[str, Any]:
    """
    Parameter set a mini-game uses to generate its next question.

    The mapping is a step function of tier: no smoothing, changes are
    visible immediately at streak boundaries.
    """
    tier = clamp_tier(tier)
    table = GAME_TIER_PARAMS.get(mini_game)
    if table is None:
        return {"tier": tier}
    params = dict(table[tier])
    params["tier"] = tier
    return params


class TierResolver:
    """Tier lookups bound to one breakpoint configuration."""

    def __init__(
        self,
        breakpoints: tuple[int, ...] = DEFAULT_BREAKPOINTS,
        endless_multiplier: float = DEFAULT_ENDLESS_MULTIPLIER,
    ):
        if len(breakpoints) != MAX_TIER - MIN_TIER or list(breakpoints) != sorted(breakpoints):
            raise ValueError(f"Expected {MAX_TIER - MIN_TIER} ascending breakpoints, got {breakpoints}")
        self.breakpoints = tuple(breakpoints)
        self.endless_multiplier = endless_multiplier

    @classmethod
    def from_settings(cls, settings=None) -> TierResolver:
        if settings is None:
            from config import get_settings

            settings = get_settings()
        return cls(**settings.get_tier_config())

    def resolve(self, streak: int, mode: GameMode) -> int:
        return resolve_tier(streak, mode, self.breakpoints, self.endless_multiplier)

    def start_streak(self, tier: int) -> int:
        return start_streak_for_tier(tier, self.breakpoints)

    def params(self, tier: int, mini_game: MiniGameType) -> dict[str, Any]:
        return get_game_params(tier, mini_game)
