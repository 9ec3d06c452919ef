"""
Adaptive pacing.

Components:
- AdaptiveEngine: latency-driven game speed, phase and difficulty
- TierResolver: streak-driven tier (1-5) and mini-game parameters
"""
from axon.adaptive.engine import (
    AdaptiveConfig,
    AdaptiveEngine,
    AdaptivePhase,
    AdaptiveState,
    difficulty_for,
    phase_for_speed,
)
from axon.adaptive.tiers import (
    TierResolver,
    get_game_params,
    resolve_tier,
    start_streak_for_tier,
    tier_label,
    tier_score_multiplier,
)

__all__ = [
    # Pacing
    "AdaptiveConfig",
    "AdaptiveEngine",
    "AdaptivePhase",
    "AdaptiveState",
    "difficulty_for",
    "phase_for_speed",
    # Tiers
    "TierResolver",
    "get_game_params",
    "resolve_tier",
    "start_streak_for_tier",
    "tier_label",
    "tier_score_multiplier",
]
