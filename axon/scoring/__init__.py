"""Per-answer scoring, session XP and progress merge."""
from axon.scoring.ledger import (
    FinalizedSession,
    GameSessionState,
    GameTally,
    LastResult,
    ScoringLedger,
    accuracy_percent,
    compute_session_xp,
    daily_challenge_target,
    mastery_level_for,
    score_answer,
)

__all__ = [
    "FinalizedSession",
    "GameSessionState",
    "GameTally",
    "LastResult",
    "ScoringLedger",
    "accuracy_percent",
    "compute_session_xp",
    "daily_challenge_target",
    "mastery_level_for",
    "score_answer",
]
