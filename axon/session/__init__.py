"""
Session orchestration.

Components:
- SessionController: IDLE -> COUNTDOWN -> PLAYING -> {CONTINUE_PENDING, RESULT}
- GameSelector: next mini-game policy
- collaborators: sound, haptics, ads and question source protocols
"""
from axon.session.controller import (
    AnswerFeedback,
    ContinueOffer,
    ContinueResolution,
    PendingDeath,
    SessionController,
    SessionPhase,
    SessionSummary,
)
from axon.session.selector import GameSelector, SelectionPolicy

__all__ = [
    "AnswerFeedback",
    "ContinueOffer",
    "ContinueResolution",
    "PendingDeath",
    "SessionController",
    "SessionPhase",
    "SessionSummary",
    "GameSelector",
    "SelectionPolicy",
]
