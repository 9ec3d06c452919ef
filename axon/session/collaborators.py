"""
External collaborators consumed by the session engine.

The engine never renders, plays audio, or displays ads itself. It talks to
these protocols, and ships null implementations so a headless session (tests,
the terminal runner) needs no wiring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class SoundCue(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    TIER_UP = "tier_up"
    COMPLETE = "complete"
    LOSE = "lose"


class HapticKind(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


@dataclass
class QuestionPayload:
    """One quiz item produced by a question source."""

    prompt: str
    answer: Any
    options: list[Any] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def is_correct(self, response: Any) -> bool:
        return response == self.answer


@runtime_checkable
class QuestionSource(Protocol):
    def generate(self, kind: str) -> QuestionPayload: ...


@runtime_checkable
class SoundPlayer(Protocol):
    def play(self, kind: SoundCue) -> None: ...


@runtime_checkable
class HapticEngine(Protocol):
    def trigger(self, kind: HapticKind) -> None: ...


@runtime_checkable
class AdProvider(Protocol):
    """Ad display provider. Both calls resolve True when the ad completed."""

    async def show_interstitial(self) -> bool: ...

    async def show_rewarded(self) -> bool: ...


class NullSoundPlayer:
    def play(self, kind: SoundCue) -> None:
        return None


class NullHapticEngine:
    def trigger(self, kind: HapticKind) -> None:
        return None


class NullAdProvider:
    """Provider with no ad inventory: every request completes immediately."""

    async def show_interstitial(self) -> bool:
        return True

    async def show_rewarded(self) -> bool:
        return True
