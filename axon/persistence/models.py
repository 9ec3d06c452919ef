"""
Persisted progress models.

Stored as JSON blobs with camelCase keys so that existing saves
(`classicHighScore`, `gamesPlayedSinceLastAd`, ...) load unchanged.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from axon.core.modes import MiniGameType


def _all_games(value: int) -> dict[str, int]:
    return {game.value: value for game in MiniGameType}


class PersistedModel(BaseModel):
    """Base for stored blobs: camelCase on disk, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class UserStats(PersistedModel):
    """
    Lifetime player progress.

    Mutated once per completed session by the scoring ledger, and by XP
    purchases in the ad economy.
    """

    classic_high_score: int = Field(default=0, ge=0)
    endless_best_streak: int = Field(default=0, ge=0)
    total_xp: int = Field(default=0, ge=0)
    total_games_played: int = Field(default=0, ge=0)
    total_correct_answers: int = Field(default=0, ge=0)
    game_levels: dict[str, int] = Field(default_factory=lambda: _all_games(1))
    game_mastery_xp: dict[str, int] = Field(default_factory=lambda: _all_games(0))
    last_played_date: date | None = None
    day_streak: int = Field(default=0, ge=0)
    last_daily_challenge_date: date | None = None
    daily_challenge_progress: int = Field(default=0, ge=0)
    daily_challenges_completed: int = Field(default=0, ge=0)


class AdEconomyState(PersistedModel):
    """Interstitial frequency counter and lifetime ad tallies."""

    games_played_since_last_ad: int = Field(default=0, ge=0)
    total_ads_watched: int = Field(default=0, ge=0)
    total_ads_skipped: int = Field(default=0, ge=0)
    xp_spent_on_skips: int = Field(default=0, ge=0)
