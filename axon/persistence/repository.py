"""
Progress Repository.

Single owner of persisted player progress. Loads blobs from a KeyValueStore,
validates them into pydantic models, and writes them back after every
mutation. Missing or malformed blobs never propagate: they are replaced by
defaults and logged at WARNING.
"""

from __future__ import annotations

import json
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from axon.core.errors import ConfigurationError
from axon.core.modes import MIXABLE_GAMES, GameConfig, GameMode
from axon.persistence.models import AdEconomyState, UserStats
from axon.persistence.store import InMemoryKeyValueStore, KeyValueStore

USER_STATS_KEY = "axon-user-stats"
AD_STATE_KEY = "axon-ad-state"
GAME_CONFIG_KEY = "axon-game-config"


class ProgressRepository:
    """
    Load-at-startup / write-on-every-mutation access to player progress.

    Example:
        repo = ProgressRepository(SQLiteKeyValueStore())
        stats = repo.user_stats
        stats.total_xp += 100
        repo.save_user_stats(stats)
    """

    def __init__(self, store: KeyValueStore | None = None):
        self.store = store if store is not None else InMemoryKeyValueStore()
        self._user_stats: UserStats | None = None
        self._ad_state: AdEconomyState | None = None

    # =========================================================================
    # Cached accessors
    # =========================================================================

    @property
    def user_stats(self) -> UserStats:
        if self._user_stats is None:
            self._user_stats = self.load_user_stats()
        return self._user_stats

    @property
    def ad_state(self) -> AdEconomyState:
        if self._ad_state is None:
            self._ad_state = self.load_ad_state()
        return self._ad_state

    # =========================================================================
    # User stats
    # =========================================================================

    def load_user_stats(self) -> UserStats:
        """Load stats, filling per-game maps for games added since the save."""
        stats = self._load_model(USER_STATS_KEY, UserStats)
        defaults = UserStats()
        stats.game_levels = {**defaults.game_levels, **stats.game_levels}
        stats.game_mastery_xp = {**defaults.game_mastery_xp, **stats.game_mastery_xp}
        return stats

    def save_user_stats(self, stats: UserStats) -> None:
        self._user_stats = stats
        self.store.set(USER_STATS_KEY, stats.to_storage())

    # =========================================================================
    # Ad economy
    # =========================================================================

    def load_ad_state(self) -> AdEconomyState:
        return self._load_model(AD_STATE_KEY, AdEconomyState)

    def save_ad_state(self, state: AdEconomyState) -> None:
        self._ad_state = state
        self.store.set(AD_STATE_KEY, state.to_storage())

    # =========================================================================
    # Game config
    # =========================================================================

    def load_game_config(self) -> GameConfig:
        """
        Load the player's last game configuration.

        Unknown or non-mixable games are dropped; if nothing playable is left
        the default configuration is returned.
        """
        raw = self._read(GAME_CONFIG_KEY)
        if raw is None:
            return GameConfig()
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed {GAME_CONFIG_KEY}: expected object")
            return GameConfig()

        known = {game.value for game in MIXABLE_GAMES}
        stored_games = raw.get("enabledGames") or []
        enabled = [g for g in stored_games if isinstance(g, str) and g in known]
        mode = raw.get("mode", GameMode.ENDLESS.value)
        if mode not in {m.value for m in GameMode}:
            mode = GameMode.ENDLESS.value

        try:
            if enabled:
                return GameConfig(mode=mode, enabled_games=enabled)
            return GameConfig(mode=mode)
        except (ValidationError, ConfigurationError) as e:
            logger.warning(f"Ignoring invalid {GAME_CONFIG_KEY}: {e}")
            return GameConfig()

    def save_game_config(self, config: GameConfig) -> None:
        self.store.set(
            GAME_CONFIG_KEY,
            {
                "mode": config.mode.value,
                "enabledGames": [g.value for g in config.enabled_games],
            },
        )

    # =========================================================================
    # Maintenance
    # =========================================================================

    def reset(self) -> None:
        """Wipe all persisted progress."""
        for key in (USER_STATS_KEY, AD_STATE_KEY, GAME_CONFIG_KEY):
            self.store.delete(key)
        self._user_stats = None
        self._ad_state = None
        logger.info("Persisted progress cleared")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _read(self, key: str) -> Any | None:
        try:
            return self.store.get(key)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupted JSON under {key}, using defaults: {e}")
            return None

    def _load_model(self, key: str, model: type[BaseModel]) -> Any:
        raw = self._read(key)
        if raw is None:
            return model()
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Invalid {key} payload, using defaults: {e.error_count()} error(s)")
            return model()
