"""
Configuration settings for the Axon game engine.

Uses Pydantic Settings for environment variable management with .env file support.
Every tunable of the adaptive engine, tier resolver and ad economy lives here so
that balancing changes never require a code change.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AXON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Adaptive Engine (pacing)
    # ========================================
    adaptive_base_time_ms: int = Field(
        default=5000,
        gt=0,
        description="Thinking time budget at speed 1.0 when no game-specific budget applies",
    )
    adaptive_min_speed: float = Field(
        default=0.5,
        gt=0,
        description="Lower clamp for game speed",
    )
    adaptive_max_speed: float = Field(
        default=2.5,
        gt=0,
        description="Upper clamp for game speed",
    )
    adaptive_speed_up_threshold: float = Field(
        default=0.30,
        description="Answering faster than this fraction of allowed time speeds the game up",
    )
    adaptive_slow_down_threshold: float = Field(
        default=0.80,
        description="Answering slower than this fraction of allowed time slows the game down",
    )
    adaptive_speed_increment: float = Field(
        default=0.05,
        description="Speed added on a fast correct answer",
    )
    adaptive_speed_decrement: float = Field(
        default=0.05,
        description="Speed removed on a slow correct answer",
    )
    adaptive_error_penalty: float = Field(
        default=0.90,
        description="Multiplier applied to speed on a wrong answer",
    )
    adaptive_commit_interval: int = Field(
        default=3,
        ge=1,
        description="Positive speed changes are committed every N answers",
    )
    adaptive_response_window: int = Field(
        default=5,
        ge=1,
        description="Number of recent correct response times kept for averaging",
    )

    # ========================================
    # Tier Resolver
    # ========================================
    tier_breakpoints: str = Field(
        default="6,13,21,31",
        description="Effective-streak thresholds for tiers 2..5 (comma-separated)",
    )
    tier_endless_multiplier: float = Field(
        default=1.5,
        description="Endless mode streak multiplier (endless escalates faster)",
    )

    # ========================================
    # Ad Economy
    # ========================================
    ad_frequency_classic: int = Field(
        default=3,
        ge=1,
        description="Show an interstitial every N completed classic sessions",
    )
    ad_frequency_endless: int = Field(
        default=4,
        ge=1,
        description="Show an interstitial every N completed endless sessions",
    )
    ad_skip_cost_xp: int = Field(
        default=2000,
        ge=0,
        description="XP cost to skip an interstitial",
    )
    ad_continue_cost_xp: int = Field(
        default=2000,
        ge=0,
        description="XP cost to continue an endless run after a mistake",
    )
    ad_continue_countdown_seconds: int = Field(
        default=10,
        description="Seconds the player has to decide on a continue",
    )

    # ========================================
    # Session
    # ========================================
    classic_duration_seconds: int = Field(
        default=60,
        description="Time budget of a classic run",
    )
    game_selection_policy: Literal["random", "round_robin", "weighted"] = Field(
        default="weighted",
        description="How the next mini-game is picked after each answer",
    )

    # ========================================
    # Persistence
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".axon",
        description="Directory holding the local state database",
    )
    state_db_name: str = Field(
        default="state.db",
        description="SQLite file name for the key-value store",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @property
    def state_db_path(self) -> Path:
        """Full path of the SQLite state database."""
        return self.data_dir / self.state_db_name

    def get_adaptive_config(self) -> dict[str, Any]:
        """Get adaptive engine tunables as keyword arguments for AdaptiveConfig."""
        return {
            "base_time_ms": self.adaptive_base_time_ms,
            "min_speed": self.adaptive_min_speed,
            "max_speed": self.adaptive_max_speed,
            "speed_up_threshold": self.adaptive_speed_up_threshold,
            "slow_down_threshold": self.adaptive_slow_down_threshold,
            "speed_increment": self.adaptive_speed_increment,
            "speed_decrement": self.adaptive_speed_decrement,
            "error_penalty": self.adaptive_error_penalty,
            "commit_interval": self.adaptive_commit_interval,
            "response_window": self.adaptive_response_window,
        }

    def get_tier_config(self) -> dict[str, Any]:
        """Get tier resolver configuration as a dictionary."""
        return {
            "breakpoints": tuple(int(p.strip()) for p in self.tier_breakpoints.split(",")),
            "endless_multiplier": self.tier_endless_multiplier,
        }

    def get_economy_config(self) -> dict[str, Any]:
        """Get ad economy configuration as a dictionary."""
        return {
            "frequencies": {
                "classic": self.ad_frequency_classic,
                "endless": self.ad_frequency_endless,
            },
            "skip_cost": self.ad_skip_cost_xp,
            "continue_cost": self.ad_continue_cost_xp,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
