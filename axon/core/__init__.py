"""Shared modes, configuration model and exceptions."""
from axon.core.errors import (
    AxonError,
    ConfigurationError,
    InsufficientXPError,
    InvalidTransitionError,
)
from axon.core.modes import (
    GAME_DOMAINS,
    MIXABLE_GAMES,
    CognitiveDomain,
    GameConfig,
    GameMode,
    MiniGameType,
)

__all__ = [
    "AxonError",
    "ConfigurationError",
    "InsufficientXPError",
    "InvalidTransitionError",
    "GAME_DOMAINS",
    "MIXABLE_GAMES",
    "CognitiveDomain",
    "GameConfig",
    "GameMode",
    "MiniGameType",
]
