"""
Axon Game Modes

Defines the two play modes and the mini-game catalogue:
1. Classic - time-boxed scoring run; mistakes cost points but play continues
2. Endless - sudden-death streak run; the first mistake ends the run unless continued

The mixable pool is the subset of mini-games that may be rotated inside a
mixed session. A configuration without at least one mixable game is rejected
here, so it never reaches the session controller.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from axon.core.errors import ConfigurationError


class GameMode(str, Enum):
    """Play mode for a session."""

    CLASSIC = "classic"  # Time-boxed scoring run
    ENDLESS = "endless"  # Sudden-death streak run


class MiniGameType(str, Enum):
    """Mini-game identifiers (values match the stored keys)."""

    SPEED_MATH = "speedMath"
    COLOR_MATCH = "colorMatch"
    FLASH_MEMORY = "flashMemory"
    PARADOX_FLOW = "paradoxFlow"
    PATTERN_HUNTER = "patternHunter"
    N_BACK_GHOST = "nBackGhost"
    OPERATOR_CHAOS = "operatorChaos"
    SPATIAL_STACK = "spatialStack"
    WORD_CONNECT = "wordConnect"
    SUIT_DECEPTION = "suitDeception"
    CHIMP_MEMORY = "chimpMemory"
    CUBE_COUNT = "cubeCount"


class CognitiveDomain(str, Enum):
    """Primary cognitive domain trained by a mini-game."""

    MATH = "math"
    MEMORY = "memory"
    SPATIAL = "spatial"
    LINGUISTIC = "linguistic"
    REACTION = "reaction"
    LOGIC = "logic"
    PERCEPTION = "perception"


GAME_DOMAINS: dict[MiniGameType, CognitiveDomain] = {
    MiniGameType.SPEED_MATH: CognitiveDomain.MATH,
    MiniGameType.OPERATOR_CHAOS: CognitiveDomain.MATH,
    MiniGameType.COLOR_MATCH: CognitiveDomain.REACTION,
    MiniGameType.PARADOX_FLOW: CognitiveDomain.LOGIC,
    MiniGameType.SUIT_DECEPTION: CognitiveDomain.PERCEPTION,
    MiniGameType.PATTERN_HUNTER: CognitiveDomain.PERCEPTION,
    MiniGameType.CHIMP_MEMORY: CognitiveDomain.MEMORY,
    MiniGameType.FLASH_MEMORY: CognitiveDomain.MEMORY,
    MiniGameType.N_BACK_GHOST: CognitiveDomain.MEMORY,
    MiniGameType.WORD_CONNECT: CognitiveDomain.LINGUISTIC,
    MiniGameType.SPATIAL_STACK: CognitiveDomain.SPATIAL,
    MiniGameType.CUBE_COUNT: CognitiveDomain.SPATIAL,
}

# High cognitive load games that can be rotated within one session
MIXABLE_GAMES: tuple[MiniGameType, ...] = (
    MiniGameType.SPEED_MATH,
    MiniGameType.PARADOX_FLOW,
    MiniGameType.SUIT_DECEPTION,
    MiniGameType.CHIMP_MEMORY,
    MiniGameType.CUBE_COUNT,
)


class GameConfig(BaseModel):
    """
    Session configuration chosen by the player.

    Attributes:
        mode: classic (time-boxed) or endless (sudden death)
        enabled_games: mini-games the session may rotate through; only
            games from MIXABLE_GAMES are kept, in their given order
    """

    mode: GameMode = GameMode.ENDLESS
    enabled_games: list[MiniGameType] = Field(default_factory=lambda: list(MIXABLE_GAMES))

    @field_validator("enabled_games")
    @classmethod
    def _require_mixable(cls, games: list[MiniGameType]) -> list[MiniGameType]:
        mixable = [g for g in dict.fromkeys(games) if g in MIXABLE_GAMES]
        if not mixable:
            raise ConfigurationError(
                "enabled_games must contain at least one of: "
                + ", ".join(g.value for g in MIXABLE_GAMES)
            )
        return mixable

    @property
    def is_endless(self) -> bool:
        """Check if this is a sudden-death run."""
        return self.mode == GameMode.ENDLESS
