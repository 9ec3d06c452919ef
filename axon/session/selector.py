"""
Game Selector.

Picks the next mini-game after each resolved question:

- random:      uniform over the enabled games other than the current one
- round_robin: enabled games in order, wrapping around
- weighted:    like random, but games training a different cognitive
               domain than the current one are twice as likely
"""

from __future__ import annotations

import random
from enum import Enum

from axon.core.modes import GAME_DOMAINS, MiniGameType

CROSS_DOMAIN_WEIGHT = 2
SAME_DOMAIN_WEIGHT = 1


class SelectionPolicy(str, Enum):
    RANDOM = "random"
    ROUND_ROBIN = "round_robin"
    WEIGHTED = "weighted"


class GameSelector:
    """Chooses the next mini-game from a fixed enabled pool."""

    def __init__(
        self,
        enabled_games: list[MiniGameType],
        policy: SelectionPolicy | str = SelectionPolicy.WEIGHTED,
        rng: random.Random | None = None,
    ):
        if not enabled_games:
            raise ValueError("GameSelector needs at least one enabled game")
        self.enabled_games = list(enabled_games)
        self.policy = SelectionPolicy(policy)
        self.rng = rng or random.Random()

    def first(self) -> MiniGameType:
        """Game a session opens with."""
        if self.policy == SelectionPolicy.ROUND_ROBIN:
            return self.enabled_games[0]
        return self.rng.choice(self.enabled_games)

    def next_game(self, current: MiniGameType | None) -> MiniGameType:
        if len(self.enabled_games) == 1:
            return self.enabled_games[0]
        if current is None:
            return self.first()

        if self.policy == SelectionPolicy.ROUND_ROBIN:
            if current not in self.enabled_games:
                return self.enabled_games[0]
            index = self.enabled_games.index(current)
            return self.enabled_games[(index + 1) % len(self.enabled_games)]

        others = [g for g in self.enabled_games if g != current]
        if self.policy == SelectionPolicy.RANDOM:
            return self.rng.choice(others)

        current_domain = GAME_DOMAINS.get(current)
        weights = [
            CROSS_DOMAIN_WEIGHT if GAME_DOMAINS.get(g) != current_domain else SAME_DOMAIN_WEIGHT
            for g in others
        ]
        return self.rng.choices(others, weights=weights, k=1)[0]
