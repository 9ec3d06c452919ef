"""
Unit tests for game modes and the session configuration model.
"""

import pytest

from axon.core.errors import ConfigurationError
from axon.core.modes import GAME_DOMAINS, MIXABLE_GAMES, GameConfig, GameMode, MiniGameType


class TestGameConfig:
    def test_defaults(self):
        config = GameConfig()
        assert config.mode == GameMode.ENDLESS
        assert config.is_endless is True
        assert config.enabled_games == list(MIXABLE_GAMES)

    def test_accepts_stored_string_values(self):
        config = GameConfig(mode="classic", enabled_games=["speedMath", "chimpMemory"])
        assert config.mode == GameMode.CLASSIC
        assert config.enabled_games == [MiniGameType.SPEED_MATH, MiniGameType.CHIMP_MEMORY]

    def test_non_mixable_games_are_dropped(self):
        config = GameConfig(enabled_games=[MiniGameType.COLOR_MATCH, MiniGameType.CUBE_COUNT])
        assert config.enabled_games == [MiniGameType.CUBE_COUNT]

    def test_duplicates_are_dropped(self):
        config = GameConfig(enabled_games=["speedMath", "speedMath", "cubeCount"])
        assert config.enabled_games == [MiniGameType.SPEED_MATH, MiniGameType.CUBE_COUNT]

    def test_empty_pool_rejected(self):
        with pytest.raises(ConfigurationError):
            GameConfig(enabled_games=[])

    def test_unmixable_pool_rejected(self):
        with pytest.raises(ConfigurationError):
            GameConfig(enabled_games=[MiniGameType.FLASH_MEMORY, MiniGameType.WORD_CONNECT])


def test_every_game_has_a_domain():
    assert set(GAME_DOMAINS) == set(MiniGameType)
