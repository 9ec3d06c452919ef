"""
Unit tests for the ad economy gate.

Ad calls are async; failures and declines must still grant the reward.
"""

import pytest

from axon.core.errors import InsufficientXPError
from axon.core.modes import GameMode
from axon.economy.gate import (
    AdEconomyGate,
    AdOutcome,
    grants_reward,
    should_gate_navigation,
)
from axon.persistence.models import AdEconomyState
from axon.persistence.repository import AD_STATE_KEY, USER_STATS_KEY


class TestShouldGateNavigation:
    @pytest.mark.parametrize("mode, frequency", [(GameMode.CLASSIC, 3), (GameMode.ENDLESS, 4)])
    def test_gates_exactly_at_frequency(self, repo, mode, frequency):
        gate = AdEconomyGate(repo)
        checks = []
        for _ in range(frequency):
            checks.append(gate.should_gate(mode))
            gate.record_completed_session()

        assert checks == [False] * frequency
        assert gate.should_gate(mode) is True

    def test_pure_function(self):
        state = AdEconomyState(games_played_since_last_ad=2)
        assert should_gate_navigation(state, GameMode.CLASSIC, {GameMode.CLASSIC: 2}) is True
        assert should_gate_navigation(state, GameMode.CLASSIC) is False

    def test_frequencies_from_settings(self, repo):
        from config import Settings

        gate = AdEconomyGate.from_settings(repo, Settings(ad_frequency_endless=1, ad_skip_cost_xp=10))
        assert gate.frequency(GameMode.ENDLESS) == 1
        assert gate.frequency(GameMode.CLASSIC) == 3
        assert gate.skip_cost == 10


class TestRewardPolicy:
    @pytest.mark.parametrize("outcome", list(AdOutcome))
    def test_every_outcome_grants(self, outcome):
        assert grants_reward(outcome) is True


class TestWatchAd:
    @pytest.mark.asyncio
    async def test_watch_resets_counter(self, repo, ad_provider):
        gate = AdEconomyGate(repo)
        for _ in range(3):
            gate.record_completed_session()

        outcome = await gate.watch_ad(ad_provider)

        assert outcome == AdOutcome.GRANTED
        assert gate.state.games_played_since_last_ad == 0
        assert gate.state.total_ads_watched == 1
        assert ad_provider.interstitial_calls == 1

    @pytest.mark.asyncio
    async def test_failed_ad_still_clears_gate(self, repo, ad_provider):
        ad_provider.interstitial = RuntimeError("no fill")
        gate = AdEconomyGate(repo)
        for _ in range(3):
            gate.record_completed_session()

        outcome = await gate.watch_ad(ad_provider)

        assert outcome == AdOutcome.FAILED
        assert gate.should_gate(GameMode.CLASSIC) is False

    @pytest.mark.asyncio
    async def test_declined_ad_is_classified(self, repo, ad_provider):
        ad_provider.interstitial = False
        outcome = await AdEconomyGate(repo).watch_ad(ad_provider)
        assert outcome == AdOutcome.DECLINED


class TestSkipWithXP:
    def test_skip_deducts_and_resets(self, rich_repo):
        gate = AdEconomyGate(rich_repo)
        for _ in range(3):
            gate.record_completed_session()

        remaining = gate.skip_with_xp()

        assert remaining == 3000
        assert rich_repo.user_stats.total_xp == 3000
        assert gate.state.games_played_since_last_ad == 0
        assert gate.state.total_ads_skipped == 1
        assert gate.state.xp_spent_on_skips == 2000

    def test_insufficient_xp_mutates_nothing(self, repo):
        stats = repo.user_stats.model_copy()
        stats.total_xp = 1999
        repo.save_user_stats(stats)
        gate = AdEconomyGate(repo)
        gate.record_completed_session()

        with pytest.raises(InsufficientXPError) as exc_info:
            gate.skip_with_xp()

        assert exc_info.value.cost == 2000
        assert exc_info.value.balance == 1999
        assert repo.user_stats.total_xp == 1999
        assert gate.state.games_played_since_last_ad == 1
        assert gate.state.total_ads_skipped == 0

    def test_exact_balance_reaches_zero(self, repo):
        stats = repo.user_stats.model_copy()
        stats.total_xp = 2000
        repo.save_user_stats(stats)

        assert AdEconomyGate(repo).skip_with_xp() == 0


class TestContinueOffer:
    @pytest.mark.asyncio
    async def test_continue_with_ad_does_not_touch_counter(self, repo, ad_provider):
        gate = AdEconomyGate(repo)
        gate.record_completed_session()

        assert await gate.continue_with_ad(ad_provider) is True
        assert gate.state.games_played_since_last_ad == 1
        assert ad_provider.rewarded_calls == 1

    @pytest.mark.asyncio
    async def test_rejected_rewarded_ad_still_grants(self, repo, ad_provider):
        ad_provider.rewarded = TimeoutError("timed out")
        assert await AdEconomyGate(repo).continue_with_ad(ad_provider) is True

    def test_spend_xp(self, rich_repo):
        gate = AdEconomyGate(rich_repo, continue_cost=1500)
        assert gate.spend_xp() == 3500
        assert gate.state.games_played_since_last_ad == 0

    def test_spend_xp_insufficient(self, repo):
        gate = AdEconomyGate(repo)
        with pytest.raises(InsufficientXPError):
            gate.spend_xp()
        assert repo.user_stats.total_xp == 0


def test_counter_is_persisted(store, repo):
    gate = AdEconomyGate(repo)
    gate.record_completed_session()
    gate.record_completed_session()
    assert store.get(AD_STATE_KEY)["gamesPlayedSinceLastAd"] == 2


class TestNegativeCosts:
    @pytest.mark.parametrize("cost", [-1, -500])
    def test_negative_skip_cost_mutates_nothing(self, store, repo, cost):
        gate = AdEconomyGate(repo)
        gate.record_completed_session()

        with pytest.raises(ValueError):
            gate.skip_with_xp(cost)

        assert repo.user_stats.total_xp == 0
        assert gate.state.games_played_since_last_ad == 1
        assert gate.state.total_ads_skipped == 0
        assert store.get(USER_STATS_KEY) is None

    def test_negative_continue_cost_mints_nothing(self, rich_repo):
        gate = AdEconomyGate(rich_repo)
        with pytest.raises(ValueError):
            gate.spend_xp(-2000)
        assert rich_repo.user_stats.total_xp == 5000

    def test_settings_reject_negative_costs(self):
        from pydantic import ValidationError

        from config import Settings

        with pytest.raises(ValidationError):
            Settings(ad_skip_cost_xp=-1)
