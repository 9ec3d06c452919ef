"""
Ad Economy Gate.

Decides when an interstitial blocks navigation between sessions and prices
the in-session "continue" offer.

- Every completed session increments games_played_since_last_ad
- Navigation is gated once the counter reaches the mode's frequency
- The gate is cleared by watching an ad or paying skip_cost XP
- A continue (endless second chance) costs one rewarded ad or continue_cost
  XP, and never touches the interstitial counter

Ad calls never surface failures: whatever the provider resolves or raises,
the player gets the reward (see REWARD_POLICY).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from axon.core.errors import InsufficientXPError
from axon.core.modes import GameMode
from axon.persistence.models import AdEconomyState, UserStats
from axon.persistence.repository import ProgressRepository

if TYPE_CHECKING:
    from axon.session.collaborators import AdProvider

DEFAULT_FREQUENCIES: dict[GameMode, int] = {
    GameMode.CLASSIC: 3,
    GameMode.ENDLESS: 4,
}
DEFAULT_SKIP_COST = 2000
DEFAULT_CONTINUE_COST = 2000


class AdOutcome(str, Enum):
    """What the ad provider reported."""

    GRANTED = "granted"  # Ad completed
    DECLINED = "declined"  # Provider resolved False (closed early, no fill)
    FAILED = "failed"  # Provider raised


# Failed or declined ads must never block play
REWARD_POLICY: dict[AdOutcome, bool] = {
    AdOutcome.GRANTED: True,
    AdOutcome.DECLINED: True,
    AdOutcome.FAILED: True,
}


def grants_reward(outcome: AdOutcome) -> bool:
    return REWARD_POLICY[outcome]


def should_gate_navigation(
    ad_state: AdEconomyState,
    mode: GameMode,
    frequencies: Mapping[GameMode, int] = DEFAULT_FREQUENCIES,
) -> bool:
    """True once enough sessions have completed since the last ad."""
    return ad_state.games_played_since_last_ad >= frequencies[mode]


async def run_ad(show: Callable[[], Awaitable[bool]], kind: str = "ad") -> AdOutcome:
    """Await one ad call and classify its result."""
    try:
        completed = await show()
    except Exception as e:
        logger.warning(f"{kind} ad failed: {e}")
        return AdOutcome.FAILED
    if not completed:
        logger.info(f"{kind} ad was not completed")
        return AdOutcome.DECLINED
    return AdOutcome.GRANTED


class AdEconomyGate:
    """
    Frequency counter and XP pricing backed by the progress repository.

    Example:
        gate = AdEconomyGate(repo)
        gate.record_completed_session()
        if gate.should_gate(GameMode.CLASSIC):
            await gate.watch_ad(provider)
    """

    def __init__(
        self,
        repository: ProgressRepository,
        frequencies: Mapping[GameMode | str, int] | None = None,
        skip_cost: int = DEFAULT_SKIP_COST,
        continue_cost: int = DEFAULT_CONTINUE_COST,
    ):
        self.repository = repository
        self.frequencies = dict(DEFAULT_FREQUENCIES)
        for mode, value in (frequencies or {}).items():
            self.frequencies[GameMode(mode)] = value
        self.skip_cost = skip_cost
        self.continue_cost = continue_cost

    @classmethod
    def from_settings(cls, repository: ProgressRepository, settings=None) -> AdEconomyGate:
        if settings is None:
            from config import get_settings

            settings = get_settings()
        return cls(repository, **settings.get_economy_config())

    @property
    def state(self) -> AdEconomyState:
        return self.repository.ad_state

    @property
    def xp_balance(self) -> int:
        return self.repository.user_stats.total_xp

    def frequency(self, mode: GameMode) -> int:
        return self.frequencies[mode]

    def should_gate(self, mode: GameMode) -> bool:
        return should_gate_navigation(self.state, mode, self.frequencies)

    def can_afford(self, cost: int) -> bool:
        return self.xp_balance >= cost

    # =========================================================================
    # Interstitial gate
    # =========================================================================

    def record_completed_session(self) -> int:
        """Count one completed session. Returns the new counter value."""
        state = self.state.model_copy()
        state.games_played_since_last_ad += 1
        self.repository.save_ad_state(state)
        return state.games_played_since_last_ad

    async def watch_ad(self, provider: AdProvider) -> AdOutcome:
        """Show an interstitial and clear the gate."""
        outcome = await run_ad(provider.show_interstitial, "interstitial")
        if grants_reward(outcome):
            state = self.state.model_copy()
            state.games_played_since_last_ad = 0
            state.total_ads_watched += 1
            self.repository.save_ad_state(state)
        return outcome

    def skip_with_xp(self, cost: int | None = None) -> int:
        """
        Clear the gate by paying XP.

        Returns:
            Remaining XP balance

        Raises:
            InsufficientXPError: balance below cost (nothing is mutated)
        """
        cost = self.skip_cost if cost is None else cost
        stats = self._charged_stats(cost)

        state = self.state.model_copy()
        state.games_played_since_last_ad = 0
        state.total_ads_skipped += 1
        state.xp_spent_on_skips += cost

        self.repository.save_user_stats(stats)
        self.repository.save_ad_state(state)
        remaining = stats.total_xp
        logger.info(f"Interstitial skipped for {cost} XP")
        return remaining

    # =========================================================================
    # Continue offer
    # =========================================================================

    async def continue_with_ad(self, provider: AdProvider) -> bool:
        """Show a rewarded ad for a continue. Always grants per REWARD_POLICY."""
        outcome = await run_ad(provider.show_rewarded, "rewarded")
        return grants_reward(outcome)

    def spend_xp(self, cost: int | None = None) -> int:
        """
        Pay XP for a continue.

        Returns:
            Remaining XP balance

        Raises:
            InsufficientXPError: balance below cost (nothing is mutated)
        """
        cost = self.continue_cost if cost is None else cost
        stats = self._charged_stats(cost)
        self.repository.save_user_stats(stats)
        return stats.total_xp

    def _charged_stats(self, cost: int) -> UserStats:
        """Copy of UserStats with cost deducted. Nothing is saved."""
        if cost < 0:
            raise ValueError(f"XP cost must not be negative, got {cost}")
        balance = self.xp_balance
        if balance < cost:
            raise InsufficientXPError(cost, balance)
        stats = self.repository.user_stats.model_copy(deep=True)
        stats.total_xp = max(0, balance - cost)
        return stats
