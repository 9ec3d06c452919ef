"""Ad frequency gate and XP-priced skip/continue offers."""
from axon.economy.gate import (
    AdEconomyGate,
    AdOutcome,
    grants_reward,
    should_gate_navigation,
)

__all__ = [
    "AdEconomyGate",
    "AdOutcome",
    "grants_reward",
    "should_gate_navigation",
]
