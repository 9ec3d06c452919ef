"""Domain exceptions raised by the Axon engine."""

from __future__ import annotations


class AxonError(Exception):
    """Base class for all engine errors."""

    pass


class ConfigurationError(AxonError):
    """Raised when a game configuration cannot be played (e.g. no mixable games)."""

    pass


class InvalidTransitionError(AxonError):
    """Raised when a session event arrives in a state that cannot handle it."""

    def __init__(self, event: str, phase: str):
        self.event = event
        self.phase = phase
        super().__init__(f"Cannot handle '{event}' while session is {phase}")


class InsufficientXPError(AxonError):
    """Raised when an XP purchase exceeds the player's balance."""

    def __init__(self, cost: int, balance: int):
        self.cost = cost
        self.balance = balance
        super().__init__(f"Need {cost} XP, have {balance}")
