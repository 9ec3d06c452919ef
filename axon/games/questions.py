"""
Reference question generators.

Pure generators for the two text-friendly mini-games, used by the terminal
runner and as the default QuestionSource:

- speedMath:  "a op b" with four numeric options, scaled by tier params
- colorMatch: Stroop item; name the ink colour, not the word
"""

from __future__ import annotations

import random
from typing import Any

from axon.adaptive.tiers import get_game_params
from axon.core.modes import MiniGameType
from axon.session.collaborators import QuestionPayload

OPTION_COUNT = 4
DISTRACTOR_SPREAD = 10

COLORS = ("RED", "BLUE", "GREEN", "YELLOW")


def _operands(rng: random.Random, op: str, max_operand: int) -> tuple[int, int, int]:
    if op == "+":
        a = rng.randint(1, max_operand)
        b = rng.randint(1, max_operand)
        return a, b, a + b
    if op == "-":
        a = rng.randint(2, max(2, max_operand))
        b = rng.randint(1, a - 1)
        return a, b, a - b
    # × and ÷ stay on the times tables
    limit = max(2, min(12, max_operand // 4))
    a = rng.randint(2, limit)
    b = rng.randint(2, limit)
    if op == "÷":
        return a * b, b, a
    return a, b, a * b


def generate_math_question(
    rng: random.Random | None = None,
    params: dict[str, Any] | None = None,
) -> QuestionPayload:
    """
    Build one arithmetic item.

    Args:
        rng: Random source (seed it for reproducible runs)
        params: Tier params with "operations" and "max_operand"
    """
    rng = rng or random.Random()
    params = params or get_game_params(1, MiniGameType.SPEED_MATH)
    op = rng.choice(params["operations"])
    a, b, answer = _operands(rng, op, params["max_operand"])

    options = {answer}
    while len(options) < OPTION_COUNT:
        candidate = answer + rng.randint(-DISTRACTOR_SPREAD, DISTRACTOR_SPREAD - 1)
        if candidate != answer and candidate > 0:
            options.add(candidate)
    shuffled = list(options)
    rng.shuffle(shuffled)

    return QuestionPayload(
        prompt=f"{a} {op} {b}",
        answer=answer,
        options=shuffled,
        meta={"kind": MiniGameType.SPEED_MATH.value, "operation": op},
    )


def generate_color_question(rng: random.Random | None = None) -> QuestionPayload:
    """The word names one colour, the ink is another; the answer is the ink."""
    rng = rng or random.Random()
    shuffled = list(COLORS)
    rng.shuffle(shuffled)
    word, ink = shuffled[0], shuffled[1]
    options = list(COLORS)
    rng.shuffle(options)
    return QuestionPayload(
        prompt=word,
        answer=ink,
        options=options,
        meta={"kind": MiniGameType.COLOR_MATCH.value, "ink": ink},
    )


class QuestionGenerator:
    """QuestionSource over the reference generators."""

    SUPPORTED = (MiniGameType.SPEED_MATH.value, MiniGameType.COLOR_MATCH.value)

    def __init__(self, rng: random.Random | None = None, tier: int = 1):
        self.rng = rng or random.Random()
        self.tier = tier

    def generate(self, kind: str) -> QuestionPayload:
        if kind == MiniGameType.SPEED_MATH.value:
            return generate_math_question(self.rng, get_game_params(self.tier, MiniGameType.SPEED_MATH))
        if kind == MiniGameType.COLOR_MATCH.value:
            return generate_color_question(self.rng)
        raise ValueError(f"No text generator for mini-game {kind!r}")
