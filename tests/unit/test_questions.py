"""
Unit tests for the reference question generators.
"""

import random

import pytest

from axon.adaptive.tiers import get_game_params
from axon.core.modes import MiniGameType
from axon.games.questions import (
    COLORS,
    QuestionGenerator,
    generate_color_question,
    generate_math_question,
)


class TestMathQuestions:
    @pytest.mark.parametrize("tier", [1, 2, 3, 4, 5])
    def test_answer_matches_prompt(self, tier):
        rng = random.Random(tier)
        params = get_game_params(tier, MiniGameType.SPEED_MATH)
        for _ in range(200):
            question = generate_math_question(rng, params)
            a, op, b = question.prompt.split()
            a, b = int(a), int(b)
            expected = {"+": a + b, "-": a - b, "×": a * b, "÷": a // b}[op]
            assert question.answer == expected
            assert op in params["operations"]
            if op == "÷":
                assert a % b == 0

    def test_options_are_unique_positive_and_contain_answer(self, rng):
        for _ in range(200):
            question = generate_math_question(rng)
            assert len(question.options) == 4
            assert len(set(question.options)) == 4
            assert question.answer in question.options
            assert all(option > 0 for option in question.options)

    def test_tier_one_has_no_multiplication(self, rng):
        ops = {generate_math_question(rng).meta["operation"] for _ in range(100)}
        assert ops <= {"+", "-"}


def test_color_question_answer_is_ink(rng):
    for _ in range(50):
        question = generate_color_question(rng)
        assert question.answer in COLORS
        assert question.answer != question.prompt
        assert sorted(question.options) == sorted(COLORS)
        assert question.is_correct(question.meta["ink"])


class TestQuestionGenerator:
    def test_generates_supported_kinds(self, rng):
        generator = QuestionGenerator(rng, tier=5)
        assert generator.generate("speedMath").meta["kind"] == "speedMath"
        assert generator.generate("colorMatch").meta["kind"] == "colorMatch"

    def test_unsupported_kind(self, rng):
        with pytest.raises(ValueError):
            QuestionGenerator(rng).generate("cubeCount")
