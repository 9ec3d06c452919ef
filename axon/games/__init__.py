"""Reference question generators."""
from axon.games.questions import QuestionGenerator, generate_color_question, generate_math_question

__all__ = ["QuestionGenerator", "generate_color_question", "generate_math_question"]
