"""Hypothetical question generation (HQE) for passages."""

from philorag.question_generator.base import QuestionGenerator
from philorag.question_generator.client import (
    QUESTION_GENERATION_PROMPT,
    ClientQuestionGenerator,
    fallback_question,
)
from philorag.question_generator.parser import (
    ParsedQuestions,
    ParseFailure,
    ParseResult,
    parse_questions,
)

__all__ = [
    "QuestionGenerator",
    "ClientQuestionGenerator",
    "QUESTION_GENERATION_PROMPT",
    "fallback_question",
    "parse_questions",
    "ParsedQuestions",
    "ParseFailure",
    "ParseResult",
]
