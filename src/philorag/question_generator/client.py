"""Client-based hypothetical question generator."""

import logging
import re

from philorag.exceptions import EnrichmentError
from philorag.providers.base import LLMClient
from philorag.question_generator.base import QuestionGenerator
from philorag.question_generator.parser import ParseFailure, parse_questions

logger = logging.getLogger(__name__)

QUESTION_GENERATION_PROMPT = """You help build a search index over primary-source \
philosophical and theological texts.

Given a passage, write questions that a reader might ask which this passage answers.

Requirements:
1. Each question must be answerable from the passage alone
2. Prefer the concepts, arguments and terms the passage actually discusses
3. Phrase questions the way a student or curious reader would ask them
4. Vary the question types (what, how, why, according to whom, etc.)

Return a numbered list with one question per line and no other text."""

USER_PROMPT = "Text:\n{passage}\n\nGenerate {num_questions} questions that this text would answer:"

FALLBACK_QUESTION = (
    "What philosophical or theological concept does this text discuss about {phrase}?"
)

SENTENCE_END = re.compile(r"[.!?]")


def key_phrase(text: str) -> str:
    """First three to five words of the first sentence, lowercased."""
    first_sentence = SENTENCE_END.split(text, maxsplit=1)[0] or text
    words = first_sentence.split()
    return " ".join(words[:5]).lower()


def fallback_question(passage: str) -> str:
    """Deterministic question used when the model cannot be reached."""
    return FALLBACK_QUESTION.format(phrase=key_phrase(passage))


class ClientQuestionGenerator(QuestionGenerator):
    """Question generator that uses an LLMClient.

    One model call is made per passage. If the call fails, a single
    deterministic fallback question is returned instead of raising.

    Example:
        from philorag.providers.litellm import LiteLLMClient
        from philorag.question_generator import ClientQuestionGenerator

        client = LiteLLMClient(model="openai/gpt-5-mini")
        generator = ClientQuestionGenerator(llm_client=client)
        questions = generator.generate(passage)
    """

    def __init__(
        self,
        llm_client: LLMClient,
        num_questions: int = 5,
        system_prompt: str | None = None,
        temperature: float | None = 0.7,
        top_p: float | None = 0.9,
    ) -> None:
        """Initialize the question generator.

        Args:
            llm_client: Any LLMClient implementation
            num_questions: Maximum number of questions per passage
            system_prompt: Custom system prompt
            temperature: LLM temperature. None to use model default.
            top_p: Nucleus sampling cutoff. None to use model default.
        """
        if num_questions < 1:
            raise ValueError(f"num_questions must be at least 1, got {num_questions}")
        self._client = llm_client
        self.num_questions = num_questions
        self.system_prompt = system_prompt or QUESTION_GENERATION_PROMPT
        self.temperature = temperature
        self.top_p = top_p

    def _build_messages(self, passage: str) -> list[dict]:
        return [
            {"role": "system", "content": self.system_prompt},
            {
                "role": "user",
                "content": USER_PROMPT.format(passage=passage, num_questions=self.num_questions),
            },
        ]

    def _request(self, passage: str) -> str:
        try:
            return self._client.complete(
                messages=self._build_messages(passage),
                temperature=self.temperature,
                top_p=self.top_p,
            )
        except Exception as e:
            raise EnrichmentError(f"Question generation failed: {e}") from e

    def generate(self, passage: str) -> list[str]:
        """Generate up to num_questions questions for a passage."""
        try:
            response_text = self._request(passage)
        except EnrichmentError as e:
            logger.warning("%s; using fallback question", e)
            return [fallback_question(passage)]

        result = parse_questions(response_text, self.num_questions)
        if isinstance(result, ParseFailure):
            logger.warning("Could not parse questions from model output: %s", result.reason)
            return []

        logger.debug("Parsed %d questions (%s)", len(result.questions), result.strategy)
        return result.questions
