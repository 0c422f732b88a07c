"""Tests for the client-based question generator."""

import pytest

from philorag.question_generator import (
    QUESTION_GENERATION_PROMPT,
    ClientQuestionGenerator,
    QuestionGenerator,
    fallback_question,
)

PASSAGE = "Virtue is a mean between two vices. It is a state concerned with choice."


class TestClientQuestionGenerator:
    def test_is_question_generator(self, llm_client_factory):
        assert isinstance(ClientQuestionGenerator(llm_client_factory()), QuestionGenerator)

    def test_generate_parses_response(self, llm_client_factory):
        client = llm_client_factory(
            response="1. What is virtue for Aristotle?\n2. Between which vices is virtue?"
        )
        generator = ClientQuestionGenerator(client, num_questions=2)

        questions = generator.generate(PASSAGE)

        assert questions == [
            "What is virtue for Aristotle?",
            "Between which vices is virtue?",
        ]

    def test_one_call_per_passage(self, llm_client_factory):
        client = llm_client_factory(response="1. What is virtue for Aristotle?")
        generator = ClientQuestionGenerator(client)

        generator.generate(PASSAGE)

        assert len(client.calls) == 1

    def test_messages_and_sampling(self, llm_client_factory):
        client = llm_client_factory(response="1. What is virtue for Aristotle?")
        generator = ClientQuestionGenerator(client, num_questions=3)

        generator.generate(PASSAGE)

        call = client.calls[0]
        assert call["temperature"] == 0.7
        assert call["top_p"] == 0.9
        system, user = call["messages"]
        assert system == {"role": "system", "content": QUESTION_GENERATION_PROMPT}
        assert PASSAGE in user["content"]
        assert "Generate 3 questions" in user["content"]

    def test_custom_prompt(self, llm_client_factory):
        client = llm_client_factory(response="1. What is virtue for Aristotle?")
        generator = ClientQuestionGenerator(client, system_prompt="Ask about ethics.")

        generator.generate(PASSAGE)

        assert client.calls[0]["messages"][0]["content"] == "Ask about ethics."

    def test_caps_question_count(self, llm_client_factory):
        response = "\n".join(f"{i}. What does section {i} argue?" for i in range(1, 9))
        generator = ClientQuestionGenerator(llm_client_factory(response=response), num_questions=5)

        assert len(generator.generate(PASSAGE)) == 5

    def test_model_failure_uses_fallback(self, llm_client_factory):
        client = llm_client_factory(error=ConnectionError("model offline"))
        generator = ClientQuestionGenerator(client)

        questions = generator.generate(PASSAGE)

        assert questions == [fallback_question(PASSAGE)]
        assert questions[0] == (
            "What philosophical or theological concept does this text discuss about "
            "virtue is a mean between?"
        )

    def test_unparseable_output_yields_no_questions(self, llm_client_factory):
        generator = ClientQuestionGenerator(llm_client_factory(response="Sorry, no."))

        assert generator.generate(PASSAGE) == []

    def test_invalid_num_questions(self, llm_client_factory):
        with pytest.raises(ValueError):
            ClientQuestionGenerator(llm_client_factory(), num_questions=0)


class TestFallbackQuestion:
    def test_deterministic(self):
        assert fallback_question(PASSAGE) == fallback_question(PASSAGE)

    def test_short_first_sentence(self):
        assert fallback_question("Know thyself.").endswith("about know thyself?")
