"""LiteLLM provider configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from philorag.embedder import Embedder
    from philorag.question_generator import QuestionGenerator
    from philorag.settings import Settings


@dataclass(frozen=True)
class LiteLLMProvider:
    """Provider configuration using LiteLLM for LLM and embedding calls.

    LiteLLM provides a unified interface to hosted providers (OpenAI,
    Anthropic, Gemini) and local servers (Ollama, LM Studio).

    Args:
        llm: LiteLLM model identifier for question generation.
             Examples: "openai/gpt-5-mini", "ollama/llama3.2"
        embedding: LiteLLM model identifier for embeddings.
                   Examples: "openai/text-embedding-3-small",
                   "lm_studio/text-embedding-nomic-embed-text-v1.5"
        api_base: Base URL shared by both models, for local servers
        llm_api_key: API key for the LLM, if not taken from the environment
        embedding_api_key: API key for the embedding model

    Example:
        provider = LiteLLMProvider(
            llm="lm_studio/qwen3-8b",
            embedding="lm_studio/text-embedding-nomic-embed-text-v1.5",
            api_base="http://localhost:1234/v1",
        )
    """

    llm: str
    embedding: str
    api_base: str | None = None
    llm_api_key: str | None = None
    embedding_api_key: str | None = None

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build a ClientEmbedder using the LiteLLM embedding client."""
        from philorag.embedder import ClientEmbedder
        from philorag.providers.litellm import LiteLLMEmbeddingClient

        embedding_client = LiteLLMEmbeddingClient(
            model=self.embedding,
            num_retries=settings.num_retries,
            api_key=self.embedding_api_key,
            api_base=self.api_base,
        )
        return ClientEmbedder(
            embedding_client=embedding_client, batch_size=settings.embedding_batch_size
        )

    def build_question_generator(self, settings: Settings) -> QuestionGenerator:
        """Build a ClientQuestionGenerator using the LiteLLM client.

        Args:
            settings: Settings containing questions_per_chunk,
                      question_generation_prompt, sampling and num_retries.
        """
        from philorag.providers.litellm import LiteLLMClient
        from philorag.question_generator import ClientQuestionGenerator

        llm_client = LiteLLMClient(
            model=self.llm,
            num_retries=settings.num_retries,
            api_key=self.llm_api_key,
            api_base=self.api_base,
        )
        return ClientQuestionGenerator(
            llm_client=llm_client,
            num_questions=settings.questions_per_chunk,
            system_prompt=settings.question_generation_prompt,
            temperature=settings.question_temperature,
            top_p=settings.question_top_p,
        )
