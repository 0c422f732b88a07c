"""LiteLLM client implementations for LLM and embedding APIs."""

from typing import Any

import litellm

from philorag.providers.base import EmbeddingClient, LLMClient
from philorag.providers.litellm.models import ChatModels, EmbeddingModels


class LiteLLMClient(LLMClient):
    """LiteLLM-based LLM client for text generation.

    Supports any model available through LiteLLM (OpenAI, Anthropic, Gemini,
    Ollama, LM Studio, etc.).

    Example:
        from philorag.providers.litellm import LiteLLMClient, ChatModels

        client = LiteLLMClient(model=ChatModels.GPT_5_MINI)
        response = client.complete([{"role": "user", "content": "Hello"}])

        # Local OpenAI-compatible server
        client = LiteLLMClient(model="lm_studio/qwen3-8b", api_base="http://localhost:1234/v1")
    """

    def __init__(
        self,
        model: str = ChatModels.GPT_5_MINI,
        num_retries: int = 3,
        api_key: str | None = None,
        api_base: str | None = None,
    ) -> None:
        """Initialize the LiteLLM client.

        Args:
            model: LiteLLM model identifier.
                   Examples: "openai/gpt-5-mini", "anthropic/claude-haiku-4-5-20251001"
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
            api_key: Optional API key. If None, LiteLLM reads the provider's env var.
            api_base: Optional base URL for self-hosted or proxy endpoints.
        """
        self.model = model
        self.num_retries = num_retries
        self.api_key = api_key
        self.api_base = api_base

    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> str:
        """Generate a completion using LiteLLM."""
        completion_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "drop_params": True,
            "num_retries": self.num_retries,
        }
        if temperature is not None:
            completion_kwargs["temperature"] = temperature
        if top_p is not None:
            completion_kwargs["top_p"] = top_p
        if self.api_key:
            completion_kwargs["api_key"] = self.api_key
        if self.api_base:
            completion_kwargs["api_base"] = self.api_base

        response = litellm.completion(**completion_kwargs)

        if not response.choices:
            raise ValueError(f"LLM returned no choices for model {self.model}")
        content = response.choices[0].message.content
        if content is None:
            raise ValueError(f"LLM returned None content for model {self.model}")
        return str(content)


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Supports any embedding model available through LiteLLM. A single text is
    sent as a bare string input, a batch as a list.

    Example:
        from philorag.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
        embeddings = client.embed(["Hello world", "How are you?"])
    """

    def __init__(
        self,
        model: str = EmbeddingModels.NOMIC_EMBED_TEXT_V15,
        num_retries: int = 3,
        api_key: str | None = None,
        api_base: str | None = None,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
                   Examples: "openai/text-embedding-3-small", "ollama/nomic-embed-text"
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
            api_key: Optional API key. If None, LiteLLM reads the provider's env var.
            api_base: Optional base URL for self-hosted or proxy endpoints.
        """
        self.model = model
        self.num_retries = num_retries
        self.api_key = api_key
        self.api_base = api_base

    def _embedding_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": self.model, "num_retries": self.num_retries}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base
        return kwargs

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []

        response = litellm.embedding(input=texts, **self._embedding_kwargs())
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]

    def embed_one(self, text: str) -> list[float]:
        """Generate a single embedding using LiteLLM."""
        response = litellm.embedding(input=text, **self._embedding_kwargs())
        if not response.data:
            raise ValueError(f"Embedding model {self.model} returned no data")
        return response.data[0]["embedding"]
