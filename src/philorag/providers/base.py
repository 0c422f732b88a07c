"""Abstract base classes for LLM and embedding providers."""

from abc import ABC, abstractmethod


class LLMClient(ABC):
    """Abstract base class for LLM completion providers.

    Implementations of this class provide text generation/completion
    capabilities. The interface is intentionally minimal to support
    the widest range of providers.

    Example:
        class MyLLMClient(LLMClient):
            def complete(self, messages, temperature=None, top_p=None):
                return my_api.chat(messages, temp=temperature)
    """

    @abstractmethod
    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> str:
        """Generate a completion for the given messages.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
                      Example: [{"role": "user", "content": "Hello"}]
            temperature: Optional sampling temperature. If None, use provider default.
            top_p: Optional nucleus sampling cutoff. If None, use provider default.

        Returns:
            The generated text response.
        """
        ...


class EmbeddingClient(ABC):
    """Abstract base class for embedding providers.

    Implementations generate vector embeddings for text. Providers often
    expose a cheaper call for a single input, so single and batched
    embedding are separate methods.

    Example:
        class MyEmbeddingClient(EmbeddingClient):
            def embed(self, texts):
                return my_api.embed_batch(texts)
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of embedding vectors, one per input text.
            Order is preserved (result[i] corresponds to texts[i]).
        """
        ...

    def embed_one(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text.

        Default implementation calls embed() with a one-item list.
        """
        return self.embed([text])[0]
