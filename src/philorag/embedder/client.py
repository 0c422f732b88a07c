"""Client-based embedder implementation."""

import logging

from philorag.embedder.base import Embedder
from philorag.exceptions import EmbeddingError
from philorag.providers.base import EmbeddingClient

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50


class ClientEmbedder(Embedder):
    """Embedder that uses an EmbeddingClient for generating embeddings.

    Texts are sent in batches of at most batch_size. A batch holding exactly
    one text goes through the client's single-item call.

    Example:
        from philorag.providers.litellm import LiteLLMEmbeddingClient
        from philorag.embedder import ClientEmbedder

        client = LiteLLMEmbeddingClient(model="openai/text-embedding-3-small")
        embedder = ClientEmbedder(embedding_client=client)
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """Initialize the embedder.

        Args:
            embedding_client: Any EmbeddingClient implementation
            batch_size: Maximum texts per provider request
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self._client = embedding_client
        self.batch_size = batch_size

    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        try:
            return self._client.embed_one(text)
        except Exception as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (batched)."""
        embeddings: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            if len(batch) == 1:
                embeddings.append(self.embed_text(batch[0]))
                continue

            try:
                vectors = self._client.embed(batch)
            except Exception as e:
                raise EmbeddingError(f"Embedding request failed: {e}") from e

            if len(vectors) != len(batch):
                raise EmbeddingError(
                    f"Embedding provider returned {len(vectors)} vectors for {len(batch)} texts"
                )
            embeddings.extend(vectors)
            logger.debug("Embedded %d/%d texts", len(embeddings), len(texts))

        return embeddings
