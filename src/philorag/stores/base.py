"""Abstract base class for vector storage."""

from abc import ABC, abstractmethod

from philorag.models import CollectionStats, QueryResult, TextChunk

DEFAULT_UPSERT_BATCH_SIZE = 50


def relevance_from_distance(distance: float) -> float:
    """Convert a cosine distance into a relevance score in [0, 1]."""
    return max(0.0, min(1.0, 1.0 - distance))


class VectorStore(ABC):
    """Persistent store of passages, their embeddings and question embeddings.

    A passage counts as indexed only once its row is committed together
    with all of its question vectors.
    """

    @abstractmethod
    def upsert_chunks(
        self,
        chunks: list[TextChunk],
        embeddings: list[list[float]],
        batch_size: int | None = None,
    ) -> int:
        """Insert or replace chunks by id, one transaction per batch.

        Returns the number of chunks written. Raises PersistenceError if a
        batch fails; that batch is rolled back, earlier batches stay.
        """
        ...

    @abstractmethod
    def search(
        self,
        embedding: list[float],
        limit: int,
        min_score: float = 0.0,
        philosopher: str | None = None,
        source_id: str | None = None,
    ) -> list[QueryResult]:
        """Nearest passages to embedding, best first, filtered before ranking.

        Raises QueryError if the backend fails or the stored vectors cannot
        be compared with embedding.
        """
        ...

    @abstractmethod
    def adjacent_chunks(
        self, source_id: str, chunk_index: int, window: int = 1
    ) -> list[QueryResult]:
        """Passages within window of chunk_index in the same source, excluding it."""
        ...

    @abstractmethod
    def get_chunk(self, source_id: str, chunk_index: int) -> QueryResult | None:
        """Retrieve one passage. Returns None if not found."""
        ...

    @abstractmethod
    def indexed_chunk_indices(self, source_id: str) -> set[int]:
        """Chunk indices already persisted for a source."""
        ...

    def is_indexed(self, source_id: str) -> bool:
        """True if at least one passage of the source is persisted."""
        return bool(self.indexed_chunk_indices(source_id))

    @abstractmethod
    def prune_source(self, source_id: str, keep_below: int) -> int:
        """Delete passages of a source with chunk_index >= keep_below."""
        ...

    @abstractmethod
    def delete_source(self, source_id: str) -> int:
        """Delete all passages of a source. Returns the number deleted."""
        ...

    @abstractmethod
    def count_chunks(self) -> int:
        """Count the total number of passages in the store."""
        ...

    @abstractmethod
    def stats(self) -> CollectionStats:
        """Passage counts overall, per philosopher and per source."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every passage. Administrative reset only."""
        ...

    def close(self) -> None:
        """Release resources held by the store."""
