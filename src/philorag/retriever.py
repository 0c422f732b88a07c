"""Retrieval pipeline for philorag."""

import logging
import time

from philorag.embedder import Embedder
from philorag.exceptions import PhiloragError, QueryError
from philorag.models import CollectionStats, PassageContext, QueryResponse, QueryResult
from philorag.stores import VectorStore

logger = logging.getLogger(__name__)

NO_RESULTS = "No relevant passages found."


def format_results(results: list[QueryResult]) -> str:
    """Render results as a numbered, human-readable listing."""
    if not results:
        return NO_RESULTS

    blocks = []
    for i, result in enumerate(results, 1):
        score = round(result.relevance_score * 100)
        blocks.append(
            f"[{i}] {result.title} ({result.philosopher}, {score}% relevant)\n{result.content}"
        )
    return "\n\n---\n\n".join(blocks)


class Retriever:
    """Orchestrates the retrieval pipeline.

    A query is embedded once and matched against both passage embeddings
    and the embeddings of the questions generated for each passage.
    """

    def __init__(
        self,
        store: VectorStore,
        embedder: Embedder,
        default_limit: int = 10,
        min_score: float = 0.3,
        context_window: int = 1,
        context_expansion_threshold: float = 0.6,
    ) -> None:
        """Initialize the retriever.

        Args:
            store: Vector store to search
            embedder: Embedder for query embedding
            default_limit: Number of results when no limit is given
            min_score: Minimum relevance when none is given
            context_window: Neighbours on each side for context expansion
            context_expansion_threshold: Only results scoring at least this much
                get their neighbours attached
        """
        self.store = store
        self.embedder = embedder
        self.default_limit = default_limit
        self.min_score = min_score
        self.context_window = context_window
        self.context_expansion_threshold = context_expansion_threshold

    def _options(self, limit: int | None, min_score: float | None) -> tuple[int, float]:
        limit = self.default_limit if limit is None else limit
        min_score = self.min_score if min_score is None else min_score
        if limit < 1:
            raise QueryError(f"limit must be at least 1, got {limit}")
        if not 0.0 <= min_score <= 1.0:
            raise QueryError(f"min_score must be between 0 and 1, got {min_score}")
        return limit, min_score

    def _embed_query(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise QueryError("Query text must not be empty")
        try:
            return self.embedder.embed_text(text)
        except PhiloragError as e:
            raise QueryError(f"Failed to embed query: {e}") from e

    def _search(
        self,
        embedding: list[float],
        limit: int,
        min_score: float,
        philosopher: str | None,
        source_id: str | None,
    ) -> list[QueryResult]:
        try:
            return self.store.search(
                embedding,
                limit=limit,
                min_score=min_score,
                philosopher=philosopher,
                source_id=source_id,
            )
        except PhiloragError as e:
            raise QueryError(f"Search failed: {e}") from e

    def query(
        self,
        text: str,
        philosopher: str | None = None,
        source_id: str | None = None,
        limit: int | None = None,
        min_score: float | None = None,
        expand_context: bool = False,
    ) -> QueryResponse:
        """Find the passages most relevant to a question.

        Args:
            text: Natural-language query
            philosopher: Only search this philosopher's passages
            source_id: Only search this source's passages
            limit: Maximum results (default: self.default_limit)
            min_score: Minimum relevance in [0, 1] (default: self.min_score)
            expand_context: Attach adjacent passages to strong results

        Returns:
            QueryResponse with results sorted by relevance, best first

        Raises:
            QueryError: If the query is empty, limit or min_score is out of
                range, or embedding/search fails
        """
        limit, min_score = self._options(limit, min_score)

        started = time.perf_counter()
        embedding = self._embed_query(text)
        results = self._search(embedding, limit, min_score, philosopher, source_id)

        context: dict[str, list[QueryResult]] = {}
        if expand_context:
            for result in results:
                if result.relevance_score >= self.context_expansion_threshold:
                    context[result.id] = self.adjacent_chunks(result.source_id, result.chunk_index)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("Query returned %d results in %.0fms", len(results), elapsed_ms)
        return QueryResponse(query=text, results=results, elapsed_ms=elapsed_ms, context=context)

    def query_philosophers(
        self,
        text: str,
        philosophers: list[str],
        limit: int | None = None,
        min_score: float | None = None,
    ) -> QueryResponse:
        """Query several philosophers and merge the results by relevance.

        Each philosopher is searched with the full limit; the merged list is
        re-sorted and truncated to limit.
        """
        limit, min_score = self._options(limit, min_score)

        started = time.perf_counter()
        embedding = self._embed_query(text)

        merged: list[QueryResult] = []
        for philosopher in dict.fromkeys(philosophers):
            merged.extend(self._search(embedding, limit, min_score, philosopher, None))
        merged.sort(key=lambda r: (-r.relevance_score, r.id))

        elapsed_ms = (time.perf_counter() - started) * 1000
        return QueryResponse(query=text, results=merged[:limit], elapsed_ms=elapsed_ms)

    def adjacent_chunks(
        self, source_id: str, chunk_index: int, window: int | None = None
    ) -> list[QueryResult]:
        """Neighbouring passages of the same source, ascending by index."""
        window = self.context_window if window is None else window
        return self.store.adjacent_chunks(source_id, chunk_index, window=window)

    def passage_with_context(
        self, source_id: str, chunk_index: int, window: int | None = None
    ) -> PassageContext:
        """A passage and its neighbours. main is None if the passage is missing."""
        return PassageContext(
            main=self.store.get_chunk(source_id, chunk_index),
            context=self.adjacent_chunks(source_id, chunk_index, window=window),
        )

    def stats(self) -> CollectionStats:
        return self.store.stats()

    def is_ready(self) -> bool:
        """True once at least one passage has been indexed."""
        return self.store.count_chunks() > 0
