"""Result data models for queries and collection statistics."""

from typing import Any

from pydantic import BaseModel, Field


class QueryResult(BaseModel):
    """A single retrieved passage with its relevance score."""

    id: str
    content: str
    philosopher: str
    source_id: str
    title: str
    chunk_index: int
    relevance_score: float = Field(ge=0.0, le=1.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "philosopher": self.philosopher,
            "sourceId": self.source_id,
            "title": self.title,
            "chunkIndex": self.chunk_index,
            "relevanceScore": self.relevance_score,
        }


class QueryResponse(BaseModel):
    """Full response to a retrieval query.

    ``context`` maps a result id to its adjacent passages and is only
    populated when context expansion was requested.
    """

    query: str
    results: list[QueryResult]
    elapsed_ms: float
    context: dict[str, list[QueryResult]] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "results": [r.to_dict() for r in self.results],
            "elapsedMs": self.elapsed_ms,
        }


class PassageContext(BaseModel):
    """A passage together with its neighbours from the same source."""

    main: QueryResult | None
    context: list[QueryResult] = Field(default_factory=list)


class CollectionStats(BaseModel):
    """Counts of indexed passages across the corpus."""

    total_chunks: int = 0
    by_philosopher: dict[str, int] = Field(default_factory=dict)
    by_source: dict[str, int] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalChunks": self.total_chunks,
            "byPhilosopher": dict(self.by_philosopher),
            "bySource": dict(self.by_source),
        }
