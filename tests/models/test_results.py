"""Tests for result models."""

import pytest
from pydantic import ValidationError

from philorag.models import CollectionStats, QueryResponse, QueryResult


def result(score: float = 0.8) -> QueryResult:
    return QueryResult(
        id="plato-republic-chunk-0",
        content="Justice is the virtue of the soul.",
        philosopher="plato",
        source_id="plato-republic",
        title="The Republic",
        chunk_index=0,
        relevance_score=score,
    )


class TestQueryResult:
    @pytest.mark.parametrize("score", [-0.1, 1.1])
    def test_score_bounds(self, score):
        with pytest.raises(ValidationError):
            result(score)

    def test_to_dict(self):
        assert result().to_dict() == {
            "id": "plato-republic-chunk-0",
            "content": "Justice is the virtue of the soul.",
            "philosopher": "plato",
            "sourceId": "plato-republic",
            "title": "The Republic",
            "chunkIndex": 0,
            "relevanceScore": 0.8,
        }


class TestQueryResponse:
    def test_defaults(self):
        response = QueryResponse(query="What is justice?", results=[], elapsed_ms=1.5)
        assert response.context == {}

    def test_to_dict(self):
        response = QueryResponse(query="What is justice?", results=[result()], elapsed_ms=12.0)

        data = response.to_dict()

        assert data["query"] == "What is justice?"
        assert data["elapsedMs"] == 12.0
        assert data["results"][0]["sourceId"] == "plato-republic"


class TestCollectionStats:
    def test_empty(self):
        stats = CollectionStats()

        assert stats.total_chunks == 0
        assert stats.by_philosopher == {}

    def test_to_dict(self):
        stats = CollectionStats(
            total_chunks=3, by_philosopher={"plato": 3}, by_source={"plato-republic": 3}
        )

        assert stats.to_dict() == {
            "totalChunks": 3,
            "byPhilosopher": {"plato": 3},
            "bySource": {"plato-republic": 3},
        }
