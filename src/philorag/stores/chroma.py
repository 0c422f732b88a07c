"""ChromaDB vector store implementation."""

import contextlib
import logging
from collections import Counter
from pathlib import Path
from typing import Any, cast

import chromadb

from philorag.exceptions import PersistenceError, QueryError
from philorag.models import CollectionStats, QueryResult, TextChunk, chunk_id
from philorag.stores.base import DEFAULT_UPSERT_BATCH_SIZE, VectorStore, relevance_from_distance

logger = logging.getLogger(__name__)

COLLECTION_NAME = "philosopher_texts"

PASSAGE = "passage"
QUESTION = "question"

# Records fetched per requested result; a passage may match through several questions
QUERY_OVERFETCH = 8


def _and(*conditions: dict[str, Any]) -> dict[str, Any]:
    if len(conditions) == 1:
        return conditions[0]
    return {"$and": list(conditions)}


def _question_id(passage_id: str, index: int) -> str:
    return f"{passage_id}::q{index}"


def _to_result(passage_id: str, document: str, meta: dict[str, Any], score: float) -> QueryResult:
    return QueryResult(
        id=passage_id,
        content=document,
        philosopher=cast(str, meta["philosopher"]),
        source_id=cast(str, meta["source_id"]),
        title=cast(str, meta["title"]),
        chunk_index=cast(int, meta["chunk_index"]),
        relevance_score=score,
    )


class ChromaVectorStore(VectorStore):
    """ChromaDB-based vector store.

    Each passage is one record of kind "passage". Its generated questions are
    separate records of kind "question" pointing back through chunk_id.
    Question records are written before the passage record, so a chunk only
    counts as indexed once its passage record exists.

    Chroma has no multi-record transactions: a failed batch raises
    PersistenceError but records already written in that batch remain.
    """

    def __init__(
        self,
        persist_dir: str,
        collection_name: str = COLLECTION_NAME,
        batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
    ) -> None:
        """Initialize the ChromaDB store."""
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        Path(persist_dir).mkdir(parents=True, exist_ok=True)
        self.collection_name = collection_name
        self.batch_size = batch_size
        self._client = chromadb.PersistentClient(path=persist_dir)
        self._collection = self._get_collection()

    def _get_collection(self) -> Any:
        return self._client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def close(self) -> None:
        """Close the store and release resources.

        ChromaDB doesn't have an official close method, so we call the internal
        _system.stop() to release file handles.

        See: https://github.com/chroma-core/chroma/issues/5868
        """
        self._collection = None
        if self._client is not None and hasattr(self._client, "_system"):
            with contextlib.suppress(Exception):
                self._client._system.stop()
        self._client = None  # type: ignore[assignment]

    def _write_batch(self, batch: list[tuple[TextChunk, list[float]]]) -> None:
        passage_ids = [chunk.id for chunk, _ in batch]
        self._collection.delete(
            where=_and({"kind": QUESTION}, {"chunk_id": {"$in": passage_ids}})
        )

        question_ids, question_vectors, question_docs, question_metas = [], [], [], []
        for chunk, _ in batch:
            if not chunk.is_enriched:
                raise ValueError(f"{chunk.id} has questions without embeddings")
            meta = chunk.metadata
            for i, (question, vector) in enumerate(
                zip(chunk.questions, chunk.question_embeddings, strict=True)
            ):
                question_ids.append(_question_id(chunk.id, i))
                question_vectors.append(vector)
                question_docs.append(question)
                question_metas.append(
                    {
                        "kind": QUESTION,
                        "chunk_id": chunk.id,
                        "philosopher": meta.philosopher,
                        "source_id": meta.source_id,
                        "chunk_index": meta.chunk_index,
                    }
                )
        if question_ids:
            self._collection.upsert(
                ids=question_ids,
                embeddings=question_vectors,
                documents=question_docs,
                metadatas=question_metas,
            )

        self._collection.upsert(
            ids=passage_ids,
            embeddings=[embedding for _, embedding in batch],
            documents=[chunk.content for chunk, _ in batch],
            metadatas=[
                {"kind": PASSAGE, "chunk_id": chunk.id, **chunk.metadata.model_dump()}
                for chunk, _ in batch
            ],
        )

    def upsert_chunks(
        self,
        chunks: list[TextChunk],
        embeddings: list[list[float]],
        batch_size: int | None = None,
    ) -> int:
        """Insert or replace chunks by id, batch by batch."""
        if len(chunks) != len(embeddings):
            raise ValueError(f"Got {len(chunks)} chunks but {len(embeddings)} embeddings")

        size = batch_size or self.batch_size
        written = 0
        for start in range(0, len(chunks), size):
            batch = list(zip(chunks[start : start + size], embeddings[start : start + size]))
            try:
                self._write_batch(batch)
            except Exception as e:
                first, last = batch[0][0], batch[-1][0]
                raise PersistenceError(
                    f"Failed to persist chunks {first.id}..{last.id}: {e}",
                    source_id=first.source_id,
                ) from e
            written += len(batch)

        return written

    def _filter(self, philosopher: str | None, source_id: str | None) -> dict[str, Any] | None:
        conditions: list[dict[str, Any]] = []
        if philosopher is not None:
            conditions.append({"philosopher": philosopher})
        if source_id is not None:
            conditions.append({"source_id": source_id})
        return _and(*conditions) if conditions else None

    def search(
        self,
        embedding: list[float],
        limit: int,
        min_score: float = 0.0,
        philosopher: str | None = None,
        source_id: str | None = None,
    ) -> list[QueryResult]:
        """Nearest passages, scored by their best passage or question match."""
        try:
            return self._rank(embedding, limit, min_score, philosopher, source_id)
        except Exception as e:
            raise QueryError(f"Vector search failed: {e}") from e

    def _rank(
        self,
        embedding: list[float],
        limit: int,
        min_score: float,
        philosopher: str | None,
        source_id: str | None,
    ) -> list[QueryResult]:
        total = self._collection.count()
        if total == 0:
            return []

        results = self._collection.query(
            query_embeddings=[embedding],
            n_results=min(total, limit * QUERY_OVERFETCH),
            where=self._filter(philosopher, source_id),
            include=["metadatas", "documents", "distances"],
        )

        best: dict[str, float] = {}
        passages: dict[str, tuple[str, dict[str, Any]]] = {}
        for meta, document, distance in zip(
            results["metadatas"][0], results["documents"][0], results["distances"][0], strict=True
        ):
            passage_id = cast(str, meta["chunk_id"])
            score = relevance_from_distance(distance)
            if score > best.get(passage_id, -1.0):
                best[passage_id] = score
            if meta["kind"] == PASSAGE:
                passages[passage_id] = (document, meta)

        missing = [pid for pid in best if pid not in passages]
        if missing:
            fetched = self._collection.get(ids=missing, include=["metadatas", "documents"])
            for pid, document, meta in zip(
                fetched["ids"], fetched["documents"], fetched["metadatas"], strict=True
            ):
                passages[pid] = (document, meta)

        ranked = sorted(
            (
                (score, pid)
                for pid, score in best.items()
                if score >= min_score and pid in passages
            ),
            key=lambda item: (-item[0], item[1]),
        )
        return [
            _to_result(pid, passages[pid][0], passages[pid][1], score)
            for score, pid in ranked[:limit]
        ]

    def _get_passages(self, where: dict[str, Any]) -> list[tuple[str, str, dict[str, Any]]]:
        fetched = self._collection.get(
            where=_and({"kind": PASSAGE}, where), include=["metadatas", "documents"]
        )
        return list(
            zip(fetched["ids"], fetched["documents"] or [], fetched["metadatas"] or [], strict=True)
        )

    def adjacent_chunks(
        self, source_id: str, chunk_index: int, window: int = 1
    ) -> list[QueryResult]:
        """Neighbouring passages, ascending by index, each scored 1.0."""
        indices = [
            i for i in range(max(0, chunk_index - window), chunk_index + window + 1)
            if i != chunk_index
        ]
        if not indices:
            return []
        rows = self._get_passages(
            _and({"source_id": source_id}, {"chunk_index": {"$in": indices}})
        )
        rows.sort(key=lambda row: row[2]["chunk_index"])
        return [_to_result(pid, document, meta, 1.0) for pid, document, meta in rows]

    def get_chunk(self, source_id: str, chunk_index: int) -> QueryResult | None:
        """Retrieve one passage by source and index."""
        fetched = self._collection.get(
            ids=[chunk_id(source_id, chunk_index)], include=["metadatas", "documents"]
        )
        if not fetched["ids"]:
            return None
        return _to_result(fetched["ids"][0], fetched["documents"][0], fetched["metadatas"][0], 1.0)

    def indexed_chunk_indices(self, source_id: str) -> set[int]:
        """Chunk indices already persisted for a source."""
        return {
            cast(int, meta["chunk_index"])
            for _, _, meta in self._get_passages({"source_id": source_id})
        }

    def prune_source(self, source_id: str, keep_below: int) -> int:
        """Delete passages and questions of a source at or beyond keep_below."""
        where = _and({"source_id": source_id}, {"chunk_index": {"$gte": keep_below}})
        count = len(self._get_passages(where))
        if count:
            self._collection.delete(where=where)
        return count

    def delete_source(self, source_id: str) -> int:
        """Delete all records of a source."""
        count = len(self._get_passages({"source_id": source_id}))
        if count:
            self._collection.delete(where={"source_id": source_id})
        return count

    def count_chunks(self) -> int:
        """Count passage records."""
        return len(self._collection.get(where={"kind": PASSAGE}, include=[])["ids"])

    def stats(self) -> CollectionStats:
        """Passage counts overall, per philosopher and per source."""
        fetched = self._collection.get(where={"kind": PASSAGE}, include=["metadatas"])
        metadatas = fetched["metadatas"] or []
        return CollectionStats(
            total_chunks=len(metadatas),
            by_philosopher=dict(Counter(str(meta["philosopher"]) for meta in metadatas)),
            by_source=dict(Counter(str(meta["source_id"]) for meta in metadatas)),
        )

    def clear(self) -> None:
        """Drop and recreate the collection."""
        self._client.delete_collection(self.collection_name)
        self._collection = self._get_collection()
        logger.info("Cleared collection %s", self.collection_name)
