"""SQLite vector store implementation."""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import numpy as np

from philorag.exceptions import PersistenceError, QueryError
from philorag.models import CollectionStats, QueryResult, TextChunk
from philorag.stores.base import DEFAULT_UPSERT_BATCH_SIZE, VectorStore, relevance_from_distance

logger = logging.getLogger(__name__)

CHUNKS_TABLE = "philosopher_text_chunks"
QUESTIONS_TABLE = "philosopher_chunk_questions"

RESULT_COLUMNS = "id, content, philosopher, source_id, title, chunk_index"

UPSERT_CHUNK = f"""
    INSERT INTO {CHUNKS_TABLE} (
        id, content, embedding, philosopher, source_id, title, author,
        chunk_index, total_chunks, start_char, end_char
    )
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        content = excluded.content,
        embedding = excluded.embedding,
        philosopher = excluded.philosopher,
        source_id = excluded.source_id,
        title = excluded.title,
        author = excluded.author,
        chunk_index = excluded.chunk_index,
        total_chunks = excluded.total_chunks,
        start_char = excluded.start_char,
        end_char = excluded.end_char
"""


def _encode(vector: list[float]) -> bytes:
    return np.asarray(vector, dtype=np.float32).tobytes()


def _decode(blob: bytes) -> np.ndarray:
    return np.frombuffer(blob, dtype=np.float32)


def _cosine_similarities(matrix: np.ndarray, vector: np.ndarray) -> np.ndarray:
    """Cosine similarity of each row of matrix with vector. Zero vectors score 0."""
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(vector)
    with np.errstate(divide="ignore", invalid="ignore"):
        sims = (matrix @ vector) / norms
    return np.nan_to_num(sims, nan=0.0, posinf=0.0, neginf=0.0)


def _filters(
    philosopher: str | None, source_id: str | None, prefix: str = ""
) -> tuple[str, list[str]]:
    clauses = []
    params = []
    if philosopher is not None:
        clauses.append(f"{prefix}philosopher = ?")
        params.append(philosopher)
    if source_id is not None:
        clauses.append(f"{prefix}source_id = ?")
        params.append(source_id)
    where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


def _to_result(row: tuple, score: float) -> QueryResult:
    return QueryResult(
        id=row[0],
        content=row[1],
        philosopher=row[2],
        source_id=row[3],
        title=row[4],
        chunk_index=row[5],
        relevance_score=score,
    )


class SQLiteVectorStore(VectorStore):
    """SQLite-based vector store with exact cosine search.

    Passages live in one table and their question embeddings in another.
    Vectors are stored as float32 blobs and scored with numpy over the rows
    that match the query filters. The database runs in WAL mode so queries
    are not blocked while an indexing batch is being written.
    """

    def __init__(self, db_path: str, batch_size: int = DEFAULT_UPSERT_BATCH_SIZE) -> None:
        """Initialize the SQLite store."""
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.db_path = db_path
        self.batch_size = batch_size
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {CHUNKS_TABLE} (
                    id TEXT PRIMARY KEY,
                    content TEXT NOT NULL,
                    embedding BLOB NOT NULL,
                    philosopher TEXT NOT NULL,
                    source_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    author TEXT NOT NULL,
                    chunk_index INTEGER NOT NULL,
                    total_chunks INTEGER NOT NULL,
                    start_char INTEGER NOT NULL,
                    end_char INTEGER NOT NULL
                )
            """)
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {QUESTIONS_TABLE} (
                    chunk_id TEXT NOT NULL REFERENCES {CHUNKS_TABLE}(id) ON DELETE CASCADE,
                    question_index INTEGER NOT NULL,
                    question TEXT NOT NULL,
                    embedding BLOB NOT NULL,
                    PRIMARY KEY (chunk_id, question_index)
                )
            """)
            conn.execute(
                f"CREATE UNIQUE INDEX IF NOT EXISTS idx_chunks_source_index "
                f"ON {CHUNKS_TABLE}(source_id, chunk_index)"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_chunks_philosopher ON {CHUNKS_TABLE}(philosopher)"
            )
            conn.commit()

    def _write_batch(self, batch: list[tuple[TextChunk, list[float]]]) -> None:
        """Write one batch in a single transaction."""
        with self._connect() as conn, conn:
            for chunk, embedding in batch:
                if not chunk.is_enriched:
                    raise ValueError(
                        f"{chunk.id} has {len(chunk.questions)} questions but "
                        f"{len(chunk.question_embeddings)} question embeddings"
                    )
                meta = chunk.metadata
                conn.execute(
                    UPSERT_CHUNK,
                    (
                        chunk.id,
                        chunk.content,
                        _encode(embedding),
                        meta.philosopher,
                        meta.source_id,
                        meta.title,
                        meta.author,
                        meta.chunk_index,
                        meta.total_chunks,
                        meta.start_char,
                        meta.end_char,
                    ),
                )
                conn.execute(f"DELETE FROM {QUESTIONS_TABLE} WHERE chunk_id = ?", (chunk.id,))
                conn.executemany(
                    f"""
                    INSERT INTO {QUESTIONS_TABLE} (chunk_id, question_index, question, embedding)
                    VALUES (?, ?, ?, ?)
                    """,
                    [
                        (chunk.id, i, question, _encode(vector))
                        for i, (question, vector) in enumerate(
                            zip(chunk.questions, chunk.question_embeddings, strict=True)
                        )
                    ],
                )

    def upsert_chunks(
        self,
        chunks: list[TextChunk],
        embeddings: list[list[float]],
        batch_size: int | None = None,
    ) -> int:
        """Insert or replace chunks by id, one transaction per batch."""
        if len(chunks) != len(embeddings):
            raise ValueError(f"Got {len(chunks)} chunks but {len(embeddings)} embeddings")

        size = batch_size or self.batch_size
        written = 0
        for start in range(0, len(chunks), size):
            batch = list(zip(chunks[start : start + size], embeddings[start : start + size]))
            try:
                self._write_batch(batch)
            except (sqlite3.Error, ValueError) as e:
                first, last = batch[0][0], batch[-1][0]
                raise PersistenceError(
                    f"Failed to persist chunks {first.id}..{last.id}: {e}",
                    source_id=first.source_id,
                ) from e
            written += len(batch)
            logger.debug("Persisted %d/%d chunks", written, len(chunks))

        return written

    def search(
        self,
        embedding: list[float],
        limit: int,
        min_score: float = 0.0,
        philosopher: str | None = None,
        source_id: str | None = None,
    ) -> list[QueryResult]:
        """Nearest passages by cosine similarity.

        A passage scores as its best match among its own embedding and the
        embeddings of its generated questions.
        """
        try:
            return self._rank(embedding, limit, min_score, philosopher, source_id)
        except (sqlite3.Error, ValueError) as e:
            raise QueryError(f"Vector search failed: {e}") from e

    def _rank(
        self,
        embedding: list[float],
        limit: int,
        min_score: float,
        philosopher: str | None,
        source_id: str | None,
    ) -> list[QueryResult]:
        where, params = _filters(philosopher, source_id)
        joined_where, _ = _filters(philosopher, source_id, prefix="c.")

        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {RESULT_COLUMNS}, embedding FROM {CHUNKS_TABLE}{where}", params
            ).fetchall()
            if not rows:
                return []
            question_rows = conn.execute(
                f"""
                SELECT q.chunk_id, q.embedding FROM {QUESTIONS_TABLE} q
                JOIN {CHUNKS_TABLE} c ON c.id = q.chunk_id{joined_where}
                """,
                params,
            ).fetchall()

        query = np.asarray(embedding, dtype=np.float32)
        best = _cosine_similarities(np.vstack([_decode(row[6]) for row in rows]), query)

        if question_rows:
            position = {row[0]: i for i, row in enumerate(rows)}
            owners = np.array([position[row[0]] for row in question_rows])
            question_sims = _cosine_similarities(
                np.vstack([_decode(row[1]) for row in question_rows]), query
            )
            np.maximum.at(best, owners, question_sims)

        scored = [
            (relevance_from_distance(1.0 - float(sim)), row)
            for sim, row in zip(best, rows, strict=True)
        ]
        scored = [(score, row) for score, row in scored if score >= min_score]
        scored.sort(key=lambda item: (-item[0], item[1][0]))

        return [_to_result(row, score) for score, row in scored[:limit]]

    def adjacent_chunks(
        self, source_id: str, chunk_index: int, window: int = 1
    ) -> list[QueryResult]:
        """Neighbouring passages, ascending by index, each scored 1.0."""
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {RESULT_COLUMNS} FROM {CHUNKS_TABLE}
                WHERE source_id = ? AND chunk_index BETWEEN ? AND ? AND chunk_index != ?
                ORDER BY chunk_index
                """,
                (source_id, max(0, chunk_index - window), chunk_index + window, chunk_index),
            ).fetchall()
        return [_to_result(row, 1.0) for row in rows]

    def get_chunk(self, source_id: str, chunk_index: int) -> QueryResult | None:
        """Retrieve one passage by source and index."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {RESULT_COLUMNS} FROM {CHUNKS_TABLE} "
                "WHERE source_id = ? AND chunk_index = ?",
                (source_id, chunk_index),
            ).fetchone()
        return _to_result(row, 1.0) if row else None

    def indexed_chunk_indices(self, source_id: str) -> set[int]:
        """Chunk indices already persisted for a source."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT chunk_index FROM {CHUNKS_TABLE} WHERE source_id = ?", (source_id,)
            ).fetchall()
        return {row[0] for row in rows}

    def prune_source(self, source_id: str, keep_below: int) -> int:
        """Delete passages of a source at or beyond keep_below."""
        with self._connect() as conn, conn:
            cursor = conn.execute(
                f"DELETE FROM {CHUNKS_TABLE} WHERE source_id = ? AND chunk_index >= ?",
                (source_id, keep_below),
            )
            return cursor.rowcount

    def delete_source(self, source_id: str) -> int:
        """Delete all passages of a source."""
        with self._connect() as conn, conn:
            cursor = conn.execute(f"DELETE FROM {CHUNKS_TABLE} WHERE source_id = ?", (source_id,))
            return cursor.rowcount

    def count_chunks(self) -> int:
        """Count the total number of passages in the store."""
        with self._connect() as conn:
            row = conn.execute(f"SELECT COUNT(id) FROM {CHUNKS_TABLE}").fetchone()
        return row[0] if row else 0

    def count_questions(self) -> int:
        """Count the total number of stored question embeddings."""
        with self._connect() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM {QUESTIONS_TABLE}").fetchone()
        return row[0] if row else 0

    def stats(self) -> CollectionStats:
        """Passage counts overall, per philosopher and per source."""
        with self._connect() as conn:
            by_philosopher = dict(
                conn.execute(
                    f"SELECT philosopher, COUNT(id) FROM {CHUNKS_TABLE} GROUP BY philosopher"
                ).fetchall()
            )
            by_source = dict(
                conn.execute(
                    f"SELECT source_id, COUNT(id) FROM {CHUNKS_TABLE} GROUP BY source_id"
                ).fetchall()
            )
        return CollectionStats(
            total_chunks=sum(by_source.values()),
            by_philosopher=by_philosopher,
            by_source=by_source,
        )

    def clear(self) -> None:
        """Remove every passage and question embedding."""
        with self._connect() as conn, conn:
            conn.execute(f"DELETE FROM {QUESTIONS_TABLE}")
            conn.execute(f"DELETE FROM {CHUNKS_TABLE}")
        logger.info("Cleared all passages from %s", self.db_path)
