"""Indexing pipeline: fetch, segment, enrich, embed and persist sources."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from philorag.chunker import Chunker
from philorag.embedder import Embedder
from philorag.exceptions import PhiloragError
from philorag.fetcher import TextFetcher
from philorag.models import TextChunk, TextSource
from philorag.question_generator import QuestionGenerator
from philorag.stores import VectorStore
from philorag.stores.base import DEFAULT_UPSERT_BATCH_SIZE

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_EVERY = 5


class IndexState(Enum):
    """Where a source is in the indexing pipeline."""

    NOT_INDEXED = "Not indexed"
    FETCHING = "Fetching"
    SEGMENTING = "Segmenting"
    ENRICHING = "Enriching"
    EMBEDDING = "Embedding"
    PERSISTED = "Persisted"
    FAILED = "Failed"


@dataclass
class IndexProgress:
    """Progress update for one source.

    Attributes:
        source_id: Source being indexed
        state: Current pipeline state
        current: Chunks processed so far in this run
        total: Chunks to process in this run (0 when not known yet)
        message: Human-readable status message
    """

    source_id: str
    state: IndexState
    current: int = 0
    total: int = 0
    message: str = ""


ProgressCallback = Callable[[IndexProgress], None]


@dataclass
class SourceIndexResult:
    """Outcome of indexing a single source.

    Attributes:
        source_id: The source that was indexed
        state: PERSISTED on success, FAILED otherwise
        total_chunks: Passages the source segments into
        indexed: Passages written in this run
        skipped: Passages already present and left untouched (resume mode)
        pruned: Stale passages removed after a forced re-index
        stale: Passages stored beyond the current passage count (resume mode)
        questions: Questions generated in this run
        error: Error message when state is FAILED
    """

    source_id: str
    state: IndexState
    total_chunks: int = 0
    indexed: int = 0
    skipped: int = 0
    pruned: int = 0
    stale: int = 0
    questions: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.state is IndexState.PERSISTED


@dataclass
class IndexRunResult:
    """Outcome of indexing several sources."""

    results: list[SourceIndexResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def total_indexed(self) -> int:
        return sum(r.indexed for r in self.results)

    @property
    def errors(self) -> list[tuple[str, str]]:
        return [(r.source_id, r.error or "") for r in self.results if not r.success]


class Indexer:
    """Orchestrates the indexing pipeline.

    Pipeline, per source and strictly sequential:
    1. Fetch the text (cached after the first download)
    2. Segment it into passages
    3. Skip passages already in the store unless force is set
    4. For each batch: generate questions for each passage and embed them,
       embed the passage texts, then upsert the batch in one transaction

    A source whose fetch, embedding or persistence fails is marked FAILED
    and the run moves on to the next source.
    """

    def __init__(
        self,
        store: VectorStore,
        fetcher: TextFetcher,
        chunker: Chunker,
        question_generator: QuestionGenerator,
        embedder: Embedder,
        upsert_batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
    ) -> None:
        """Initialize the indexer with all required components.

        Args:
            store: Vector store receiving the passages
            fetcher: Fetcher providing source texts
            chunker: Segmenter splitting texts into passages
            question_generator: Generates hypothetical questions per passage
            embedder: Embeds questions and passages
            upsert_batch_size: Passages per persistence transaction
            progress_every: Emit an enrichment progress update every N passages
        """
        self.store = store
        self.fetcher = fetcher
        self.chunker = chunker
        self.question_generator = question_generator
        self.embedder = embedder
        self.upsert_batch_size = upsert_batch_size
        self.progress_every = progress_every

    def _enrich(self, chunk: TextChunk) -> None:
        """Attach generated questions and their embeddings to a chunk."""
        questions = self.question_generator.generate(chunk.content)
        chunk.questions = questions
        chunk.question_embeddings = self.embedder.embed_texts(questions) if questions else []

    def _process(
        self,
        source: TextSource,
        force: bool,
        result: SourceIndexResult,
        progress: Callable[[IndexState, int, int, str], None],
    ) -> None:
        existing = set() if force else self.store.indexed_chunk_indices(source.id)

        progress(IndexState.FETCHING, 0, 0, f"Fetching {source.title}")
        text = self.fetcher.fetch_text(source)

        progress(IndexState.SEGMENTING, 0, 0, "Segmenting text")
        chunks = self.chunker.chunk(text, source)
        result.total_chunks = len(chunks)
        if not chunks:
            raise PhiloragError(f"{source.title} produced no passages", source_id=source.id)

        result.stale = sum(1 for index in existing if index >= len(chunks))
        if result.stale:
            logger.warning(
                "%s now segments into %d chunks but %d stale chunks remain; "
                "re-index with force to prune them",
                source.id,
                len(chunks),
                result.stale,
            )

        pending = [c for c in chunks if c.chunk_index not in existing]
        result.skipped = len(chunks) - len(pending)
        if not pending:
            logger.info("%s already fully indexed (%d chunks)", source.id, len(chunks))
            return

        logger.info(
            "Indexing %d of %d chunks for %s%s",
            len(pending),
            len(chunks),
            source.id,
            " (forced)" if force else "",
        )

        processed = 0
        for start in range(0, len(pending), self.upsert_batch_size):
            batch = pending[start : start + self.upsert_batch_size]

            for chunk in batch:
                self._enrich(chunk)
                processed += 1
                result.questions += len(chunk.questions)
                if processed % self.progress_every == 0 or processed == len(pending):
                    progress(
                        IndexState.ENRICHING,
                        processed,
                        len(pending),
                        f"Processed {processed}/{len(pending)} chunks",
                    )

            progress(IndexState.EMBEDDING, processed, len(pending), "Embedding passages")
            embeddings = self.embedder.embed_texts([c.content for c in batch])
            result.indexed += self.store.upsert_chunks(
                batch, embeddings, batch_size=self.upsert_batch_size
            )

        if force:
            result.pruned = self.store.prune_source(source.id, len(chunks))

    def index_source(
        self,
        source: TextSource,
        force: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> SourceIndexResult:
        """Index one source.

        In resume mode (the default) only passages missing from the store are
        processed. With force, every passage is regenerated and upserted and
        passages beyond the new chunk count are pruned.

        Never raises for pipeline failures; they are reported as FAILED.
        """
        result = SourceIndexResult(source_id=source.id, state=IndexState.NOT_INDEXED)

        def progress(state: IndexState, current: int, total: int, message: str) -> None:
            result.state = state
            logger.debug("[%s] %s %d/%d: %s", source.id, state.value, current, total, message)
            if on_progress:
                on_progress(IndexProgress(source.id, state, current, total, message))

        try:
            self._process(source, force, result, progress)
        except PhiloragError as e:
            logger.error("Failed to index %s: %s", source.id, e)
            result.error = str(e)
            progress(IndexState.FAILED, result.indexed, result.total_chunks, str(e))
            return result
        except Exception as e:
            logger.exception("Unexpected error while indexing %s", source.id)
            result.error = f"{type(e).__name__}: {e}"
            progress(IndexState.FAILED, result.indexed, result.total_chunks, result.error)
            return result

        progress(
            IndexState.PERSISTED,
            result.indexed,
            result.total_chunks,
            f"Indexed {result.indexed} chunks, skipped {result.skipped}",
        )
        return result

    def index_sources(
        self,
        sources: list[TextSource],
        force: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> IndexRunResult:
        """Index several sources one after another."""
        run = IndexRunResult()
        for i, source in enumerate(sources, 1):
            logger.info("[%d/%d] %s", i, len(sources), source.title)
            run.results.append(self.index_source(source, force=force, on_progress=on_progress))

        logger.info("Indexing complete: %d succeeded, %d failed", run.succeeded, run.failed)
        return run
