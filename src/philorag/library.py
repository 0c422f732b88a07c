"""Central configuration class for philorag."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from philorag.configuration import ProviderConfig, StorageConfig
    from philorag.indexer import IndexRunResult, Indexer, ProgressCallback
    from philorag.models import CollectionStats, TextSource
    from philorag.retriever import Retriever
    from philorag.stores import VectorStore

from philorag.chunker import Chunker
from philorag.fetcher import TextFetcher
from philorag.registry import SourceRegistry
from philorag.settings import Settings

logger = logging.getLogger(__name__)


class Library:
    """Central configuration for the philosopher text library.

    Library bundles the store, the fetcher, the source catalog and the AI
    components so you can configure once and create Indexers/Retrievers
    from it.

    There are two ways to create a Library:

    1. With a storage bundle:

        from philorag import Library, LiteLLMProvider, LocalStorage

        library = Library(
            provider=LiteLLMProvider(
                llm="openai/gpt-5-mini",
                embedding="openai/text-embedding-3-small",
            ),
            storage=LocalStorage("./philorag_data"),
        )
        library.index(philosopher="plato")

    2. With an explicit store:

        from philorag.stores import SQLiteVectorStore

        library = Library.from_store(
            provider=LiteLLMProvider(...),
            store=SQLiteVectorStore("./data/philorag.db"),
            texts_dir="./data/texts",
        )
    """

    def __init__(
        self,
        *,
        provider: ProviderConfig,
        storage: StorageConfig | None = None,
        store: VectorStore | None = None,
        texts_dir: str | Path | None = None,
        settings: Settings | None = None,
        registry: SourceRegistry | None = None,
        fetcher: TextFetcher | None = None,
    ) -> None:
        """Create a Library.

        Args:
            provider: Provider configuration (builds embedder and question generator)
            storage: Storage bundle. Mutually exclusive with store/texts_dir.
            store: Explicit vector store. Requires texts_dir or fetcher.
            texts_dir: Directory for cached source texts when using store
            settings: Behavioral settings (chunk sizes, retrieval defaults, ...)
            registry: Source catalog. Defaults to the built-in catalog.
            fetcher: Explicit fetcher, e.g. one using a custom requests session

        Raises:
            ValueError: If neither or both of storage and store are provided
        """
        self.settings = settings if settings is not None else Settings()
        self.registry = registry if registry is not None else SourceRegistry.default()

        if storage is not None:
            if store is not None or texts_dir is not None:
                raise ValueError("Cannot mix 'storage' bundle with an explicit store")
            self.store = storage.build_store(self.settings)
            cache_dir: str | Path | None = storage.texts_dir
        elif store is not None:
            self.store = store
            cache_dir = texts_dir
        else:
            raise ValueError("Must provide either a 'storage' bundle or an explicit 'store'")

        if fetcher is None:
            if cache_dir is None:
                raise ValueError("An explicit store needs texts_dir or fetcher")
            fetcher = TextFetcher(cache_dir, timeout=self.settings.fetch_timeout)
        self.fetcher = fetcher

        self.embedder = provider.build_embedder(self.settings)
        self._question_generator = provider.build_question_generator(self.settings)

    @classmethod
    def from_store(
        cls,
        *,
        provider: ProviderConfig,
        store: VectorStore,
        texts_dir: str | Path,
        settings: Settings | None = None,
        registry: SourceRegistry | None = None,
    ) -> Library:
        """Create a Library around an already constructed store."""
        return cls(
            provider=provider,
            store=store,
            texts_dir=texts_dir,
            settings=settings,
            registry=registry,
        )

    def chunker(self) -> Chunker:
        return Chunker(
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
            min_chunk_size=self.settings.min_chunk_size,
        )

    def indexer(self) -> Indexer:
        """Create an Indexer using this library's components."""
        from philorag.indexer import Indexer

        return Indexer(
            store=self.store,
            fetcher=self.fetcher,
            chunker=self.chunker(),
            question_generator=self._question_generator,
            embedder=self.embedder,
            upsert_batch_size=self.settings.upsert_batch_size,
            progress_every=self.settings.progress_every,
        )

    def retriever(self) -> Retriever:
        """Create a Retriever using this library's store and embedder."""
        from philorag.retriever import Retriever

        return Retriever(
            store=self.store,
            embedder=self.embedder,
            default_limit=self.settings.default_limit,
            min_score=self.settings.min_relevance_score,
            context_window=self.settings.adjacent_chunk_window,
            context_expansion_threshold=self.settings.context_expansion_threshold,
        )

    def select_sources(
        self, philosopher: str | None = None, source_id: str | None = None
    ) -> list[TextSource]:
        """Sources matching the given filters, in catalog order.

        Raises:
            ValueError: If the source id or philosopher is unknown
        """
        if source_id is not None:
            source = self.registry.get(source_id)
            if source is None:
                raise ValueError(f"Unknown source: {source_id}")
            if philosopher is not None and source.philosopher != philosopher:
                raise ValueError(f"Source {source_id} does not belong to {philosopher}")
            return [source]

        if philosopher is not None:
            sources = self.registry.by_philosopher(philosopher)
            if not sources:
                raise ValueError(f"Unknown philosopher: {philosopher}")
            return sources

        return self.registry.all()

    def index(
        self,
        *,
        philosopher: str | None = None,
        source_id: str | None = None,
        force: bool = False,
        reset: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> IndexRunResult:
        """Index catalog sources, optionally filtered.

        Args:
            philosopher: Only index this philosopher's sources
            source_id: Only index this source
            force: Regenerate every passage instead of resuming
            reset: Clear the whole store first (implies force)
            on_progress: Optional callback for progress updates
        """
        sources = self.select_sources(philosopher, source_id)
        if reset:
            logger.warning("Clearing the vector store before indexing")
            self.store.clear()
            force = True
        return self.indexer().index_sources(sources, force=force, on_progress=on_progress)

    def stats(self) -> CollectionStats:
        return self.store.stats()

    def clear(self) -> None:
        """Remove every indexed passage. Cached texts are kept."""
        self.store.clear()

    def close(self) -> None:
        self.store.close()
