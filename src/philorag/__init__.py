"""philorag - question-enriched retrieval over classic philosophical texts.

Primary-source works are fetched, segmented into overlapping passages,
enriched with LLM-generated hypothetical questions (HQE) and stored with
their embeddings. Queries match against passages and their questions.

Quick Start (LiteLLM + Local Storage):
    from philorag import Library, LiteLLMProvider, LocalStorage

    library = Library(
        provider=LiteLLMProvider(
            llm="openai/gpt-5-mini",
            embedding="openai/text-embedding-3-small",
        ),
        storage=LocalStorage("./philorag_data"),
    )

    # Index one philosopher's works
    library.index(philosopher="aristotle")

    # Query
    response = library.retriever().query("What is virtue?", philosopher="aristotle")
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("philorag")
except PackageNotFoundError:
    __version__ = "unknown"

from philorag.chunker import Chunker

# Configuration objects
from philorag.configuration import (
    LiteLLMProvider,
    LocalStorage,
    ProviderConfig,
    StorageConfig,
)
from philorag.embedder import Embedder
from philorag.exceptions import (
    EmbeddingError,
    EnrichmentError,
    FetchError,
    PersistenceError,
    PhiloragError,
    QueryError,
)
from philorag.fetcher import TextFetcher

# Pipelines
from philorag.indexer import Indexer, IndexState

# Central configuration
from philorag.library import Library
from philorag.models import (
    ChunkMetadata,
    CollectionStats,
    QueryResponse,
    QueryResult,
    TextChunk,
    TextSource,
    chunk_id,
)

# Provider ABCs
from philorag.providers import EmbeddingClient, LLMClient
from philorag.question_generator import QuestionGenerator
from philorag.registry import SourceRegistry
from philorag.retriever import Retriever
from philorag.settings import Settings

# Storage
from philorag.stores import ChromaVectorStore, SQLiteVectorStore, VectorStore

__all__ = [
    # Version
    "__version__",
    # Models
    "TextSource",
    "TextChunk",
    "ChunkMetadata",
    "chunk_id",
    "QueryResult",
    "QueryResponse",
    "CollectionStats",
    # Config
    "Settings",
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "LocalStorage",
    # Errors
    "PhiloragError",
    "FetchError",
    "EnrichmentError",
    "EmbeddingError",
    "PersistenceError",
    "QueryError",
    # Components
    "Chunker",
    "Embedder",
    "QuestionGenerator",
    "TextFetcher",
    "SourceRegistry",
    "LLMClient",
    "EmbeddingClient",
    # Storage
    "VectorStore",
    "SQLiteVectorStore",
    "ChromaVectorStore",
    # Pipelines
    "Indexer",
    "IndexState",
    "Retriever",
    # Central configuration
    "Library",
]
