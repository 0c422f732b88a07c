"""Vector storage backends."""

from philorag.stores.base import VectorStore, relevance_from_distance
from philorag.stores.chroma import ChromaVectorStore
from philorag.stores.sqlite_vector import SQLiteVectorStore

__all__ = [
    "VectorStore",
    "SQLiteVectorStore",
    "ChromaVectorStore",
    "relevance_from_distance",
]
