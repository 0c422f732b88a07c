"""Data models for philorag."""

from philorag.models.chunk import ChunkMetadata, TextChunk, chunk_id
from philorag.models.results import CollectionStats, PassageContext, QueryResponse, QueryResult
from philorag.models.source import SourceFormat, TextSource

__all__ = [
    "TextSource",
    "SourceFormat",
    "ChunkMetadata",
    "TextChunk",
    "chunk_id",
    "QueryResult",
    "QueryResponse",
    "PassageContext",
    "CollectionStats",
]
