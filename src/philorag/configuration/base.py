"""Protocol definitions for configuration objects.

Implementations can use @dataclass(frozen=True) for immutability.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from philorag.embedder import Embedder
    from philorag.question_generator import QuestionGenerator
    from philorag.settings import Settings
    from philorag.stores import VectorStore


@runtime_checkable
class ProviderConfig(Protocol):
    """Protocol for provider configurations.

    Provider configurations build the AI components:
    - Embedder: Creates vector embeddings for passages, questions and queries
    - QuestionGenerator: Generates hypothetical questions for passages
    """

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build an embedder for creating vector embeddings."""
        ...

    def build_question_generator(self, settings: Settings) -> QuestionGenerator:
        """Build a question generator.

        Args:
            settings: Settings containing questions_per_chunk and sampling options.
        """
        ...


@runtime_checkable
class StorageConfig(Protocol):
    """Protocol for storage configurations.

    Storage configurations build the vector store and say where fetched
    texts are cached.
    """

    @property
    def texts_dir(self) -> Path:
        """Directory holding cached source texts."""
        ...

    def build_store(self, settings: Settings) -> VectorStore:
        """Build the vector store."""
        ...
