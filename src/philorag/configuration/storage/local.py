"""Local filesystem storage configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from philorag.settings import Settings
    from philorag.stores import VectorStore

StoreBackend = Literal["sqlite", "chroma"]

SQLITE_FILENAME = "philorag.db"
CHROMA_DIRNAME = "chroma"
TEXTS_DIRNAME = "texts"


@dataclass(frozen=True)
class LocalStorage:
    """Local filesystem storage.

    All data is persisted under the specified directory:
    - philorag.db: Passages and question embeddings (SQLite backend)
    - chroma/: Passages and question embeddings (Chroma backend)
    - texts/: Cached source texts

    Args:
        data_dir: Base directory for all storage files.
                  Created if it doesn't exist.
        backend: "sqlite" (default) or "chroma"

    Example:
        storage = LocalStorage("./philorag_data", backend="chroma")
    """

    data_dir: str
    backend: StoreBackend = "sqlite"

    @property
    def texts_dir(self) -> Path:
        return Path(self.data_dir) / TEXTS_DIRNAME

    def build_store(self, settings: Settings) -> VectorStore:
        """Build the configured vector store, creating the data directory."""
        from philorag.stores import ChromaVectorStore, SQLiteVectorStore

        base = Path(self.data_dir)
        base.mkdir(parents=True, exist_ok=True)

        if self.backend == "chroma":
            return ChromaVectorStore(
                str(base / CHROMA_DIRNAME), batch_size=settings.upsert_batch_size
            )
        if self.backend == "sqlite":
            return SQLiteVectorStore(
                str(base / SQLITE_FILENAME), batch_size=settings.upsert_batch_size
            )
        raise ValueError(f"Unknown store backend: {self.backend!r}")
