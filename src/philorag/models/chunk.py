"""Chunk data models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


def chunk_id(source_id: str, chunk_index: int) -> str:
    """Derive the stable identifier of a passage.

    Re-indexing the same source produces the same ids, which is what makes
    upserts idempotent.
    """
    return f"{source_id}-chunk-{chunk_index}"


class ChunkMetadata(BaseModel):
    """Fixed-field metadata attached to every indexed passage."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    philosopher: str
    source_id: str
    title: str
    author: str
    chunk_index: int = Field(ge=0)
    total_chunks: int = Field(ge=1)
    start_char: int = Field(ge=0)
    end_char: int

    @model_validator(mode="after")
    def _check_positions(self) -> "ChunkMetadata":
        if self.chunk_index >= self.total_chunks:
            raise ValueError(
                f"chunk_index {self.chunk_index} out of range for {self.total_chunks} chunks"
            )
        if self.start_char >= self.end_char:
            raise ValueError(
                f"start_char ({self.start_char}) must be less than end_char ({self.end_char})"
            )
        return self


class TextChunk(BaseModel):
    """A passage of a source text, optionally enriched with generated questions."""

    id: str
    content: str = Field(min_length=1)
    metadata: ChunkMetadata
    questions: list[str] = Field(default_factory=list)
    question_embeddings: list[list[float]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_id(self) -> "TextChunk":
        expected = chunk_id(self.metadata.source_id, self.metadata.chunk_index)
        if self.id != expected:
            raise ValueError(f"chunk id {self.id!r} does not match {expected!r}")
        return self

    @property
    def source_id(self) -> str:
        return self.metadata.source_id

    @property
    def chunk_index(self) -> int:
        return self.metadata.chunk_index

    @property
    def is_enriched(self) -> bool:
        """True once every generated question has its embedding."""
        return len(self.questions) == len(self.question_embeddings)
