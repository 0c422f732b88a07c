"""Behavioral settings for philorag.

These settings apply regardless of which LLM provider or vector store is
used. Settings are passed programmatically; the library itself does not
read environment variables. The ``philorag.config`` module does that for
the CLI and other applications.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class Settings(BaseModel):
    """Behavioral settings for indexing and retrieval.

    Example:
        settings = Settings(questions_per_chunk=3, min_relevance_score=0.4)
    """

    # Segmentation
    chunk_size: int = Field(default=1500, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    min_chunk_size: int = Field(default=200, ge=0)

    # Question generation
    questions_per_chunk: int = Field(default=5, ge=1)
    question_generation_prompt: str | None = None
    question_temperature: float | None = 0.7
    question_top_p: float | None = 0.9

    # Embedding and persistence
    embedding_batch_size: int = Field(default=50, ge=1)
    upsert_batch_size: int = Field(default=50, ge=1)
    progress_every: int = Field(default=5, ge=1)

    # Retrieval
    default_limit: int = Field(default=10, ge=1)
    min_relevance_score: float = Field(default=0.3, ge=0.0, le=1.0)
    adjacent_chunk_window: int = Field(default=1, ge=0)
    context_expansion_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    # Fetching
    fetch_timeout: float | None = None
    download_delay: float = Field(default=0.5, ge=0.0)

    # Retry configuration (LiteLLM handles exponential backoff for RateLimitError)
    num_retries: int = Field(default=3, ge=0)

    @model_validator(mode="after")
    def _check_chunk_sizes(self) -> Settings:
        if self.chunk_overlap > self.chunk_size // 2:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be at most half of "
                f"chunk_size ({self.chunk_size})"
            )
        if self.min_chunk_size >= self.chunk_size:
            raise ValueError(
                f"min_chunk_size ({self.min_chunk_size}) must be less than "
                f"chunk_size ({self.chunk_size})"
            )
        return self
