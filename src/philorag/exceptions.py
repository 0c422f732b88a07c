"""Exceptions raised by the indexing and query pipelines."""


class PhiloragError(Exception):
    """Base class for all philorag errors.

    Attributes:
        source_id: The source being processed when the error occurred, if any.
    """

    def __init__(self, message: str, source_id: str | None = None) -> None:
        super().__init__(message)
        self.source_id = source_id


class FetchError(PhiloragError):
    """A source could not be downloaded or extracted. The source is skipped."""


class EnrichmentError(PhiloragError):
    """Question generation failed for a passage.

    The question generator catches this and substitutes a fallback question,
    so it never reaches the indexer.
    """


class EmbeddingError(PhiloragError):
    """The embedding provider failed or returned the wrong number of vectors."""


class PersistenceError(PhiloragError):
    """A batch upsert failed. The whole batch was rolled back."""


class QueryError(PhiloragError):
    """A query could not be served. No partial results are returned."""
