"""Base types for the commands layer.

This module defines the data structures used by all commands:
- Progress callbacks for long-running operations
- Result types for each command
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from philorag.models import QueryResult


class CommandStage(Enum):
    """Stages of command execution for progress reporting."""

    # Index stages
    FETCHING = "Fetching"
    SEGMENTING = "Segmenting"
    ENRICHING = "Enriching"
    EMBEDDING = "Embedding"

    # General stages
    LOADING = "Loading"
    PROCESSING = "Processing"
    COMPLETE = "Complete"
    FAILED = "Failed"


@dataclass
class ProgressUpdate:
    """Progress update for long-running operations.

    Attributes:
        stage: Current stage of the operation
        current: Current item number
        total: Total number of items (0 for indeterminate)
        message: Optional status message
        source_id: Source the update refers to, if any
    """

    stage: CommandStage
    current: int
    total: int
    message: str | None = None
    source_id: str | None = None

    @property
    def is_indeterminate(self) -> bool:
        """True if progress is indeterminate (total unknown)."""
        return self.total == 0

    @property
    def percentage(self) -> int:
        """Progress as percentage (0-100). Returns 0 if indeterminate."""
        if self.total == 0:
            return 0
        return int(100 * self.current / self.total)


# Callback type for progress updates
ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class SourceIndexInfo:
    """Result for a single source in an index run."""

    source_id: str
    title: str
    success: bool
    total_chunks: int = 0
    indexed: int = 0
    skipped: int = 0
    pruned: int = 0
    stale: int = 0
    questions: int = 0
    error: str | None = None


@dataclass
class IndexCommandResult(CommandResult):
    """Result of the index command.

    Attributes:
        sources_indexed: Sources that ended PERSISTED
        sources_failed: Sources that ended FAILED
        total_chunks: Passages written in this run
        total_skipped: Passages already present and left untouched
        total_questions: Questions generated in this run
        source_results: Per-source results
        errors: List of (source_id, error_message) for failed sources
    """

    sources_indexed: int = 0
    sources_failed: int = 0
    total_chunks: int = 0
    total_skipped: int = 0
    total_questions: int = 0
    source_results: list[SourceIndexInfo] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class QueryCommandResult(CommandResult):
    """Result of the query command.

    Attributes:
        query: The original query
        results: Retrieved passages, best first
        context: Adjacent passages keyed by result id (context mode only)
        elapsed_ms: Time spent embedding and searching
    """

    query: str = ""
    results: list[QueryResult] = field(default_factory=list)
    context: dict[str, list[QueryResult]] = field(default_factory=dict)
    elapsed_ms: float = 0.0


@dataclass
class StatsResult(CommandResult):
    """Result of the stats command."""

    total_chunks: int = 0
    by_philosopher: dict[str, int] = field(default_factory=dict)
    by_source: dict[str, int] = field(default_factory=dict)


@dataclass
class SourceInfo:
    """A catalog source and how much of it is indexed."""

    source_id: str
    title: str
    author: str
    philosopher: str
    indexed_chunks: int = 0


@dataclass
class SourcesResult(CommandResult):
    """Result of the sources command."""

    sources: list[SourceInfo] = field(default_factory=list)


@dataclass
class ClearResult(CommandResult):
    """Result of the clear command.

    Attributes:
        chunks_deleted: Number of passages removed
    """

    chunks_deleted: int = 0
