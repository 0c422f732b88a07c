"""UI-agnostic command layer for philorag.

Commands return data structures instead of printing, and never raise for
expected failures; errors are reported through ``success`` and ``error``.

Usage:
    from philorag.commands import index, query, stats

    result = index.index(philosopher="plato", on_progress=my_callback)
    result = query.query("What is virtue?", philosophers=["aristotle"])
    result = stats.stats()
"""

from philorag.commands import clear, index, query, sources, stats
from philorag.commands.base import (
    ClearResult,
    CommandResult,
    CommandStage,
    IndexCommandResult,
    ProgressCallback,
    ProgressUpdate,
    QueryCommandResult,
    SourceIndexInfo,
    SourceInfo,
    SourcesResult,
    StatsResult,
)

__all__ = [
    # Base types
    "CommandStage",
    "ProgressUpdate",
    "ProgressCallback",
    "CommandResult",
    # Result types
    "IndexCommandResult",
    "SourceIndexInfo",
    "QueryCommandResult",
    "StatsResult",
    "SourceInfo",
    "SourcesResult",
    "ClearResult",
    # Command modules
    "index",
    "query",
    "stats",
    "sources",
    "clear",
]
