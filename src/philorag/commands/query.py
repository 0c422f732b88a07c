"""Query command - search the indexed passages.

This module provides the core query logic that the CLI uses.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from philorag.commands.base import QueryCommandResult
from philorag.config import ConfigError, create_library, get_library_config

if TYPE_CHECKING:
    from philorag.library import Library


def query(
    text: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    philosophers: list[str] | None = None,
    source_id: str | None = None,
    limit: int | None = None,
    min_score: float | None = None,
    context: bool = False,
) -> QueryCommandResult:
    """Query the library with a natural-language question.

    Args:
        text: The question to search for
        data_dir: Override data directory
        config_path: Override config file path
        philosophers: Restrict to these philosophers. Several philosophers
            are queried separately and merged by relevance.
        source_id: Restrict to one source
        limit: Maximum number of results (None for default)
        min_score: Minimum relevance score (None for default)
        context: Attach adjacent passages to strong results

    Returns:
        QueryCommandResult with results sorted by relevance
    """
    config = get_library_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return QueryCommandResult(success=False, query=text, error=config.message)

    if not os.path.exists(config.data_dir):
        return QueryCommandResult(
            success=False,
            query=text,
            error=f"Data directory not found: {config.data_dir}. Run 'philorag index' first.",
        )

    try:
        library = create_library(config)
    except Exception as e:
        return QueryCommandResult(success=False, query=text, error=f"Failed to open library: {e}")

    try:
        return query_with_library(
            library,
            text,
            philosophers=philosophers,
            source_id=source_id,
            limit=limit,
            min_score=min_score,
            context=context,
        )
    finally:
        library.close()


def query_with_library(
    library: Library,
    text: str,
    philosophers: list[str] | None = None,
    source_id: str | None = None,
    limit: int | None = None,
    min_score: float | None = None,
    context: bool = False,
) -> QueryCommandResult:
    """Query using an existing Library instance."""
    retriever = library.retriever()
    philosophers = list(dict.fromkeys(philosophers or []))

    try:
        if len(philosophers) > 1 and source_id is None:
            response = retriever.query_philosophers(
                text, philosophers, limit=limit, min_score=min_score
            )
        else:
            response = retriever.query(
                text,
                philosopher=philosophers[0] if philosophers else None,
                source_id=source_id,
                limit=limit,
                min_score=min_score,
                expand_context=context,
            )
    except Exception as e:
        return QueryCommandResult(success=False, query=text, error=f"Query failed: {e}")

    return QueryCommandResult(
        success=True,
        query=text,
        results=response.results,
        context=response.context,
        elapsed_ms=response.elapsed_ms,
    )
