"""Index command - fetch, enrich and store catalog sources.

This module provides the core indexing logic that the CLI uses.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from philorag.commands.base import (
    CommandStage,
    IndexCommandResult,
    ProgressCallback,
    ProgressUpdate,
    SourceIndexInfo,
)
from philorag.config import ConfigError, create_library, get_library_config
from philorag.indexer import IndexProgress, IndexState
from philorag.models import TextSource

# Map pipeline states to CommandStage
STAGE_MAP = {
    IndexState.FETCHING: CommandStage.FETCHING,
    IndexState.SEGMENTING: CommandStage.SEGMENTING,
    IndexState.ENRICHING: CommandStage.ENRICHING,
    IndexState.EMBEDDING: CommandStage.EMBEDDING,
    IndexState.PERSISTED: CommandStage.COMPLETE,
    IndexState.FAILED: CommandStage.FAILED,
}


def index(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    philosopher: str | None = None,
    source_id: str | None = None,
    force: bool = False,
    reset: bool = False,
    on_progress: ProgressCallback | None = None,
    on_source_start: Callable[[TextSource, int, int], None] | None = None,
    on_source_complete: Callable[[SourceIndexInfo], None] | None = None,
) -> IndexCommandResult:
    """Index catalog sources into the vector store.

    Args:
        data_dir: Override data directory (uses config if not provided)
        config_path: Override config file path
        philosopher: Only index this philosopher's sources
        source_id: Only index this source
        force: Regenerate every passage instead of resuming
        reset: Clear the whole store before indexing (implies force)
        on_progress: Callback for progress updates during indexing
        on_source_start: Callback when starting a source
            (receives source, source_index, total_sources)
        on_source_complete: Callback when a source is done (receives SourceIndexInfo)

    Returns:
        IndexCommandResult with aggregated statistics and per-source results
    """
    config = get_library_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return IndexCommandResult(success=False, error=config.message)

    try:
        library = create_library(config)
    except Exception as e:
        return IndexCommandResult(success=False, error=f"Failed to open library: {e}")

    try:
        sources = library.select_sources(philosopher, source_id)
    except ValueError as e:
        library.close()
        return IndexCommandResult(success=False, error=str(e))

    def progress_adapter(update: IndexProgress) -> None:
        """Adapt the indexer's progress callback to our ProgressUpdate format."""
        if on_progress:
            on_progress(
                ProgressUpdate(
                    stage=STAGE_MAP.get(update.state, CommandStage.PROCESSING),
                    current=update.current,
                    total=update.total,
                    message=update.message,
                    source_id=update.source_id,
                )
            )

    result = IndexCommandResult(success=True)
    try:
        if reset:
            library.clear()
            force = True

        indexer = library.indexer()
        for i, source in enumerate(sources):
            if on_source_start:
                on_source_start(source, i, len(sources))

            outcome = indexer.index_source(
                source, force=force, on_progress=progress_adapter if on_progress else None
            )
            info = SourceIndexInfo(
                source_id=source.id,
                title=source.title,
                success=outcome.success,
                total_chunks=outcome.total_chunks,
                indexed=outcome.indexed,
                skipped=outcome.skipped,
                pruned=outcome.pruned,
                stale=outcome.stale,
                questions=outcome.questions,
                error=outcome.error,
            )
            result.source_results.append(info)

            if info.success:
                result.sources_indexed += 1
                result.total_chunks += info.indexed
                result.total_skipped += info.skipped
                result.total_questions += info.questions
            else:
                result.sources_failed += 1
                result.errors.append((source.id, info.error or "unknown error"))

            if on_source_complete:
                on_source_complete(info)
    except Exception as e:
        return IndexCommandResult(success=False, error=f"Indexing failed: {e}")
    finally:
        library.close()

    if result.sources_failed and not result.sources_indexed:
        result.success = False
        result.error = "All sources failed to index"

    return result
