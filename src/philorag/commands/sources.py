"""Sources command - list the catalog with indexing progress."""

from __future__ import annotations

import os
from pathlib import Path

from philorag.commands.base import SourceInfo, SourcesResult
from philorag.config import ConfigError, get_library_config, get_store
from philorag.registry import SourceRegistry


def sources(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    philosopher: str | None = None,
) -> SourcesResult:
    """List catalog sources, including any configured extra sources.

    Args:
        data_dir: Override data directory
        config_path: Override config file path
        philosopher: Only list this philosopher's sources

    Returns:
        SourcesResult with one entry per source and its indexed passage count
    """
    config = get_library_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return SourcesResult(success=False, error=config.message)

    try:
        registry = SourceRegistry.default().with_sources(config.sources)
    except ValueError as e:
        return SourcesResult(success=False, error=str(e))

    catalog = registry.by_philosopher(philosopher) if philosopher else registry.all()
    if philosopher and not catalog:
        return SourcesResult(success=False, error=f"Unknown philosopher: {philosopher}")

    counts: dict[str, int] = {}
    if os.path.exists(config.data_dir):
        try:
            store = get_store(config)
            try:
                counts = store.stats().by_source
            finally:
                store.close()
        except Exception as e:
            return SourcesResult(success=False, error=f"Failed to access database: {e}")

    return SourcesResult(
        success=True,
        sources=[
            SourceInfo(
                source_id=source.id,
                title=source.title,
                author=source.author,
                philosopher=source.philosopher,
                indexed_chunks=counts.get(source.id, 0),
            )
            for source in catalog
        ],
    )
