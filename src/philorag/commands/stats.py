"""Stats command - show how much of the catalog is indexed."""

from __future__ import annotations

import os
from pathlib import Path

from philorag.commands.base import StatsResult
from philorag.config import ConfigError, get_library_config, get_store


def stats(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> StatsResult:
    """Get passage counts overall, per philosopher and per source.

    A missing data directory is reported as an empty library.
    """
    config = get_library_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return StatsResult(success=False, error=config.message)

    if not os.path.exists(config.data_dir):
        return StatsResult(success=True)

    try:
        store = get_store(config)
    except Exception as e:
        return StatsResult(success=False, error=f"Failed to access database: {e}")

    try:
        collection = store.stats()
    except Exception as e:
        return StatsResult(success=False, error=f"Failed to read statistics: {e}")
    finally:
        store.close()

    return StatsResult(
        success=True,
        total_chunks=collection.total_chunks,
        by_philosopher=collection.by_philosopher,
        by_source=collection.by_source,
    )
