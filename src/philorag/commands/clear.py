"""Clear command - remove every indexed passage.

Cached source texts are kept, so re-indexing does not download again.
"""

from __future__ import annotations

import os
from pathlib import Path

from philorag.commands.base import ClearResult
from philorag.config import ConfigError, get_library_config, get_store


def clear(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> ClearResult:
    """Delete all passages and question embeddings from the store."""
    config = get_library_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return ClearResult(success=False, error=config.message)

    if not os.path.exists(config.data_dir):
        return ClearResult(success=False, error="No database found.")

    try:
        store = get_store(config)
    except Exception as e:
        return ClearResult(success=False, error=f"Failed to access database: {e}")

    try:
        deleted = store.count_chunks()
        store.clear()
    except Exception as e:
        return ClearResult(success=False, error=f"Failed to clear database: {e}")
    finally:
        store.close()

    return ClearResult(success=True, chunks_deleted=deleted)
