"""Configuration loading utilities for philorag.

This module provides configuration loading that can be used by:
- CLI commands
- External applications using philorag as a library

It handles:
- Finding and loading philorag.yaml config files
- Loading .env files for API keys
- Building Settings objects from multiple sources
- Creating Library instances from configuration
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

if TYPE_CHECKING:
    from philorag.library import Library
    from philorag.settings import Settings
    from philorag.stores import VectorStore

from philorag.models import TextSource
from philorag.providers.litellm import ChatModels, EmbeddingModels

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_DATA_DIR = "./philorag_data"
CONFIG_FILES = ["philorag.yaml", "philorag.yml", ".philoragrc"]
ENV_FILE = ".env"

STORE_BACKENDS = ("sqlite", "chroma")


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from .env file if it exists.

    Existing environment variables are never overridden.

    Args:
        env_path: Path to .env file (default: .env in current directory)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip("'\"")
                if key not in os.environ:
                    os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file in current directory or parent directories.

    Args:
        start_dir: Directory to start searching from (default: cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir or Path.cwd()
    for _ in range(10):  # Limit search depth
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


VALID_ROOT_KEYS = {
    "llm_model",
    "embedding_model",
    "api_base",
    "data_dir",
    "store",
    "settings",
    "sources",
}

# Settings that can be given in YAML or as PHILORAG_<NAME> env vars
INT_SETTINGS = (
    "chunk_size",
    "chunk_overlap",
    "min_chunk_size",
    "questions_per_chunk",
    "embedding_batch_size",
    "upsert_batch_size",
    "progress_every",
    "default_limit",
    "adjacent_chunk_window",
    "num_retries",
)
FLOAT_SETTINGS = (
    "question_temperature",
    "question_top_p",
    "min_relevance_score",
    "context_expansion_threshold",
    "fetch_timeout",
    "download_delay",
)
STR_SETTINGS = ("question_generation_prompt",)

VALID_SETTINGS_KEYS = {*INT_SETTINGS, *FLOAT_SETTINGS, *STR_SETTINGS}


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Validate config and return warnings about unknown keys.

    Args:
        config: The loaded configuration dictionary
        config_path: Path to config file (for error messages)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    unknown_root = set(config.keys()) - VALID_ROOT_KEYS
    if unknown_root:
        path_str = str(config_path) if config_path else "config"
        warnings.append(f"Unknown config keys in {path_str}: {', '.join(sorted(unknown_root))}")

    settings = config.get("settings", {})
    if isinstance(settings, dict):
        unknown_settings = set(settings.keys()) - VALID_SETTINGS_KEYS
        if unknown_settings:
            warnings.append(f"Unknown settings keys: {', '.join(sorted(unknown_settings))}")

    store = config.get("store")
    if store is not None and store not in STORE_BACKENDS:
        warnings.append(f"Unknown store '{store}', expected one of: {', '.join(STORE_BACKENDS)}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found)
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()

    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if isinstance(config, dict):
        for warning in validate_config(config, config_path):
            logger.warning(warning)

    return config


def _safe_int(value: str | None) -> int | None:
    """Parse int from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _safe_float(value: str | None) -> float | None:
    """Parse float from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from PHILORAG_* environment variables.

    Returns only values that are explicitly set, so YAML settings are used
    unless overridden by env vars. Unparseable numbers are ignored.
    """
    result: dict[str, Any] = {}

    for name in INT_SETTINGS:
        if (val := _safe_int(os.environ.get(f"PHILORAG_{name.upper()}"))) is not None:
            result[name] = val
    for name in FLOAT_SETTINGS:
        if (fval := _safe_float(os.environ.get(f"PHILORAG_{name.upper()}"))) is not None:
            result[name] = fval
    for name in STR_SETTINGS:
        env_name = f"PHILORAG_{name.upper()}"
        if env_name in os.environ:
            result[name] = os.environ[env_name] or None

    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract known settings from the 'settings:' section of a YAML config."""
    yaml_settings = config.get("settings", {}) or {}
    return {key: value for key, value in yaml_settings.items() if key in VALID_SETTINGS_KEYS}


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build Settings object from YAML config and env vars.

    Precedence (highest to lowest):
    1. Environment variables
    2. YAML settings: section
    3. Settings class defaults

    Raises:
        pydantic.ValidationError: If the merged values are invalid
    """
    from philorag.settings import Settings

    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()

    return Settings(**{**yaml_settings, **env_settings})


def load_sources(config: dict[str, Any]) -> list[TextSource]:
    """Parse extra sources from the 'sources:' list of a YAML config.

    Raises:
        pydantic.ValidationError: If an entry is missing fields or malformed
    """
    entries = config.get("sources") or []
    return [TextSource.model_validate(entry) for entry in entries]


@dataclass
class LibraryConfig:
    """Configuration for creating a Library instance."""

    llm_model: str
    embedding_model: str
    data_dir: str
    settings: Settings
    store: str = "sqlite"
    api_base: str | None = None
    llm_api_key: str | None = None
    embedding_api_key: str | None = None
    sources: list[TextSource] = field(default_factory=list)


def get_library_config(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> LibraryConfig | ConfigError:
    """Get configuration for creating a Library instance.

    This extracts configuration without creating the instance, allowing
    the caller to handle errors appropriately.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        LibraryConfig with all settings, or ConfigError if invalid
    """
    try:
        config = load_config(config_path)
    except (OSError, yaml.YAMLError) as e:
        return ConfigError(message=f"Could not read config file: {e}")
    if not isinstance(config, dict):
        return ConfigError(message="Config file must contain a mapping at the top level")

    effective_data_dir = (
        data_dir
        or os.environ.get("PHILORAG_DATA_DIR")
        or config.get("data_dir")
        or DEFAULT_DATA_DIR
    )

    store = os.environ.get("PHILORAG_STORE") or config.get("store") or "sqlite"
    if store not in STORE_BACKENDS:
        return ConfigError(
            message=f"Unknown store '{store}'",
            suggestion=f"Supported stores: {', '.join(STORE_BACKENDS)}",
        )

    try:
        settings = build_settings(config)
        sources = load_sources(config)
    except ValidationError as e:
        return ConfigError(message=f"Invalid configuration: {e}")

    llm_model = os.environ.get("PHILORAG_LLM_MODEL") or config.get("llm_model")
    embedding_model = os.environ.get("PHILORAG_EMBEDDING_MODEL") or config.get("embedding_model")
    api_base = os.environ.get("PHILORAG_API_BASE") or config.get("api_base")

    return LibraryConfig(
        llm_model=llm_model or ChatModels.GPT_5_MINI,
        embedding_model=embedding_model or EmbeddingModels.NOMIC_EMBED_TEXT_V15,
        data_dir=effective_data_dir,
        settings=settings,
        store=store,
        api_base=api_base,
        llm_api_key=os.environ.get("PHILORAG_LLM_API_KEY"),
        embedding_api_key=os.environ.get("PHILORAG_EMBEDDING_API_KEY"),
        sources=sources,
    )


def create_library(config: LibraryConfig) -> Library:
    """Create a Library instance from configuration.

    Raises:
        ValueError: If an extra source reuses a built-in source id
    """
    from philorag.configuration import LiteLLMProvider, LocalStorage
    from philorag.library import Library
    from philorag.registry import SourceRegistry

    registry = SourceRegistry.default()
    if config.sources:
        registry = registry.with_sources(config.sources)

    return Library(
        provider=LiteLLMProvider(
            llm=config.llm_model,
            embedding=config.embedding_model,
            api_base=config.api_base,
            llm_api_key=config.llm_api_key,
            embedding_api_key=config.embedding_api_key,
        ),
        storage=LocalStorage(config.data_dir, backend=config.store),  # type: ignore[arg-type]
        settings=config.settings,
        registry=registry,
    )


def get_library(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> Library | ConfigError:
    """Create a Library instance based on configuration.

    Convenience wrapper around get_library_config and create_library.
    """
    config = get_library_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return config
    try:
        return create_library(config)
    except ValueError as e:
        return ConfigError(message=str(e), suggestion="Check the 'sources:' section of your config")


def get_store(config: LibraryConfig) -> VectorStore:
    """Open the configured vector store without building any provider.

    Used by read-only and administrative commands (stats, sources, clear).
    """
    from philorag.configuration import LocalStorage

    storage = LocalStorage(config.data_dir, backend=config.store)  # type: ignore[arg-type]
    return storage.build_store(config.settings)
