"""Configuration objects for philorag.

Instead of factory methods, you pass configuration objects that know how to
build their components.

Provider configurations (build AI components):
- LiteLLMProvider: Uses LiteLLM for question generation and embedding calls

Storage configurations (build the vector store):
- LocalStorage: SQLite or Chroma under one data directory

Example:
    from philorag import Library, LiteLLMProvider, LocalStorage

    library = Library(
        provider=LiteLLMProvider(llm="openai/gpt-5-mini", embedding="ollama/nomic-embed-text"),
        storage=LocalStorage("./philorag_data"),
    )
"""

from philorag.configuration.base import ProviderConfig, StorageConfig
from philorag.configuration.providers import LiteLLMProvider
from philorag.configuration.storage import LocalStorage

__all__ = [
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "LocalStorage",
]
