"""LiteLLM provider clients for philorag.

This module contains LiteLLM-based client implementations:
- LiteLLMClient: LLM completion using LiteLLM
- LiteLLMEmbeddingClient: Embeddings using LiteLLM
- ChatModels: Curated chat model constants
- EmbeddingModels: Curated embedding model constants

Usage:
    from philorag.providers.litellm import LiteLLMClient, ChatModels
    from philorag.question_generator import ClientQuestionGenerator

    client = LiteLLMClient(model=ChatModels.GPT_5_MINI)
    generator = ClientQuestionGenerator(llm_client=client)
"""

from philorag.providers.litellm.client import LiteLLMClient, LiteLLMEmbeddingClient
from philorag.providers.litellm.models import ChatModels, EmbeddingModels

__all__ = [
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # Clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]
