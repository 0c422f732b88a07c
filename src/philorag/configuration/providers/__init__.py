"""Provider configurations for philorag."""

from philorag.configuration.providers.litellm import LiteLLMProvider

__all__ = ["LiteLLMProvider"]
