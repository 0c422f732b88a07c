"""Curated model constants for the LiteLLM provider.

These are convenience constants for IDE autocomplete when using LiteLLM.
You can always pass any valid LiteLLM model string directly.

Example:
    from philorag.providers.litellm import ChatModels, LiteLLMClient

    # Using constants (IDE autocomplete works)
    llm_client = LiteLLMClient(model=ChatModels.CLAUDE_HAIKU_45)

    # Custom models still work
    llm_client = LiteLLMClient(model="my-custom/model")
"""


class ChatModels:
    """Chat/completion models for ClientQuestionGenerator (via LiteLLMClient)."""

    # OpenAI - GPT 5 Series
    GPT_5_MINI = "openai/gpt-5-mini"
    GPT_5_NANO = "openai/gpt-5-nano"

    # Anthropic - Claude 4.5 Series
    CLAUDE_SONNET_45 = "anthropic/claude-sonnet-4-5-20250929"
    CLAUDE_HAIKU_45 = "anthropic/claude-haiku-4-5-20251001"

    # Google Gemini 3
    GEMINI_3_FLASH = "gemini/gemini-3-flash-preview"

    # Local servers
    OLLAMA_LLAMA_32 = "ollama/llama3.2"
    LM_STUDIO_QWEN_3 = "lm_studio/qwen3-8b"


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient / ClientEmbedder."""

    # OpenAI
    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"

    # Google Gemini
    GEMINI_EMBEDDING_001 = "gemini/gemini-embedding-001"

    # Local servers
    NOMIC_EMBED_TEXT_V15 = "lm_studio/text-embedding-nomic-embed-text-v1.5"
    OLLAMA_NOMIC_EMBED_TEXT = "ollama/nomic-embed-text"
