"""Tests for the LiteLLM provider clients."""

from unittest.mock import MagicMock, patch

import pytest

from philorag.providers import EmbeddingClient, LLMClient
from philorag.providers.litellm import (
    ChatModels,
    EmbeddingModels,
    LiteLLMClient,
    LiteLLMEmbeddingClient,
)


def completion_response(content):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


class TestLiteLLMClient:
    def test_is_llm_client(self):
        assert isinstance(LiteLLMClient(), LLMClient)

    def test_default_model(self):
        assert LiteLLMClient().model == ChatModels.GPT_5_MINI

    def test_complete(self):
        client = LiteLLMClient(model="openai/gpt-5-nano", api_base="http://localhost:1234/v1")
        messages = [{"role": "user", "content": "What is virtue?"}]

        with patch("philorag.providers.litellm.client.litellm.completion") as completion:
            completion.return_value = completion_response("A mean between vices.")
            result = client.complete(messages, temperature=0.7, top_p=0.9)

        assert result == "A mean between vices."
        kwargs = completion.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-5-nano"
        assert kwargs["messages"] == messages
        assert kwargs["temperature"] == 0.7
        assert kwargs["top_p"] == 0.9
        assert kwargs["api_base"] == "http://localhost:1234/v1"
        assert kwargs["drop_params"] is True
        assert "api_key" not in kwargs

    def test_omits_unset_sampling(self):
        with patch("philorag.providers.litellm.client.litellm.completion") as completion:
            completion.return_value = completion_response("ok")
            LiteLLMClient().complete([{"role": "user", "content": "hi"}])

        assert "temperature" not in completion.call_args.kwargs
        assert "top_p" not in completion.call_args.kwargs

    def test_none_content_raises(self):
        with patch("philorag.providers.litellm.client.litellm.completion") as completion:
            completion.return_value = completion_response(None)
            with pytest.raises(ValueError):
                LiteLLMClient().complete([{"role": "user", "content": "hi"}])

    def test_no_choices_raises(self):
        with patch("philorag.providers.litellm.client.litellm.completion") as completion:
            completion.return_value = MagicMock(choices=[])
            with pytest.raises(ValueError):
                LiteLLMClient().complete([{"role": "user", "content": "hi"}])


class TestLiteLLMEmbeddingClient:
    def test_is_embedding_client(self):
        assert isinstance(LiteLLMEmbeddingClient(), EmbeddingClient)

    def test_default_model(self):
        assert LiteLLMEmbeddingClient().model == EmbeddingModels.NOMIC_EMBED_TEXT_V15

    def test_embed_sorts_by_index(self):
        client = LiteLLMEmbeddingClient(model="ollama/nomic-embed-text", api_key="secret")

        with patch("philorag.providers.litellm.client.litellm.embedding") as embedding:
            embedding.return_value = MagicMock(
                data=[
                    {"index": 1, "embedding": [0.0, 1.0]},
                    {"index": 0, "embedding": [1.0, 0.0]},
                ]
            )
            vectors = client.embed(["first", "second"])

        assert vectors == [[1.0, 0.0], [0.0, 1.0]]
        kwargs = embedding.call_args.kwargs
        assert kwargs["input"] == ["first", "second"]
        assert kwargs["model"] == "ollama/nomic-embed-text"
        assert kwargs["api_key"] == "secret"

    def test_embed_empty(self):
        with patch("philorag.providers.litellm.client.litellm.embedding") as embedding:
            assert LiteLLMEmbeddingClient().embed([]) == []

        embedding.assert_not_called()

    def test_embed_one_sends_bare_string(self):
        with patch("philorag.providers.litellm.client.litellm.embedding") as embedding:
            embedding.return_value = MagicMock(data=[{"index": 0, "embedding": [0.5]}])
            vector = LiteLLMEmbeddingClient().embed_one("virtue")

        assert vector == [0.5]
        assert embedding.call_args.kwargs["input"] == "virtue"

    def test_embed_one_no_data(self):
        with patch("philorag.providers.litellm.client.litellm.embedding") as embedding:
            embedding.return_value = MagicMock(data=[])
            with pytest.raises(ValueError):
                LiteLLMEmbeddingClient().embed_one("virtue")
