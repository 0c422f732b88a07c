# tests/test_abcs.py
"""Tests for abstract base classes."""

from abc import ABC

import pytest

from philorag.embedder import Embedder
from philorag.providers import EmbeddingClient, LLMClient
from philorag.question_generator import QuestionGenerator
from philorag.stores import VectorStore


@pytest.mark.parametrize(
    "cls,method",
    [
        (Embedder, "embed_texts"),
        (QuestionGenerator, "generate"),
        (LLMClient, "complete"),
        (EmbeddingClient, "embed"),
        (VectorStore, "search"),
    ],
)
class TestABCs:
    def test_is_abstract(self, cls, method):
        assert issubclass(cls, ABC)

    def test_cannot_instantiate(self, cls, method):
        with pytest.raises(TypeError):
            cls()

    def test_has_method(self, cls, method):
        assert hasattr(cls, method)


class TestEmbeddingClientDefaults:
    def test_embed_one_delegates_to_embed(self):
        class Doubling(EmbeddingClient):
            def embed(self, texts):
                return [[float(len(t)) * 2] for t in texts]

        assert Doubling().embed_one("abc") == [6.0]


class TestVectorStoreDefaults:
    def test_is_indexed_uses_indices(self, sqlite_store, sample_source, chunk_factory):
        assert not sqlite_store.is_indexed(sample_source.id)

        sqlite_store.upsert_chunks([chunk_factory(sample_source, 0, "virtue")], [[1.0, 0.1]])

        assert sqlite_store.is_indexed(sample_source.id)
