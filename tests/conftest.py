"""Shared pytest fixtures."""

import contextlib
import os
import tempfile

import pytest

from philorag.embedder import Embedder
from philorag.fetcher import TextFetcher
from philorag.models import ChunkMetadata, TextChunk, TextSource, chunk_id
from philorag.providers import LLMClient
from philorag.question_generator import QuestionGenerator

# Words the keyword embedder counts, one dimension each
VOCABULARY = [
    "virtue",
    "justice",
    "soul",
    "god",
    "pleasure",
    "state",
    "friendship",
    "death",
]


class KeywordEmbedder(Embedder):
    """Deterministic embedder counting vocabulary words.

    The final dimension is a small constant so that no vector is all zeros.
    """

    def __init__(self) -> None:
        self.calls = 0
        self.texts_embedded = 0

    def vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(word)) for word in VOCABULARY] + [0.1]

    def embed_text(self, text: str) -> list[float]:
        self.calls += 1
        self.texts_embedded += 1
        return self.vector(text)

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.calls += 1
        self.texts_embedded += len(texts)
        return [self.vector(t) for t in texts]


class MockGenerator(QuestionGenerator):
    """Generator asking one question about the first word of each passage."""

    def __init__(self) -> None:
        self.calls = 0

    def generate(self, passage: str) -> list[str]:
        self.calls += 1
        first_word = passage.split()[0].strip(".,;:").lower()
        return [f"What does the text say about {first_word}?"]


class FakeLLMClient(LLMClient):
    """LLM client returning scripted responses, or raising a scripted error."""

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> str:
        self.calls.append({"messages": messages, "temperature": temperature, "top_p": top_p})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def temp_dir():
    """Create a temporary directory for stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir

        # Cleanup ChromaDB's shared system cache to release file handles
        # See: https://github.com/chroma-core/chroma/issues/5868
        try:
            from chromadb.api.shared_system_client import SharedSystemClient

            if hasattr(SharedSystemClient, "_identifier_to_system"):
                identifiers_to_remove = [
                    identifier
                    for identifier in list(SharedSystemClient._identifier_to_system.keys())
                    if tmpdir in str(identifier)
                ]
                for identifier in identifiers_to_remove:
                    if identifier in SharedSystemClient._identifier_to_system:
                        system = SharedSystemClient._identifier_to_system.pop(identifier)
                        with contextlib.suppress(Exception):
                            system.stop()
        except Exception:
            pass  # Best effort cleanup - ChromaDB internals may change


@pytest.fixture
def mock_embedder():
    return KeywordEmbedder()


@pytest.fixture
def mock_generator():
    return MockGenerator()


@pytest.fixture
def mock_provider(mock_embedder, mock_generator):
    """Provider satisfying ProviderConfig that hands out the mock components."""
    from dataclasses import dataclass
    from typing import Any

    @dataclass(frozen=True)
    class MockProvider:
        _embedder: Any
        _question_generator: Any

        def build_embedder(self, settings: Any) -> Any:
            return self._embedder

        def build_question_generator(self, settings: Any) -> Any:
            return self._question_generator

    return MockProvider(_embedder=mock_embedder, _question_generator=mock_generator)


@pytest.fixture
def sample_source():
    return TextSource(
        id="aristotle-nicomachean-ethics",
        title="Nicomachean Ethics",
        author="Aristotle",
        philosopher="aristotle",
        url="https://www.gutenberg.org/cache/epub/8438/pg8438.txt",
    )


@pytest.fixture
def other_source():
    return TextSource(
        id="plato-republic",
        title="The Republic",
        author="Plato",
        philosopher="plato",
        url="https://www.gutenberg.org/cache/epub/1497/pg1497.txt",
    )


@pytest.fixture
def sqlite_store(temp_dir):
    from philorag.stores import SQLiteVectorStore

    return SQLiteVectorStore(os.path.join(temp_dir, "philorag.db"))


@pytest.fixture
def fetcher(temp_dir):
    """Fetcher whose cache lives in the temp dir. Tests seed it with cache_text."""
    return TextFetcher(os.path.join(temp_dir, "texts"))


def cache_text(fetcher: TextFetcher, source: TextSource, text: str) -> None:
    """Place text in the fetcher's cache so no download happens."""
    fetcher.cache_dir.mkdir(parents=True, exist_ok=True)
    fetcher.path_for(source.id).write_text(text, encoding="utf-8")


def make_chunk(
    source: TextSource,
    index: int,
    content: str,
    total: int = 10,
    questions: list[str] | None = None,
    embedder: KeywordEmbedder | None = None,
) -> TextChunk:
    """Build a chunk, embedding its questions with the keyword embedder."""
    questions = questions or []
    embedder = embedder or KeywordEmbedder()
    return TextChunk(
        id=chunk_id(source.id, index),
        content=content,
        metadata=ChunkMetadata(
            philosopher=source.philosopher,
            source_id=source.id,
            title=source.title,
            author=source.author,
            chunk_index=index,
            total_chunks=total,
            start_char=index * 100,
            end_char=index * 100 + len(content),
        ),
        questions=questions,
        question_embeddings=[embedder.vector(q) for q in questions],
    )


@pytest.fixture
def chunk_factory():
    return make_chunk


@pytest.fixture
def seed_cache(fetcher):
    def seed(source: TextSource, text: str) -> None:
        cache_text(fetcher, source, text)

    return seed


@pytest.fixture
def llm_client_factory():
    return FakeLLMClient


@pytest.fixture
def isolated_env(temp_dir, monkeypatch):
    """Run from an empty directory with no PHILORAG_* variables set."""
    for name in list(os.environ):
        if name.startswith("PHILORAG_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(temp_dir)
    return temp_dir


PASSAGES = [
    ("aristotle", 0, "Virtue is a state of character concerned with choice."),
    ("aristotle", 1, "Friendship is a kind of virtue, or implies virtue."),
    ("aristotle", 2, "The state exists for the sake of the good life."),
    ("plato", 0, "Justice is the virtue of the soul."),
]


@pytest.fixture
def data_dir(isolated_env):
    return os.path.join(isolated_env, "data")


@pytest.fixture
def populated(data_dir, sample_source, other_source, mock_embedder):
    """Data directory holding an SQLite store with four passages."""
    from philorag.stores import SQLiteVectorStore

    sources = {"aristotle": sample_source, "plato": other_source}
    chunks = [make_chunk(sources[who], index, text, total=3) for who, index, text in PASSAGES]
    store = SQLiteVectorStore(os.path.join(data_dir, "philorag.db"))
    store.upsert_chunks(chunks, [mock_embedder.vector(c.content) for c in chunks])
    return data_dir


@pytest.fixture
def mock_library(data_dir, mock_provider):
    """Library over data_dir built from the mock provider, with small chunks."""
    from philorag import Library, LocalStorage, Settings

    return Library(
        provider=mock_provider,
        storage=LocalStorage(data_dir),
        settings=Settings(chunk_size=300, chunk_overlap=0, min_chunk_size=50),
    )
