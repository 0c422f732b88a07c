"""Embedding generation for passages, questions and queries."""

from philorag.embedder.base import Embedder
from philorag.embedder.client import ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder"]
