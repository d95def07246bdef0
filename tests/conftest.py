"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterable

import pytest
from langchain_core.embeddings import Embeddings

from brand_rag.ingestion.embedder import EmbeddingClient
from brand_rag.storage.sql_store import SQLChunkStore


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class FakeEmbeddings(Embeddings):
    """Deterministic in-process embedding model.

    Texts listed in *vectors* get that exact vector; any text containing a
    marker from *fail_on* raises; everything else gets a small vector
    derived from the characters.
    """

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        fail_on: Iterable[str] = (),
    ) -> None:
        self.vectors = dict(vectors or {})
        self.fail_on = tuple(fail_on)
        self.calls: list[str] = []

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.calls.append(text)
        if any(marker in text for marker in self.fail_on):
            raise RuntimeError("429 rate limit exceeded")
        if text in self.vectors:
            return list(self.vectors[text])
        return [
            float(len(text) % 7 + 1),
            float(sum(map(ord, text)) % 11 + 1),
            1.0,
            0.5,
        ]


@pytest.fixture()
def store() -> SQLChunkStore:
    """Fresh in-memory chunk store per test."""
    return SQLChunkStore("sqlite://")


@pytest.fixture()
def make_embeddings() -> type[FakeEmbeddings]:
    """Factory for configurable fake embedding models."""
    return FakeEmbeddings


@pytest.fixture()
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture()
def embedder(fake_embeddings: FakeEmbeddings) -> EmbeddingClient:
    return EmbeddingClient(fake_embeddings, max_concurrency=4, timeout=5.0, max_retries=1, retry_backoff=0.0)
