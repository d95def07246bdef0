"""Unit tests for the ingestion pipeline."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

import pytest
from langchain_core.embeddings import Embeddings

from brand_rag.errors import (
    ChunkingConfigError,
    DocumentNotFoundError,
    EmptyDocumentError,
    PersistenceError,
)
from brand_rag.ingestion.embedder import EmbeddingClient
from brand_rag.ingestion.pipeline import IngestionPipeline
from brand_rag.models import Chunk, DocumentStatus, SourceDocument
from brand_rag.storage.sql_store import SQLChunkStore


def _pipeline(store, embeddings, **kwargs) -> IngestionPipeline:  # noqa: ANN001
    client = EmbeddingClient(embeddings, max_concurrency=4, timeout=5.0, max_retries=1, retry_backoff=0.0)
    kwargs.setdefault("chunk_size", 800)
    kwargs.setdefault("chunk_overlap", 100)
    kwargs.setdefault("store_timeout", 5.0)
    return IngestionPipeline(store, client, **kwargs)


class ScalarForMarkerEmbeddings(Embeddings):
    """Returns a bare number instead of a vector for texts containing *marker*."""

    def __init__(self, marker: str) -> None:
        self.marker = marker

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        if self.marker in text:
            return 42  # type: ignore[return-value]
        return [1.0, float(len(text))]


class BrokenWriteStore(SQLChunkStore):
    """Store whose chunk write always fails."""

    def save_chunks(self, document_id: str, chunks: Sequence[Chunk]) -> SourceDocument:
        raise PersistenceError(f"could not persist chunks for document {document_id!r}")


class SlowWriteStore(SQLChunkStore):
    """Store whose chunk write outlives any reasonable timeout."""

    def save_chunks(self, document_id: str, chunks: Sequence[Chunk]) -> SourceDocument:
        time.sleep(0.5)
        return super().save_chunks(document_id, chunks)


# ── happy path ─────────────────────────────────────────────────────────


class TestIngest:
    def test_thousand_chars_produce_two_embedded_chunks(self, store, fake_embeddings) -> None:  # noqa: ANN001
        doc = store.create_document("brand-1", "A" * 1000)
        report = asyncio.run(_pipeline(store, fake_embeddings).ingest(doc.id))

        assert (report.chunk_count, report.with_embedding, report.without_embedding) == (2, 2, 0)
        assert store.get_document(doc.id).status is DocumentStatus.APPROVED
        assert len(store.list_candidates("brand-1")) == 2

    def test_one_failed_embedding_still_approves(self, store, make_embeddings) -> None:  # noqa: ANN001
        text = "a" * 10 + "FAILFAILFA" + "c" * 10
        doc = store.create_document("brand-1", text)
        pipeline = _pipeline(store, make_embeddings(fail_on=["FAIL"]), chunk_size=10, chunk_overlap=0)

        report = asyncio.run(pipeline.ingest(doc.id))

        assert (report.chunk_count, report.with_embedding, report.without_embedding) == (3, 2, 1)
        saved = store.get_document(doc.id)
        assert saved.status is DocumentStatus.APPROVED
        assert [c.chunk_index for c in store.list_candidates("brand-1")] == [0, 2]

    def test_scalar_embedding_response_only_drops_its_chunk(self, store) -> None:  # noqa: ANN001
        text = "a" * 10 + "BADBADBADB" + "c" * 10
        doc = store.create_document("brand-1", text)
        pipeline = _pipeline(store, ScalarForMarkerEmbeddings("BAD"), chunk_size=10, chunk_overlap=0)

        report = asyncio.run(pipeline.ingest(doc.id))

        assert (report.chunk_count, report.with_embedding, report.without_embedding) == (3, 2, 1)
        assert store.get_document(doc.id).status is DocumentStatus.APPROVED

    def test_all_embeddings_failing_still_stores_chunks(self, store, make_embeddings) -> None:  # noqa: ANN001
        doc = store.create_document("brand-1", "FAIL " * 10)
        pipeline = _pipeline(store, make_embeddings(fail_on=["FAIL"]), chunk_size=20, chunk_overlap=5)

        report = asyncio.run(pipeline.ingest(doc.id))

        assert report.with_embedding == 0
        assert report.without_embedding == report.chunk_count > 0
        assert store.get_document(doc.id).status is DocumentStatus.APPROVED
        assert store.list_candidates("brand-1") == []

    def test_reingesting_replaces_chunks(self, store, fake_embeddings) -> None:  # noqa: ANN001
        doc = store.create_document("brand-1", "x" * 50)
        asyncio.run(_pipeline(store, fake_embeddings, chunk_size=10, chunk_overlap=0).ingest(doc.id))
        report = asyncio.run(_pipeline(store, fake_embeddings, chunk_size=25, chunk_overlap=0).ingest(doc.id))

        assert report.chunk_count == 2
        assert len(store.list_candidates("brand-1")) == 2

    def test_ingest_text_creates_and_ingests(self, store, fake_embeddings) -> None:  # noqa: ANN001
        pipeline = _pipeline(store, fake_embeddings)
        report = asyncio.run(
            pipeline.ingest_text("brand-9", "Speak plainly.", source_name="voice.md", is_primary=True)
        )

        doc = store.get_document(report.document_id)
        assert doc.source_name == "voice.md"
        assert doc.is_primary is True
        assert doc.status is DocumentStatus.APPROVED
        candidates = store.list_candidates("brand-9")
        assert [c.text for c in candidates] == ["Speak plainly."]


# ── input errors ───────────────────────────────────────────────────────


class TestInputErrors:
    @pytest.mark.parametrize("text", ["", "   \n\t  "])
    def test_blank_document_fails_before_embedding(self, store, fake_embeddings, text: str) -> None:  # noqa: ANN001
        doc = store.create_document("brand-1", text)
        with pytest.raises(EmptyDocumentError):
            asyncio.run(_pipeline(store, fake_embeddings).ingest(doc.id))
        assert fake_embeddings.calls == []
        assert store.get_document(doc.id).status is DocumentStatus.PENDING

    def test_blank_text_creates_nothing(self, store, fake_embeddings) -> None:  # noqa: ANN001
        with pytest.raises(EmptyDocumentError):
            asyncio.run(_pipeline(store, fake_embeddings).ingest_text("brand-1", "  "))
        assert store.list_candidates("brand-1") == []

    def test_invalid_chunk_config_fails_before_embedding(self, store, fake_embeddings) -> None:  # noqa: ANN001
        doc = store.create_document("brand-1", "some text")
        pipeline = _pipeline(store, fake_embeddings, chunk_size=100, chunk_overlap=100)
        with pytest.raises(ChunkingConfigError):
            asyncio.run(pipeline.ingest(doc.id))
        assert fake_embeddings.calls == []
        assert store.get_document(doc.id).status is DocumentStatus.PENDING

    def test_unknown_document(self, store, fake_embeddings) -> None:  # noqa: ANN001
        with pytest.raises(DocumentNotFoundError):
            asyncio.run(_pipeline(store, fake_embeddings).ingest("missing"))


# ── persistence failures ───────────────────────────────────────────────


class TestPersistenceFailures:
    def test_write_failure_surfaces_and_leaves_document_pending(self, fake_embeddings) -> None:  # noqa: ANN001
        store = BrokenWriteStore("sqlite://")
        doc = store.create_document("brand-1", "Bold and warm.")
        with pytest.raises(PersistenceError):
            asyncio.run(_pipeline(store, fake_embeddings).ingest(doc.id))
        assert store.get_document(doc.id).status is DocumentStatus.PENDING

    def test_write_timeout_is_a_persistence_error(self, fake_embeddings) -> None:  # noqa: ANN001
        store = SlowWriteStore("sqlite://")
        doc = store.create_document("brand-1", "Bold and warm.")
        with pytest.raises(PersistenceError, match="timed out"):
            asyncio.run(_pipeline(store, fake_embeddings, store_timeout=0.05).ingest(doc.id))
