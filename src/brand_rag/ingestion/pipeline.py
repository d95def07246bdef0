"""Ingestion pipeline: chunk, embed and atomically persist one document.

Error policy:

* blank text or an invalid chunk configuration raises before anything is
  embedded or written;
* a failed embedding only marks its chunk as embedding-less;
* a failed or timed-out write raises :class:`PersistenceError` and leaves
  the document untouched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from brand_rag.config import settings
from brand_rag.errors import EmptyDocumentError, PersistenceError, StoreUnavailableError
from brand_rag.ingestion.chunker import chunk_text, validate_chunking
from brand_rag.ingestion.embedder import EmbeddingClient
from brand_rag.models import Chunk, IngestionReport, SourceDocument
from brand_rag.storage.base import ChunkStoreBase

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IngestionPipeline:
    """Turns a stored source document into embedded, retrievable chunks.

    Parameters
    ----------
    store:
        Chunk store holding the source documents.
    embedder:
        Client for the embedding service.
    chunk_size / chunk_overlap:
        Chunker window configuration (characters).
    store_timeout:
        Seconds allowed for each store call.
    """

    def __init__(
        self,
        store: ChunkStoreBase,
        embedder: EmbeddingClient | None = None,
        *,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
        store_timeout: float = settings.store_timeout_seconds,
    ) -> None:
        self._store = store
        self._embedder = embedder if embedder is not None else EmbeddingClient()
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.store_timeout = store_timeout

    async def ingest(self, document_id: str) -> IngestionReport:
        """Chunk, embed and persist the document *document_id*.

        Returns
        -------
        IngestionReport
            Chunk totals as committed to the store.

        Raises
        ------
        ChunkingConfigError
            Invalid chunk size / overlap.
        DocumentNotFoundError
            No such document.
        EmptyDocumentError
            The document has no text.
        StoreUnavailableError
            The document could not be loaded.
        PersistenceError
            The atomic chunk write failed or timed out.
        """
        validate_chunking(self.chunk_size, self.chunk_overlap)
        document = await self._call_store(StoreUnavailableError, self._store.get_document, document_id)
        if not document.source_text.strip():
            raise EmptyDocumentError(f"document {document_id!r} has no text to ingest")

        windows = chunk_text(document.source_text, self.chunk_size, self.chunk_overlap)
        logger.info(
            "Chunked document %s (%d chars) into %d window(s)",
            document_id,
            document.text_length,
            len(windows),
        )

        embeddings = await self._embedder.embed_many(
            [w.text for w in windows], label=f"document {document_id}"
        )
        chunks = [
            Chunk(
                document_id=document_id,
                chunk_index=w.index,
                start=w.start,
                end=w.end,
                text=w.text,
                embedding=vector,
            )
            for w, vector in zip(windows, embeddings)
        ]

        saved = await self._call_store(PersistenceError, self._store.save_chunks, document_id, chunks)
        logger.info(
            "Document %s approved: %d chunk(s), %d without embedding",
            document_id,
            saved.chunk_count,
            saved.without_embedding,
        )
        return IngestionReport(
            document_id=document_id,
            chunk_count=saved.chunk_count,
            with_embedding=saved.with_embedding,
            without_embedding=saved.without_embedding,
        )

    async def ingest_text(
        self,
        brand_id: str,
        text: str,
        *,
        source_name: str = "Direct Text Input",
        is_primary: bool = False,
    ) -> IngestionReport:
        """Create a ``pending`` document from raw *text* and ingest it."""
        if not text.strip():
            raise EmptyDocumentError("cannot ingest blank text")
        validate_chunking(self.chunk_size, self.chunk_overlap)
        document: SourceDocument = await self._call_store(
            PersistenceError,
            self._store.create_document,
            brand_id,
            text,
            source_name=source_name,
            is_primary=is_primary,
        )
        return await self.ingest(document.id)

    async def _call_store(
        self,
        timeout_error: type[Exception],
        fn: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run a blocking store call in a worker thread under the store timeout.

        A timeout is reported as *timeout_error*.  The worker thread cannot
        be interrupted, so a timed-out write may still commit later.
        """
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(fn, *args, **kwargs), timeout=self.store_timeout
            )
        except asyncio.TimeoutError as exc:
            name = getattr(fn, "__name__", "store call")
            raise timeout_error(f"{name} timed out after {self.store_timeout:.1f}s") from exc
