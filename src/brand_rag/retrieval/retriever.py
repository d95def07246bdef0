"""Semantic retriever: brand-scoped exact vector search.

This module is the **primary public interface** for retrieval.  It never
raises on external failures: when the embedding service or the chunk
store is unavailable, callers get an empty result and generation proceeds
without grounding.

Usage::

    from brand_rag.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever()
    context = await retriever.retrieve_context("brand-42", "summer launch instagram")
"""

from __future__ import annotations

import asyncio
import logging

from brand_rag.config import settings
from brand_rag.ingestion.embedder import EmbeddingClient
from brand_rag.models import ChunkCandidate
from brand_rag.retrieval.context import assemble_context
from brand_rag.retrieval.models import RankedResult
from brand_rag.retrieval.ranker import BruteForceRanker, RankerBase
from brand_rag.storage.base import ChunkStoreBase

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever over a :class:`ChunkStoreBase`.

    Parameters
    ----------
    store:
        Chunk store backend.  When *None*, a
        :class:`~brand_rag.storage.sql_store.SQLChunkStore` is created from
        the global settings.
    embedder:
        Client used to embed the query.  Must use the same model as
        ingestion.
    ranker:
        Ranking strategy; defaults to :class:`BruteForceRanker`.
    default_k:
        Default number of passages returned.
    store_timeout:
        Seconds allowed for loading candidates.
    label_sources:
        Prefix each passage in the context string with its source name.
    """

    def __init__(
        self,
        store: ChunkStoreBase | None = None,
        embedder: EmbeddingClient | None = None,
        ranker: RankerBase | None = None,
        *,
        default_k: int = settings.retrieval_top_k,
        store_timeout: float = settings.store_timeout_seconds,
        label_sources: bool = False,
    ) -> None:
        if store is None:
            from brand_rag.storage.sql_store import SQLChunkStore

            store = SQLChunkStore()
        self._store = store
        self._embedder = embedder if embedder is not None else EmbeddingClient()
        self._ranker = ranker if ranker is not None else BruteForceRanker(settings.primary_source_boost)
        self.default_k = default_k
        self.store_timeout = store_timeout
        self.label_sources = label_sources

    # -- public API -----------------------------------------------------------

    async def retrieve(self, brand_id: str, query: str, *, k: int | None = None) -> list[RankedResult]:
        """Return up to *k* chunks of *brand_id* most similar to *query*.

        Query embedding and candidate loading run concurrently.  Any
        failure in either, or in scoring, yields ``[]``.

        Raises
        ------
        ValueError
            If *k* is smaller than 1.
        """
        k = self._resolve_k(k)

        query_vector, candidates = await asyncio.gather(
            self._embedder.embed(query),
            self._load_candidates(brand_id),
            return_exceptions=True,
        )
        for outcome in (query_vector, candidates):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome

        if isinstance(query_vector, Exception):
            logger.warning(
                "Query embedding failed for brand %s (query=%r), continuing without grounding: %s",
                brand_id,
                query,
                query_vector,
            )
            return []
        if isinstance(candidates, Exception):
            logger.warning(
                "Loading chunks failed for brand %s, continuing without grounding: %r",
                brand_id,
                candidates,
            )
            return []
        if not candidates:
            logger.info("No embedded chunks for brand %s", brand_id)
            return []

        try:
            results = self._ranker.rank(query_vector, candidates, k)
        except Exception:
            logger.exception("Ranking failed for brand %s (query=%r)", brand_id, query)
            return []

        logger.info(
            "Retrieved %d of %d chunk(s) for brand %s (best score %.3f)",
            len(results),
            len(candidates),
            brand_id,
            results[0].score if results else 0.0,
        )
        return results

    async def retrieve_context(self, brand_id: str, query: str, *, k: int | None = None) -> str:
        """Same as :meth:`retrieve` but returns the joined context string."""
        results = await self.retrieve(brand_id, query, k=k)
        return assemble_context(results, label_sources=self.label_sources)

    # -- internals ------------------------------------------------------------

    def _resolve_k(self, k: int | None) -> int:
        k = self.default_k if k is None else k
        if k < 1:
            raise ValueError(f"k ({k}) must be >= 1")
        return k

    async def _load_candidates(self, brand_id: str) -> list[ChunkCandidate]:
        return await asyncio.wait_for(
            asyncio.to_thread(self._store.list_candidates, brand_id),
            timeout=self.store_timeout,
        )
