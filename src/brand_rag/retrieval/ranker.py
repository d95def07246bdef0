"""Rankers turn a query vector plus candidate chunks into top-k results.

:class:`RankerBase` is the seam for swapping the exact scan below for an
indexed nearest-neighbour structure without touching ingestion or prompt
assembly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from brand_rag.models import ChunkCandidate
from brand_rag.retrieval.models import RankedResult
from brand_rag.retrieval.similarity import cosine_similarity


class RankerBase(ABC):
    """Backend-agnostic ranking interface."""

    @abstractmethod
    def rank(
        self,
        query_vector: Sequence[float],
        candidates: Sequence[ChunkCandidate],
        k: int,
    ) -> list[RankedResult]:
        """Return at most *k* results, most relevant first."""
        ...


class BruteForceRanker(RankerBase):
    """Exact scan: cosine-score every candidate and keep the best *k*.

    Parameters
    ----------
    primary_boost:
        Added to the sort key of chunks from a master guideline.  The
        reported ``score`` stays the raw cosine similarity.

    Equal keys keep the candidates' input order (``sorted`` is stable);
    callers must not rely on any particular tie order.
    """

    def __init__(self, primary_boost: float = 0.0) -> None:
        self.primary_boost = primary_boost

    def rank(
        self,
        query_vector: Sequence[float],
        candidates: Sequence[ChunkCandidate],
        k: int,
    ) -> list[RankedResult]:
        scored = [
            (cosine_similarity(query_vector, c.embedding), c) for c in candidates
        ]
        scored.sort(
            key=lambda pair: pair[0] + (self.primary_boost if pair[1].is_primary else 0.0),
            reverse=True,
        )
        return [
            RankedResult(
                text=c.text,
                document_id=c.document_id,
                source_name=c.source_name,
                chunk_index=c.chunk_index,
                score=score,
                is_primary=c.is_primary,
            )
            for score, c in scored[:k]
        ]
