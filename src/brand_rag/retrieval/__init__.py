"""
Retrieval: exact vector search, ranking, and context assembly.

Public surface
--------------
- :class:`SemanticRetriever`: main entry point, brand-scoped and failure-tolerant.
- :class:`RankerBase` / :class:`BruteForceRanker`: ranking strategies.
- :class:`RankedResult`: one scored passage.
- :func:`cosine_similarity`: fail-closed cosine.
- :func:`assemble_context`: ranked passages to a grounding string.
"""

from brand_rag.retrieval.context import CONTEXT_SEPARATOR, assemble_context, unique_sources
from brand_rag.retrieval.models import RankedResult
from brand_rag.retrieval.ranker import BruteForceRanker, RankerBase
from brand_rag.retrieval.retriever import SemanticRetriever
from brand_rag.retrieval.similarity import cosine_similarity

__all__ = [
    "BruteForceRanker",
    "CONTEXT_SEPARATOR",
    "RankedResult",
    "RankerBase",
    "SemanticRetriever",
    "assemble_context",
    "cosine_similarity",
    "unique_sources",
]
