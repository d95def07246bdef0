"""Embedding client: bounded, failure-tolerant calls to the embedding model.

The client wraps any LangChain :class:`~langchain_core.embeddings.Embeddings`
implementation.  A single call may time out, hit a rate limit or return
garbage; :meth:`EmbeddingClient.embed` turns all of those into
:class:`~brand_rag.errors.EmbeddingError`, and
:meth:`EmbeddingClient.embed_many` turns them into ``None`` slots so one bad
chunk never sinks the batch.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from brand_rag.config import settings
from brand_rag.errors import EmbeddingError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def get_embedding_function(provider: str | None = None, model: str | None = None) -> Embeddings:
    """Return the configured embedding backend.

    ``huggingface`` runs a local sentence-transformer; ``openai`` calls the
    OpenAI embeddings endpoint with ``settings.openai_api_key``.
    """
    provider = provider or settings.embedding_provider
    model = model or settings.embedding_model

    if provider == "huggingface":
        from langchain_huggingface import HuggingFaceEmbeddings

        return HuggingFaceEmbeddings(model_name=model)
    if provider == "openai":
        from langchain_openai import OpenAIEmbeddings

        return OpenAIEmbeddings(model=model, api_key=settings.openai_api_key or None)
    raise ValueError(f"Unsupported embedding provider: {provider!r}")


def _validate_vector(vector: Any) -> list[float]:
    """Coerce a provider response to ``list[float]`` or raise."""
    if vector is None:
        raise EmbeddingError("embedding service returned an empty vector")
    try:
        size = len(vector)
    except TypeError as exc:
        raise EmbeddingError(
            f"embedding service returned {type(vector).__name__}, expected a sequence"
        ) from exc
    if size == 0:
        raise EmbeddingError("embedding service returned an empty vector")
    try:
        values = [float(v) for v in vector]
    except (TypeError, ValueError) as exc:
        raise EmbeddingError("embedding service returned non-numeric values") from exc
    if not all(math.isfinite(v) for v in values):
        raise EmbeddingError("embedding vector contains NaN or infinite values")
    return values


class EmbeddingClient:
    """Async wrapper around an embedding backend.

    Parameters
    ----------
    embeddings:
        LangChain embeddings implementation.  When *None*, the backend from
        :func:`get_embedding_function` is used.
    max_concurrency:
        Upper bound on calls in flight inside :meth:`embed_many`.
    timeout:
        Seconds allowed for a single call before it counts as failed.
    max_retries:
        Attempts per text (1 disables retrying).
    retry_backoff:
        Base delay in seconds; attempt *n* waits ``retry_backoff * 2**(n-1)``.
    """

    def __init__(
        self,
        embeddings: Embeddings | None = None,
        *,
        max_concurrency: int = settings.embed_max_concurrency,
        timeout: float = settings.embed_timeout_seconds,
        max_retries: int = settings.embed_max_retries,
        retry_backoff: float = settings.embed_retry_backoff_seconds,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency ({max_concurrency}) must be >= 1")
        if max_retries < 1:
            raise ValueError(f"max_retries ({max_retries}) must be >= 1")
        self._embeddings = embeddings if embeddings is not None else get_embedding_function()
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff

    async def embed(self, text: str) -> list[float]:
        """Embed one text, retrying transient failures.

        Raises
        ------
        EmbeddingError
            When every attempt failed or the vector is malformed.
        """
        last_exc: BaseException | None = None
        reason = ""
        for attempt in range(1, self.max_retries + 1):
            try:
                vector = await asyncio.wait_for(
                    self._embeddings.aembed_query(text), timeout=self.timeout
                )
            except asyncio.TimeoutError as exc:
                last_exc = exc
                reason = f"timed out after {self.timeout:.1f}s"
            except Exception as exc:
                last_exc = exc
                reason = f"{type(exc).__name__}: {exc}"
            else:
                return _validate_vector(vector)

            if attempt < self.max_retries:
                wait = self.retry_backoff * 2 ** (attempt - 1)
                logger.warning(
                    "Embedding attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    self.max_retries,
                    reason,
                    wait,
                )
                await asyncio.sleep(wait)

        raise EmbeddingError(
            f"embedding failed after {self.max_retries} attempt(s): {reason}"
        ) from last_exc

    async def embed_many(self, texts: Sequence[str], *, label: str = "") -> list[list[float] | None]:
        """Embed every text concurrently; failed slots are ``None``.

        The result list is aligned with *texts* by position, independent of
        the order in which calls complete.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _embed_slot(index: int, text: str) -> list[float] | None:
            async with semaphore:
                try:
                    return await self.embed(text)
                except EmbeddingError as exc:
                    logger.warning("Embedding failed for %s chunk %d: %s", label or "text", index, exc)
                    return None

        results = await asyncio.gather(*(_embed_slot(i, t) for i, t in enumerate(texts)))
        failed = sum(1 for r in results if r is None)
        logger.info(
            "Embedded %d/%d chunk(s) for %s (%d failed)",
            len(results) - failed,
            len(results),
            label or "batch",
            failed,
        )
        return list(results)
