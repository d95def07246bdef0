"""Abstract base class for chunk-store backends.

Adding a backend (Firestore, Postgres, Mongo, ...) only requires
subclassing :class:`ChunkStoreBase` and implementing the abstract methods.
Ingestion and retrieval only ever talk to this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from brand_rag.models import Chunk, ChunkCandidate, SourceDocument


class ChunkStoreBase(ABC):
    """Backend-agnostic store for source documents and their chunks.

    Implementations are synchronous; async callers run them in a worker
    thread under a timeout.
    """

    @abstractmethod
    def create_document(
        self,
        brand_id: str,
        text: str,
        *,
        source_name: str = "Direct Text Input",
        is_primary: bool = False,
    ) -> SourceDocument:
        """Persist a new ``pending`` document and return it."""
        ...

    @abstractmethod
    def get_document(self, document_id: str) -> SourceDocument:
        """Return the document or raise :class:`~brand_rag.errors.DocumentNotFoundError`."""
        ...

    @abstractmethod
    def save_chunks(self, document_id: str, chunks: Sequence[Chunk]) -> SourceDocument:
        """Atomically store *chunks* and mark the document ``approved``.

        Every chunk is written, including those without an embedding.  Any
        previous chunk set of the document is replaced in the same
        transaction, and the aggregate counts (total, with / without
        embedding) are updated with it.  A concurrent reader sees either
        the old state or the new one, never a mix.

        Raises
        ------
        PersistenceError
            When the transaction could not be committed.
        """
        ...

    @abstractmethod
    def list_candidates(self, brand_id: str) -> list[ChunkCandidate]:
        """Return every embedded chunk of every approved document in scope.

        Ordered by document creation time, document id, then chunk index.

        Raises
        ------
        StoreUnavailableError
            When the backend cannot be read.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
