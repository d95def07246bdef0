"""Exception hierarchy shared by ingestion, storage and retrieval.

Three families:

* **input errors**: raised before any side effect
  (:class:`ChunkingConfigError`, :class:`EmptyDocumentError`,
  :class:`DocumentNotFoundError`);
* **transient external failures**: absorbed and logged by the layer that
  calls the external service (:class:`EmbeddingError`,
  :class:`StoreUnavailableError`);
* **persistence failures**: surfaced to the caller of an ingestion run
  (:class:`PersistenceError`).
"""

from __future__ import annotations


class BrandRagError(Exception):
    """Base class for all errors raised by this package."""


class ChunkingConfigError(BrandRagError, ValueError):
    """Chunk size / overlap combination cannot produce a terminating split."""


class EmptyDocumentError(BrandRagError, ValueError):
    """The source document has no text to ingest."""


class DocumentNotFoundError(BrandRagError, LookupError):
    """No source document exists with the requested id."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Source document {document_id!r} not found")
        self.document_id = document_id


class EmbeddingError(BrandRagError):
    """The embedding service failed, timed out, or returned a malformed vector."""


class StoreUnavailableError(BrandRagError):
    """The chunk store could not be read."""


class PersistenceError(BrandRagError):
    """The atomic chunk write for a document failed and was rolled back."""
