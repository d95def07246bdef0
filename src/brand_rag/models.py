"""Domain models for source documents and their chunks."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DocumentStatus(str, Enum):
    """Lifecycle of a :class:`SourceDocument`."""

    PENDING = "pending"
    APPROVED = "approved"


class SourceDocument(BaseModel):
    """One ingested artifact (uploaded file or raw text) owned by a brand.

    Attributes
    ----------
    id:
        Unique document identifier.
    brand_id:
        Scope identifier; retrieval never crosses brands.
    source_name:
        Human-readable origin: original file name or ``"Direct Text Input"``.
    source_text:
        Raw extracted text that the chunker splits.
    is_primary:
        Marks the brand's master guideline.
    status:
        ``pending`` until an ingestion run commits, then ``approved``.
    chunk_count / with_embedding / without_embedding:
        Aggregate counts written together with the chunks.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    brand_id: str
    source_name: str = "Direct Text Input"
    source_text: str = ""
    is_primary: bool = False
    status: DocumentStatus = DocumentStatus.PENDING
    chunk_count: int = 0
    with_embedding: int = 0
    without_embedding: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ingested_at: datetime | None = None

    @property
    def text_length(self) -> int:
        return len(self.source_text)


class Chunk(BaseModel):
    """A contiguous, immutable slice of a source document's text.

    ``start`` / ``end`` are the character offsets of the window *before*
    whitespace trimming; ``text`` is the trimmed window content.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    chunk_index: int = Field(ge=0)
    start: int = Field(ge=0)
    end: int
    text: str
    embedding: list[float] | None = None

    @model_validator(mode="after")
    def _check_offsets(self) -> Chunk:
        if self.end <= self.start:
            raise ValueError(f"chunk end ({self.end}) must be greater than start ({self.start})")
        return self

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None


class ChunkCandidate(BaseModel):
    """A stored chunk eligible for vector retrieval, joined with its document."""

    document_id: str
    chunk_index: int
    text: str
    embedding: list[float]
    source_name: str = "unknown"
    is_primary: bool = False


class IngestionReport(BaseModel):
    """Outcome of one ingestion run."""

    document_id: str
    chunk_count: int
    with_embedding: int
    without_embedding: int
