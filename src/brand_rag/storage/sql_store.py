"""SQLAlchemy implementation of the chunk-store abstraction.

Works against any SQLAlchemy-supported database.  Defaults to a local
SQLite file (``settings.database_url``); tests use ``sqlite://``
(in-memory).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import create_engine, delete, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from brand_rag.config import settings
from brand_rag.errors import DocumentNotFoundError, PersistenceError, StoreUnavailableError
from brand_rag.models import Chunk, ChunkCandidate, DocumentStatus, SourceDocument
from brand_rag.storage.base import ChunkStoreBase
from brand_rag.storage.orm import Base, ChunkRow, DocumentRow

logger = logging.getLogger(__name__)


def create_store_engine(database_url: str) -> Engine:
    """Create an engine suitable for use from worker threads.

    SQLite connections are opened with ``check_same_thread=False``; an
    in-memory SQLite database is pinned to a single shared connection so
    every thread sees the same data.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url:
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def _to_document(row: DocumentRow) -> SourceDocument:
    return SourceDocument(
        id=row.id,
        brand_id=row.brand_id,
        source_name=row.source_name,
        source_text=row.source_text,
        is_primary=row.is_primary,
        status=DocumentStatus(row.status),
        chunk_count=row.chunk_count,
        with_embedding=row.with_embedding,
        without_embedding=row.without_embedding,
        created_at=row.created_at,
        ingested_at=row.ingested_at,
    )


class SQLChunkStore(ChunkStoreBase):
    """Relational chunk store.

    Parameters
    ----------
    database_url:
        SQLAlchemy URL.  Ignored when *engine* is given.
    engine:
        Pre-built engine (shared pools, tests).
    create_tables:
        Create the schema on start-up when missing.
    """

    def __init__(
        self,
        database_url: str = settings.database_url,
        *,
        engine: Engine | None = None,
        create_tables: bool = True,
    ) -> None:
        self._engine = engine if engine is not None else create_store_engine(database_url)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(self._engine)

    # -- ChunkStoreBase overrides ---------------------------------------------

    def create_document(
        self,
        brand_id: str,
        text: str,
        *,
        source_name: str = "Direct Text Input",
        is_primary: bool = False,
    ) -> SourceDocument:
        document = SourceDocument(
            brand_id=brand_id,
            source_text=text,
            source_name=source_name,
            is_primary=is_primary,
        )
        row = DocumentRow(
            id=document.id,
            brand_id=document.brand_id,
            source_name=document.source_name,
            source_text=document.source_text,
            is_primary=document.is_primary,
            status=document.status.value,
            created_at=document.created_at,
        )
        try:
            with self._session_factory.begin() as session:
                session.add(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not create document for brand {brand_id!r}") from exc
        logger.info("Created %s document %s for brand %s", document.status.value, document.id, brand_id)
        return document

    def get_document(self, document_id: str) -> SourceDocument:
        try:
            with self._session_factory() as session:
                row = session.get(DocumentRow, document_id)
                if row is None:
                    raise DocumentNotFoundError(document_id)
                return _to_document(row)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"could not load document {document_id!r}") from exc

    def save_chunks(self, document_id: str, chunks: Sequence[Chunk]) -> SourceDocument:
        with_embedding = sum(1 for c in chunks if c.has_embedding)
        now = datetime.now(timezone.utc)
        try:
            with self._session_factory.begin() as session:
                row = session.get(DocumentRow, document_id)
                if row is None:
                    raise DocumentNotFoundError(document_id)

                session.execute(delete(ChunkRow).where(ChunkRow.document_id == document_id))
                session.add_all(
                    ChunkRow(
                        document_id=document_id,
                        chunk_index=c.chunk_index,
                        start_offset=c.start,
                        end_offset=c.end,
                        text=c.text,
                        embedding=c.embedding,
                        has_embedding=c.has_embedding,
                        created_at=now,
                    )
                    for c in chunks
                )
                row.status = DocumentStatus.APPROVED.value
                row.chunk_count = len(chunks)
                row.with_embedding = with_embedding
                row.without_embedding = len(chunks) - with_embedding
                row.ingested_at = now
                session.flush()
                document = _to_document(row)
        except SQLAlchemyError as exc:
            logger.error("Chunk write for document %s rolled back: %s", document_id, exc)
            raise PersistenceError(f"could not persist chunks for document {document_id!r}") from exc

        logger.info(
            "Stored %d chunk(s) for document %s (%d with embedding, %d without)",
            document.chunk_count,
            document_id,
            document.with_embedding,
            document.without_embedding,
        )
        return document

    def list_candidates(self, brand_id: str) -> list[ChunkCandidate]:
        stmt = (
            select(ChunkRow, DocumentRow.source_name, DocumentRow.is_primary)
            .join(DocumentRow, ChunkRow.document_id == DocumentRow.id)
            .where(
                DocumentRow.brand_id == brand_id,
                DocumentRow.status == DocumentStatus.APPROVED.value,
                ChunkRow.has_embedding.is_(True),
            )
            .order_by(DocumentRow.created_at, DocumentRow.id, ChunkRow.chunk_index)
        )
        try:
            with self._session_factory() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"could not list chunks for brand {brand_id!r}") from exc

        return [
            ChunkCandidate(
                document_id=chunk.document_id,
                chunk_index=chunk.chunk_index,
                text=chunk.text,
                embedding=chunk.embedding,
                source_name=source_name,
                is_primary=is_primary,
            )
            for chunk, source_name, is_primary in rows
            if chunk.embedding is not None
        ]

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Chunk-store health-check failed", exc_info=True)
            return False
