"""
Storage: persistence of source documents and their embedded chunks.

Public surface
--------------
- :class:`ChunkStoreBase`: abstract backend.
- :class:`SQLChunkStore`: default SQLAlchemy backend.
"""

from brand_rag.storage.base import ChunkStoreBase
from brand_rag.storage.sql_store import SQLChunkStore, create_store_engine

__all__ = ["ChunkStoreBase", "SQLChunkStore", "create_store_engine"]
