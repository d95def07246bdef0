"""
Ingestion: chunking, embedding, and atomic persistence of source documents.

This module converts the extracted text of a brand guideline (uploaded
file or pasted text) into overlapping chunks, embeds each chunk with a
bounded number of concurrent calls, and commits the whole set in one
transaction.
"""

from brand_rag.ingestion.chunker import TextWindow, chunk_text, validate_chunking
from brand_rag.ingestion.embedder import EmbeddingClient, get_embedding_function
from brand_rag.ingestion.pipeline import IngestionPipeline

__all__ = [
    "EmbeddingClient",
    "IngestionPipeline",
    "TextWindow",
    "chunk_text",
    "get_embedding_function",
    "validate_chunking",
]
