"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM
    openai_api_key: str = Field(default="", description="OpenAI API key (or dummy value for local vLLM)")
    llm_model_name: str = Field(default="gpt-4o-mini", description="LLM model identifier")
    llm_base_url: str = Field(
        default="",
        description=(
            "Base URL for the LLM API. Leave empty to use OpenAI cloud. "
            "Any OpenAI-compatible endpoint (vLLM, LiteLLM proxy, ...) works."
        ),
    )
    llm_temperature: float = 0.7
    default_language: str = "Vietnamese"

    # Embedding
    embedding_provider: str = Field(
        default="huggingface",
        description="Embedding backend: 'huggingface' (local sentence-transformers) or 'openai'.",
    )
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embed_max_concurrency: int = Field(default=8, ge=1, description="Max embedding calls in flight per document")
    embed_timeout_seconds: float = Field(default=30.0, gt=0)
    embed_max_retries: int = Field(default=3, ge=1, description="Attempts per embedding call")
    embed_retry_backoff_seconds: float = Field(default=1.0, ge=0)

    # Chunk store
    database_url: str = "sqlite:///brand_rag.db"
    store_timeout_seconds: float = Field(default=10.0, gt=0)

    # Chunking (characters)
    chunk_size: int = 800
    chunk_overlap: int = 100

    # Retrieval
    retrieval_top_k: int = 5
    primary_source_boost: float = Field(
        default=0.0,
        description="Added to the ranking key of chunks from a master (primary) guideline.",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton: import `settings` wherever needed.
settings = Settings()
