"""LLM initialisation: single place to swap providers.

Supports two modes:

1. **OpenAI cloud** (default): set ``OPENAI_API_KEY``.
2. **OpenAI-compatible endpoint**: set ``LLM_BASE_URL`` to a vLLM /
   LiteLLM / gateway URL exposing ``/v1/chat/completions``; ``ChatOpenAI``
   works unchanged.
"""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI

from brand_rag.config import settings

logger = logging.getLogger(__name__)


def get_llm(temperature: float | None = None, max_tokens: int = 8192) -> ChatOpenAI:
    """Return the configured chat model used for content generation.

    A dummy API key (``"EMPTY"``) is used against a custom base URL
    because self-hosted endpoints usually skip authentication.
    """
    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": settings.llm_temperature if temperature is None else temperature,
        "max_tokens": max_tokens,
    }

    if settings.llm_base_url:
        logger.info("Using custom LLM endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
    else:
        kwargs["api_key"] = settings.openai_api_key

    return ChatOpenAI(**kwargs)
