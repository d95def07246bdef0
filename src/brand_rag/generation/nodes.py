"""Graph nodes: each factory returns one step of the generation workflow.

Node contract
-------------
* Accepts the full :class:`GenerationState` dict.
* Returns a *partial* dict with **only the keys that changed**.
* Collaborators (retriever, chat model) are bound at graph-build time so
  every node is independently testable with fakes.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from brand_rag.generation.prompts import build_generation_prompt, build_retrieval_query
from brand_rag.generation.state import GenerationState
from brand_rag.retrieval.context import assemble_context, unique_sources
from brand_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)

CLIENT_CONTEXT_SOURCE = "Client Provided Context"

Node = Callable[[GenerationState], Awaitable[dict[str, Any]]]


# ── 1. RETRIEVE CONTEXT ───────────────────────────────────────────────


def make_retrieve_node(retriever: SemanticRetriever) -> Node:
    """Build the ``retrieve_context`` node around *retriever*."""

    async def retrieve_context(state: GenerationState) -> dict[str, Any]:
        """Fill ``context`` / ``sources``.

        Caller-supplied context wins; otherwise the brand's knowledge base
        is searched with ``"<topic> <channel>"``.  Retrieval failures
        degrade to an empty context inside the retriever.
        """
        request = state["request"]
        if request.context:
            return {"context": request.context, "sources": [CLIENT_CONTEXT_SOURCE]}

        brand_id = state["brand"].id
        results = await retriever.retrieve(brand_id, build_retrieval_query(request), k=request.top_k)
        if not results:
            logger.info("Generating for brand %s without grounding", brand_id)
        return {
            "context": assemble_context(results, label_sources=retriever.label_sources),
            "sources": unique_sources(results),
        }

    return retrieve_context


# ── 2. GENERATE ───────────────────────────────────────────────────────


def make_generate_node(llm: BaseChatModel) -> Node:
    """Build the ``generate`` node around *llm*."""

    async def generate(state: GenerationState) -> dict[str, Any]:
        """Compose the prompt and call the chat model."""
        prompt = build_generation_prompt(state["request"], state["brand"], state.get("context", ""))
        response = await llm.ainvoke([HumanMessage(content=prompt)])
        answer = response.content if isinstance(response.content, str) else str(response.content)
        logger.info("Generated %d chars for brand %s", len(answer), state["brand"].id)
        return {"prompt": prompt, "answer": answer}

    return generate
