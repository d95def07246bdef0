"""LangGraph graph definition: the grounded generation workflow.

1. **Retrieve** grounding passages for the request (or take the
   caller-supplied context).
2. **Generate** the content from the assembled prompt.

The graph runs locally with injected fakes for the retriever and chat
model (see tests).
"""

from __future__ import annotations

from typing import Any

from langchain_core.language_models import BaseChatModel
from langgraph.graph import END, StateGraph

from brand_rag.generation.nodes import make_generate_node, make_retrieve_node
from brand_rag.generation.state import (
    BrandProfile,
    GenerationRequest,
    GenerationResult,
    GenerationState,
)
from brand_rag.retrieval.retriever import SemanticRetriever

EMPTY_ANSWER_FALLBACK = "The model returned no content."


def build_graph(
    retriever: SemanticRetriever | None = None,
    llm: BaseChatModel | None = None,
) -> Any:
    """Construct and return the compiled generation graph.

    Graph topology::

        START → retrieve_context → generate → END

    Parameters
    ----------
    retriever:
        Defaults to a :class:`SemanticRetriever` built from settings.
    llm:
        Defaults to :func:`~brand_rag.generation.llm.get_llm`.
    """
    if retriever is None:
        retriever = SemanticRetriever()
    if llm is None:
        from brand_rag.generation.llm import get_llm

        llm = get_llm()

    workflow = StateGraph(GenerationState)
    workflow.add_node("retrieve_context", make_retrieve_node(retriever))
    workflow.add_node("generate", make_generate_node(llm))

    workflow.set_entry_point("retrieve_context")
    workflow.add_edge("retrieve_context", "generate")
    workflow.add_edge("generate", END)

    return workflow.compile()


def create_initial_state(request: GenerationRequest, brand: BrandProfile) -> dict[str, Any]:
    """Build the initial state dict for ``graph.ainvoke()``."""
    return {
        "brand": brand,
        "request": request,
        "context": "",
        "sources": [],
        "prompt": "",
        "answer": "",
    }


async def generate_content(
    request: GenerationRequest,
    brand: BrandProfile,
    *,
    graph: Any | None = None,
) -> GenerationResult:
    """Run the generation workflow once and return its result.

    Usage::

        result = await generate_content(
            GenerationRequest(topic="Summer launch", channel="Instagram"),
            BrandProfile(id="brand-42", name="Acme"),
        )
        print(result.text, result.sources)
    """
    if graph is None:
        graph = build_graph()
    final = await graph.ainvoke(create_initial_state(request, brand))
    return GenerationResult(
        text=final.get("answer") or EMPTY_ANSWER_FALLBACK,
        sources=list(final.get("sources", [])),
        prompt=final.get("prompt", ""),
    )
