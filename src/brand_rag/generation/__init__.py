"""
Generation: grounded content generation built with LangGraph.

Public API
----------
- :func:`build_graph`: compile the retrieve → generate workflow.
- :func:`generate_content`: run it once for a request.
- :func:`build_generation_prompt`: pure prompt assembly.
- :class:`BrandProfile`, :class:`GenerationRequest`, :class:`GenerationResult`.
"""

from brand_rag.generation.graph import build_graph, create_initial_state, generate_content
from brand_rag.generation.prompts import build_generation_prompt, build_retrieval_query
from brand_rag.generation.state import (
    BrandProfile,
    GenerationRequest,
    GenerationResult,
    GenerationState,
)

__all__ = [
    "BrandProfile",
    "GenerationRequest",
    "GenerationResult",
    "GenerationState",
    "build_generation_prompt",
    "build_graph",
    "build_retrieval_query",
    "create_initial_state",
    "generate_content",
]
