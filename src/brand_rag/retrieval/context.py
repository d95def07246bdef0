"""Context assembly: ranked results to a single grounding string."""

from __future__ import annotations

from collections.abc import Sequence

from brand_rag.retrieval.models import RankedResult

CONTEXT_SEPARATOR = "\n\n---\n\n"


def assemble_context(results: Sequence[RankedResult], *, label_sources: bool = False) -> str:
    """Join result texts in ranked order with :data:`CONTEXT_SEPARATOR`.

    With *label_sources*, each passage is prefixed by
    ``[Source: <name>]`` (``- MASTER`` appended for the primary guideline).
    An empty result list yields ``""``.
    """
    parts: list[str] = []
    for r in results:
        if label_sources:
            master = " - MASTER" if r.is_primary else ""
            parts.append(f"[Source: {r.source_name}{master}] {r.text}")
        else:
            parts.append(r.text)
    return CONTEXT_SEPARATOR.join(parts)


def unique_sources(results: Sequence[RankedResult]) -> list[str]:
    """Distinct source names in first-seen (ranked) order."""
    return list(dict.fromkeys(r.source_name for r in results))
