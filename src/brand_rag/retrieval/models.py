"""Result models produced by the ranker."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RankedResult(BaseModel):
    """A retrieved chunk paired with its similarity to the query.

    Attributes
    ----------
    text:
        The chunk content injected into the prompt.
    document_id:
        Parent source document.
    source_name:
        Human-readable source locator (file name, ``Direct Text Input``).
    chunk_index:
        Ordinal position of the chunk within its document.
    score:
        Cosine similarity to the query vector.
    is_primary:
        Whether the chunk comes from the brand's master guideline.
    """

    text: str
    document_id: str
    source_name: str = "unknown"
    chunk_index: int | None = None
    score: float = Field(ge=-1.0, le=1.0)
    is_primary: bool = False

    def short_ref(self) -> str:
        """Return a compact ``[source§chunk]`` reference string."""
        chunk = self.chunk_index if self.chunk_index is not None else "?"
        return f"[{self.source_name}§{chunk}]"

    def __str__(self) -> str:  # noqa: D105
        return f"{self.short_ref()} ({self.score:.3f}) {self.text[:120]}…"
