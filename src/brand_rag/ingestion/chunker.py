"""Fixed-window text chunking with overlap."""

from __future__ import annotations

from dataclasses import dataclass

from brand_rag.errors import ChunkingConfigError


@dataclass(frozen=True)
class TextWindow:
    """One chunk produced by :func:`chunk_text`.

    ``start`` / ``end`` are the untrimmed window offsets (end-exclusive);
    ``text`` has leading and trailing whitespace stripped.
    """

    index: int
    start: int
    end: int
    text: str


def validate_chunking(chunk_size: int, chunk_overlap: int) -> None:
    """Raise :class:`ChunkingConfigError` unless ``0 <= overlap < size``."""
    if chunk_size <= 0:
        raise ChunkingConfigError(f"chunk_size ({chunk_size}) must be > 0")
    if chunk_overlap < 0:
        raise ChunkingConfigError(f"chunk_overlap ({chunk_overlap}) must be >= 0")
    if chunk_overlap >= chunk_size:
        raise ChunkingConfigError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )


def chunk_text(
    text: str,
    chunk_size: int = 800,
    chunk_overlap: int = 100,
) -> list[TextWindow]:
    """Split *text* into overlapping fixed-size character windows.

    Parameters
    ----------
    text:
        Source text of one document.
    chunk_size:
        Maximum number of characters per window.
    chunk_overlap:
        Number of characters shared by consecutive windows.  Must be
        strictly smaller than ``chunk_size``.

    Returns
    -------
    list[TextWindow]
        Windows in increasing ``start`` order.  Empty text yields ``[]``;
        the last window may be shorter than ``chunk_size``.

    Raises
    ------
    ChunkingConfigError
        If the size / overlap combination is invalid.
    """
    validate_chunking(chunk_size, chunk_overlap)

    step = chunk_size - chunk_overlap
    length = len(text)
    windows: list[TextWindow] = []
    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        windows.append(
            TextWindow(index=len(windows), start=start, end=end, text=text[start:end].strip())
        )
        start += step
    return windows
