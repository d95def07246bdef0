"""Vector similarity."""

from __future__ import annotations

import math
from collections.abc import Sequence


def _unit_scaled(v: Sequence[float]) -> list[float] | None:
    """Divide *v* by its largest magnitude; ``None`` for zero or non-finite vectors."""
    peak = max(abs(x) for x in v)
    if peak == 0.0 or not math.isfinite(peak):
        return None
    return [x / peak for x in v]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine of the angle between *a* and *b*.

    Fails closed: vectors of different (or zero) dimensionality, zero
    vectors and vectors with non-finite components score ``0.0`` instead
    of raising or producing NaN.  Each vector is scaled by its largest
    component first, so very large or very small magnitudes neither
    overflow nor underflow.  The result is clamped to ``[-1, 1]``.
    """
    if len(a) != len(b) or not a:
        return 0.0

    a_scaled = _unit_scaled(a)
    b_scaled = _unit_scaled(b)
    if a_scaled is None or b_scaled is None:
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a_scaled, b_scaled):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    # Both norms are >= 1 after scaling.
    score = dot / (math.sqrt(norm_a) * math.sqrt(norm_b))
    if not math.isfinite(score):
        return 0.0
    return max(-1.0, min(1.0, score))
