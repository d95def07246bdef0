"""Unit tests for cosine similarity."""

from __future__ import annotations

import math

import pytest

from brand_rag.retrieval.similarity import cosine_similarity

VECTORS = [
    [1.0, 0.0, 0.0],
    [0.3, -1.2, 4.5, 0.01],
    [1e-3, 2e-3, -5e-4],
    [123.0, 456.0],
]


@pytest.mark.parametrize("v", VECTORS)
def test_vector_with_itself_is_one(v: list[float]) -> None:
    assert cosine_similarity(v, v) == pytest.approx(1.0)


@pytest.mark.parametrize("v", VECTORS)
def test_vector_with_its_negation_is_minus_one(v: list[float]) -> None:
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)


def test_symmetric() -> None:
    a, b = [0.2, 0.7, -0.1], [0.9, -0.3, 0.4]
    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_orthogonal_vectors_score_zero() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == 0.0


def test_known_value() -> None:
    assert cosine_similarity([1.0, 1.0], [1.0, 0.0]) == pytest.approx(1 / math.sqrt(2))


def test_dimension_mismatch_scores_zero() -> None:
    assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0]) == 0.0


def test_zero_vector_scores_zero_not_nan() -> None:
    assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
    assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0


def test_empty_vectors_score_zero() -> None:
    assert cosine_similarity([], []) == 0.0


def test_result_stays_within_bounds() -> None:
    v = [0.1] * 1000
    score = cosine_similarity(v, v)
    assert -1.0 <= score <= 1.0


def test_huge_components_do_not_overflow_to_a_match() -> None:
    assert cosine_similarity([1e200, 1.0], [-1e200, 1.0]) == pytest.approx(-1.0)
    assert cosine_similarity([1e200, 1e200], [1e200, 1e200]) == pytest.approx(1.0)


def test_tiny_components_do_not_underflow_to_zero() -> None:
    v = [1e-200, 2e-200]
    assert cosine_similarity(v, v) == pytest.approx(1.0)
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)


def test_mixed_magnitudes_keep_direction() -> None:
    assert cosine_similarity([1e300, 1e-300], [1.0, 0.0]) == pytest.approx(1.0)


def test_non_finite_components_score_zero() -> None:
    assert cosine_similarity([float("nan"), 1.0], [1.0, 1.0]) == 0.0
    assert cosine_similarity([float("inf"), 1.0], [1.0, 1.0]) == 0.0
