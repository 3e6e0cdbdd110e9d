from __future__ import annotations

import pytest

from fusion_kb.domain.metrics import DistanceMetric, ScoreDirection, ThresholdRule
from fusion_kb.domain.relevance import RelevanceFilter, filter_relevant

from fakes import doc


def _candidates(*scores: float):
    return [(doc(f"text {i}"), s) for i, s in enumerate(scores)]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("cosine", DistanceMetric.COSINE),
        ("COSINE", DistanceMetric.COSINE),
        ("L2", DistanceMetric.L2),
        ("euclidean", DistanceMetric.L2),
        ("ip", DistanceMetric.OTHER),
        (None, DistanceMetric.OTHER),
    ],
)
def test_metric_parse(value: str | None, expected: DistanceMetric) -> None:
    assert DistanceMetric.parse(value) is expected


def test_chroma_space_mapping() -> None:
    assert DistanceMetric.COSINE.chroma_space == "cosine"
    assert DistanceMetric.L2.chroma_space == "l2"
    assert DistanceMetric.OTHER.chroma_space == "ip"


def test_cosine_keeps_distances_at_or_below_threshold_in_order() -> None:
    cands = _candidates(0.1, 0.5, 0.4, 0.39, 0.41)
    kept = filter_relevant(DistanceMetric.COSINE, cands, 0.4)
    assert [s for _d, s in kept] == [0.1, 0.4, 0.39]
    # survivors keep their relative order
    assert [d for d, _s in kept] == [cands[0][0], cands[2][0], cands[3][0]]


def test_l2_threshold() -> None:
    cands = _candidates(120.0, 400.0, 401.0)
    kept = filter_relevant("L2", cands, 400)
    assert [s for _d, s in kept] == [120.0, 400.0]


def test_unknown_metric_passes_everything_through() -> None:
    cands = _candidates(999.0, -5.0)
    assert filter_relevant("ip", cands, 0.0) == cands


def test_empty_candidates() -> None:
    assert filter_relevant(DistanceMetric.COSINE, [], 0.4) == []


def test_higher_is_better_direction() -> None:
    cands = _candidates(0.9, 0.2, 0.7)
    kept = filter_relevant(
        DistanceMetric.COSINE, cands, 0.7, direction=ScoreDirection.HIGHER_IS_BETTER
    )
    assert [s for _d, s in kept] == [0.9, 0.7]


def test_relevance_filter_uses_rule_per_metric() -> None:
    rf = RelevanceFilter(
        {
            DistanceMetric.COSINE: ThresholdRule(0.4),
            DistanceMetric.L2: ThresholdRule(400.0),
        }
    )
    assert [s for _d, s in rf.apply("cosine", _candidates(0.3, 0.5))] == [0.3]
    assert [s for _d, s in rf.apply("l2", _candidates(300.0, 500.0))] == [300.0]
    assert [s for _d, s in rf.apply("ip", _candidates(1.0, 2.0))] == [1.0, 2.0]


def test_filter_without_rule_for_metric_passes_through() -> None:
    rf = RelevanceFilter({DistanceMetric.COSINE: ThresholdRule(0.4)})
    assert len(rf.apply(DistanceMetric.L2, _candidates(10_000.0))) == 1
