from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from langchain_core.documents import Document

from fusion_kb.domain.metrics import DistanceMetric, ScoreDirection, ThresholdRule

Candidate = tuple[Document, float]


def filter_relevant(
    metric: DistanceMetric | str,
    candidates: Iterable[Candidate],
    threshold: float,
    *,
    direction: ScoreDirection = ScoreDirection.LOWER_IS_BETTER,
) -> list[Candidate]:
    """Keep the candidates whose score passes ``threshold`` for ``metric``.

    Candidates arrive ranked best-first and the result is a subsequence in the same
    order. Metrics other than cosine and L2 pass through unfiltered.
    """
    if DistanceMetric.parse(metric) is DistanceMetric.OTHER:
        return list(candidates)
    rule = ThresholdRule(float(threshold), direction)
    return [(doc, score) for doc, score in candidates if rule.passes(float(score))]


@dataclass(frozen=True)
class RelevanceFilter:
    """Per-metric threshold rules applied to index candidates."""

    rules: Mapping[DistanceMetric, ThresholdRule] = field(default_factory=dict)

    def rule_for(self, metric: DistanceMetric | str) -> ThresholdRule | None:
        return self.rules.get(DistanceMetric.parse(metric))

    def apply(
        self, metric: DistanceMetric | str, candidates: Iterable[Candidate]
    ) -> list[Candidate]:
        rule = self.rule_for(metric)
        if rule is None:
            return list(candidates)
        return filter_relevant(metric, candidates, rule.threshold, direction=rule.direction)
