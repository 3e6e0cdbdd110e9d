from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ScoreDirection(str, Enum):
    """Which side of a threshold counts as relevant."""

    LOWER_IS_BETTER = "lower"
    HIGHER_IS_BETTER = "higher"


class DistanceMetric(str, Enum):
    """Distance metric declared by a vector index."""

    COSINE = "cosine"
    L2 = "l2"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | DistanceMetric | None) -> DistanceMetric:
        """Map a metric name (``"COSINE"``, ``"l2"``, ``"ip"``...) onto the enum.

        Anything that is not cosine or L2 is ``OTHER``; its candidates are never filtered.
        """
        if isinstance(value, DistanceMetric):
            return value
        name = (value or "").strip().lower()
        if name == "cosine":
            return cls.COSINE
        if name in ("l2", "euclidean"):
            return cls.L2
        return cls.OTHER

    @property
    def chroma_space(self) -> str:
        # "ip" is the only remaining space Chroma supports
        return {"cosine": "cosine", "l2": "l2"}.get(self.value, "ip")


@dataclass(frozen=True)
class ThresholdRule:
    threshold: float
    direction: ScoreDirection = ScoreDirection.LOWER_IS_BETTER

    def passes(self, score: float) -> bool:
        if self.direction is ScoreDirection.HIGHER_IS_BETTER:
            return score >= self.threshold
        return score <= self.threshold
