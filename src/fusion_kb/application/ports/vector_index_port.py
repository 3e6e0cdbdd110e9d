from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from langchain_core.documents import Document

from fusion_kb.domain.metrics import DistanceMetric


class VectorIndexPort(Protocol):
    """Append-only vector collection with one fixed distance metric."""

    name: str
    metric: DistanceMetric

    def query(
        self, vector: Sequence[float], k: int
    ) -> list[tuple[Document, float]]:  # pragma: no cover - interface
        """Return up to ``k`` nearest neighbours ranked best-first with their scores."""
        ...

    def add(self, documents: list[Document]) -> None:  # pragma: no cover - interface
        ...
