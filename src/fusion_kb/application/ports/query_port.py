from __future__ import annotations

from typing import Protocol


class ParaphraserPort(Protocol):
    def generate(self, query: str) -> list[str]:  # pragma: no cover - interface
        """Alternate phrasings of ``query``; ``[query]`` when none could be produced."""
        ...


class RewriterPort(Protocol):
    def rewrite(self, question: str) -> str:  # pragma: no cover - interface
        """A rephrased question, or ``question`` unchanged on failure."""
        ...
