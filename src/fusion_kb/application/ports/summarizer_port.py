from __future__ import annotations

from typing import Protocol

from langchain_core.documents import Document


class SummarizerPort(Protocol):
    def summarize(self, chunks: list[Document]) -> list[Document]:  # pragma: no cover
        """Return one summary document per chunk that could be summarized.

        A summary carries ``metadata.source`` = the chunk id. Chunks whose summary
        failed are simply absent from the result.
        """
        ...
