from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from langchain_core.documents import Document

if TYPE_CHECKING:
    from fusion_kb.core.settings import RetrievalSettings


class RetrieverPort(Protocol):
    """A retrieval strategy: query text in, relevant documents out."""

    def retrieve(
        self, query: str, *, settings: RetrievalSettings | None = None
    ) -> list[Document]:  # pragma: no cover - interface
        ...
