from __future__ import annotations

from typing import Protocol

from langchain_core.documents import Document


class DocumentLoaderPort(Protocol):
    def load(self, path: str) -> list[Document]:  # pragma: no cover - interface
        """Return the parent documents found in ``path``; ``metadata.source`` set to the path."""
        ...
