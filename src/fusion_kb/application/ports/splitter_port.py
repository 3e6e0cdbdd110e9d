from __future__ import annotations

from typing import Protocol

from langchain_core.documents import Document


class SplitterPort(Protocol):
    def split(self, parent: Document) -> list[Document]:  # pragma: no cover - interface
        """Split ``parent`` into child chunks linked back to it by ``metadata.source``."""
        ...
