from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from langchain_chroma import Chroma
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from fusion_kb.domain.document import content_hash
from fusion_kb.domain.metrics import DistanceMetric

log = logging.getLogger(__name__)


def _doc_id(d: Document) -> str:
    return str(d.id or (d.metadata or {}).get("id") or content_hash(d.page_content or ""))


def _chroma_safe(meta: dict[str, Any]) -> dict[str, Any]:
    # Chroma only stores scalar metadata values
    return {
        k: (v if isinstance(v, (str, int, float, bool)) else str(v))
        for k, v in meta.items()
        if v is not None
    }


class ChromaIndex:
    """Vector index backed by a LangChain-Chroma collection with one fixed metric.

    Scores returned by :meth:`query` are Chroma distances: lower is closer for every
    metric (cosine distance ``1 - similarity``, squared L2, negative inner product).
    """

    def __init__(
        self,
        collection: str,
        persist_dir: Path | None,
        embedder: Embeddings,
        metric: DistanceMetric | str = DistanceMetric.COSINE,
    ) -> None:
        self.name = collection
        self.metric = DistanceMetric.parse(metric)
        if persist_dir is not None:
            persist_dir.mkdir(parents=True, exist_ok=True)
        self._db = Chroma(
            collection_name=collection,
            persist_directory=str(persist_dir) if persist_dir is not None else None,
            embedding_function=embedder,
            collection_metadata={"hnsw:space": self.metric.chroma_space},
        )

    def add(self, documents: list[Document]) -> None:
        """Write ``documents`` under their content-hash ids; repeated ids are written once."""
        unique: dict[str, Document] = {}
        for d in documents:
            unique.setdefault(_doc_id(d), d)
        if not unique:
            return
        docs = [
            Document(
                id=i, page_content=d.page_content, metadata=_chroma_safe(dict(d.metadata or {}))
            )
            for i, d in unique.items()
        ]
        self._db.add_documents(docs, ids=list(unique))
        log.debug("index=%s added=%d", self.name, len(docs))

    def query(self, vector: Sequence[float], k: int) -> list[tuple[Document, float]]:
        if self.count() == 0:
            return []
        # Despite the name this returns raw distances, best-first
        return self._db.similarity_search_by_vector_with_relevance_scores(
            embedding=list(vector), k=min(int(k), self.count())
        )

    def count(self) -> int:
        return int(self._db._collection.count())
