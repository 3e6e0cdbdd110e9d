from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field

from langchain_core.documents import Document

from fusion_kb.application.ports.embeddings_port import EmbeddingsPort
from fusion_kb.application.ports.vector_index_port import VectorIndexPort
from fusion_kb.core.settings import RetrievalSettings
from fusion_kb.domain.document import with_metadata
from fusion_kb.domain.relevance import Candidate, RelevanceFilter
from fusion_kb.exceptions import InvalidQueryError

log = logging.getLogger(__name__)


def require_query(query: str | None) -> str:
    q = (query or "").strip()
    if not q:
        raise InvalidQueryError("Query text is required")
    return q


def drop_covered_chunks(
    summaries: Sequence[Candidate], chunks: Sequence[Candidate]
) -> list[Candidate]:
    """Remove chunks whose ``metadata.id`` is the ``source`` of a surfaced summary."""
    covered = {str((d.metadata or {}).get("source", "")) for d, _s in summaries}
    covered.discard("")
    return [(d, s) for d, s in chunks if str((d.metadata or {}).get("id", "")) not in covered]


@dataclass
class MultiStoreRetriever:
    """Query the summary and chunk indices together and merge their relevant hits.

    Each index is filtered with the threshold rule of its own metric. Summaries come
    first; chunks already covered by one of those summaries are dropped. A failing
    or slow index contributes nothing instead of failing the query, and an embedder
    failure yields an empty result.
    """

    summary_index: VectorIndexPort
    chunk_index: VectorIndexPort
    embedder: EmbeddingsPort
    settings: RetrievalSettings = field(default_factory=RetrievalSettings)

    def retrieve(self, query: str, *, settings: RetrievalSettings | None = None) -> list[Document]:
        q = require_query(query)
        try:
            vector = self.embedder.embed_query(q)
        except Exception:  # noqa: BLE001 - an unavailable embedder yields no hits
            log.warning("[retrieve] embedding failed for query %r", q, exc_info=True)
            return []
        return self.retrieve_by_vector(vector, settings=settings)

    def retrieve_by_vector(
        self, vector: Sequence[float], *, settings: RetrievalSettings | None = None
    ) -> list[Document]:
        cfg = settings or self.settings
        rf = cfg.relevance_filter()
        summaries, chunks = self._search_all(vector, cfg, rf)
        kept_chunks = drop_covered_chunks(summaries, chunks)
        log.info(
            "[retrieve] summaries=%d chunks=%d (covered=%d)",
            len(summaries),
            len(kept_chunks),
            len(chunks) - len(kept_chunks),
        )
        return [with_metadata(d, distance=float(s)) for d, s in (*summaries, *kept_chunks)]

    def _search_all(
        self, vector: Sequence[float], cfg: RetrievalSettings, rf: RelevanceFilter
    ) -> tuple[list[Candidate], list[Candidate]]:
        stores = (self.summary_index, self.chunk_index)
        pool = ThreadPoolExecutor(max_workers=len(stores), thread_name_prefix="index-query")
        try:
            futures = [pool.submit(store.query, list(vector), cfg.top_k) for store in stores]
            results: list[list[Candidate]] = []
            for store, fut in zip(stores, futures, strict=True):
                try:
                    raw = fut.result(timeout=cfg.index_query_timeout)
                except FutureTimeout:
                    log.warning(
                        "[retrieve] index %r timed out after %.1fs",
                        store.name,
                        cfg.index_query_timeout,
                    )
                    results.append([])
                    continue
                except Exception:  # noqa: BLE001 - one failing index must not abort the query
                    log.warning("[retrieve] index %r query failed", store.name, exc_info=True)
                    results.append([])
                    continue
                kept = rf.apply(store.metric, raw)
                log.debug(
                    "[retrieve] index=%s metric=%s candidates=%d kept=%d",
                    store.name,
                    store.metric.value,
                    len(raw),
                    len(kept),
                )
                results.append(kept)
        finally:
            # Do not wait on a timed-out query
            pool.shutdown(wait=False, cancel_futures=True)
        return results[0], results[1]
