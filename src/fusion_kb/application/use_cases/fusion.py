from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from langchain_core.documents import Document
from langchain_core.runnables import RunnableLambda

from fusion_kb.application.ports.embeddings_port import EmbeddingsPort
from fusion_kb.application.ports.query_port import ParaphraserPort
from fusion_kb.application.use_cases.retrieve import MultiStoreRetriever, require_query
from fusion_kb.core.settings import RetrievalSettings
from fusion_kb.domain.document import with_metadata
from fusion_kb.domain.fusion import reciprocal_rank_fusion

log = logging.getLogger(__name__)

DEFAULT_FUSION_THRESHOLD = 0.1


def query_variants(query: str, paraphrase: Callable[[str], list[str]]) -> list[str]:
    """Paraphrases of ``query`` followed by ``query`` itself.

    Falls back to ``[query]`` when paraphrasing fails or yields nothing. The original
    is appended only if no paraphrase is identical to it, so it is never counted
    twice in the fusion (always appending would double its weight, for example when
    the fallback already is ``[query]``).
    """
    try:
        alternates = [a.strip() for a in (paraphrase(query) or []) if a and a.strip()]
    except Exception:  # noqa: BLE001 - degrade to single-query retrieval
        log.warning("[fusion] failed to provide alternate questions for %r", query, exc_info=True)
        alternates = []
    if not alternates:
        alternates = [query]
    if query not in alternates:
        alternates.append(query)
    return alternates


def fuse(
    query: str,
    *,
    embed: Callable[[str], Sequence[float]],
    paraphrase: Callable[[str], list[str]],
    retrieve: Callable[[Sequence[float]], list[Document]],
    fusion_threshold: float = DEFAULT_FUSION_THRESHOLD,
    max_concurrency: int = 5,
) -> list[Document]:
    """Retrieve for every query variant and merge the lists with reciprocal rank fusion.

    Per-variant retrievals run concurrently (at most ``max_concurrency`` in flight);
    a failing variant contributes an empty list. Each returned document carries its
    fused score in ``metadata["score"]``; only scores strictly above
    ``fusion_threshold`` are kept.

    Covered-chunk removal happens per variant only, so the fused list may hold a
    summary next to the chunk it summarizes when different variants surfaced them.
    """
    q = require_query(query)
    variants = query_variants(q, paraphrase)
    log.info("[fusion] variants=%d %s", len(variants), variants)

    def _retrieve_variant(variant: str) -> list[Document]:
        return retrieve(embed(variant))

    outcomes = RunnableLambda(_retrieve_variant).batch(
        variants, config={"max_concurrency": max_concurrency}, return_exceptions=True
    )
    ranked_lists: list[list[Document]] = []
    for variant, outcome in zip(variants, outcomes, strict=True):
        if isinstance(outcome, Exception):
            log.warning("[fusion] retrieval for variant %r failed: %s", variant, outcome)
            ranked_lists.append([])
        else:
            ranked_lists.append(list(outcome))

    fused = reciprocal_rank_fusion(ranked_lists)
    kept = [with_metadata(doc, score=score) for doc, score in fused if score > fusion_threshold]
    log.info(
        "[fusion] candidates=%d distinct=%d kept=%d (threshold=%.3f)",
        sum(len(r) for r in ranked_lists),
        len(fused),
        len(kept),
        fusion_threshold,
    )
    return kept


@dataclass
class FusionRetriever:
    """Retriever that wraps a :class:`MultiStoreRetriever` with multi-query fusion."""

    base: MultiStoreRetriever
    embedder: EmbeddingsPort
    paraphraser: ParaphraserPort
    settings: RetrievalSettings = field(default_factory=RetrievalSettings)

    def retrieve(self, query: str, *, settings: RetrievalSettings | None = None) -> list[Document]:
        cfg = settings or self.settings
        return fuse(
            query,
            embed=self.embedder.embed_query,
            paraphrase=self.paraphraser.generate,
            retrieve=lambda vector: self.base.retrieve_by_vector(vector, settings=cfg),
            fusion_threshold=cfg.fusion_threshold,
            max_concurrency=cfg.max_concurrency,
        )
