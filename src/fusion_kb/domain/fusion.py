from __future__ import annotations

from collections.abc import Sequence

from langchain_core.documents import Document

from fusion_kb.domain.document import document_key


def reciprocal_rank_fusion(
    ranked_lists: Sequence[Sequence[Document]],
) -> list[tuple[Document, float]]:
    """Merge ranked document lists into one ranking with reciprocal rank fusion.

    Every document at 0-based rank ``r`` in any list contributes ``1 / (r + k)``,
    where ``k`` is the total number of documents across all lists. Documents are
    merged by :func:`document_key`; the first occurrence is the one returned.
    Ties keep first-seen order.
    """
    k = sum(len(ranked) for ranked in ranked_lists)
    fused: dict[str, float] = {}
    first_seen: dict[str, Document] = {}

    for ranked in ranked_lists:
        for rank, doc in enumerate(ranked):
            key = document_key(doc)
            if key not in fused:
                fused[key] = 0.0
                first_seen[key] = doc
            fused[key] += 1.0 / (rank + k)

    # sorted() is stable and dicts keep insertion order
    order = sorted(fused, key=fused.__getitem__, reverse=True)
    return [(first_seen[key], fused[key]) for key in order]
