from __future__ import annotations

import hashlib
import json
from typing import Any

from langchain_core.documents import Document

# Per-retrieval fields; they differ between two retrievals of the same document.
SCORE_KEYS: frozenset[str] = frozenset({"distance", "score"})


def content_hash(text: str) -> str:
    """Content-addressed identifier: SHA3-256 hex digest of the UTF-8 text.

    No normalisation is applied, so two texts share an id only when they are equal.
    """
    return hashlib.sha3_256(text.encode("utf-8")).hexdigest()


def document_key(doc: Document) -> str:
    """Canonical identity of a retrieved document, independent of metadata field order.

    Score fields are excluded so that the same passage retrieved by different queries
    maps to one key. Documents without an ``id`` in their metadata fall back to the
    hash of their content.
    """
    meta = {k: v for k, v in (doc.metadata or {}).items() if k not in SCORE_KEYS}
    meta.setdefault("id", content_hash(doc.page_content or ""))
    return json.dumps(meta, sort_keys=True, ensure_ascii=False, default=str)


def with_metadata(doc: Document, **extra: Any) -> Document:
    """Return a copy of ``doc`` with ``extra`` merged into its metadata."""
    meta: dict[str, Any] = {**(doc.metadata or {}), **extra}
    return Document(id=doc.id, page_content=doc.page_content, metadata=meta)


def encode_document(doc: Document) -> bytes:
    """Raw stored form of a parent document: UTF-8 JSON of its text and metadata."""
    payload = {"page_content": doc.page_content, "metadata": dict(doc.metadata or {})}
    return json.dumps(payload, ensure_ascii=False, default=str).encode("utf-8")


def decode_document(doc_id: str, raw: bytes) -> Document:
    payload = json.loads(raw.decode("utf-8"))
    return Document(
        id=doc_id,
        page_content=payload.get("page_content", ""),
        metadata=payload.get("metadata") or {},
    )
