from __future__ import annotations

import hashlib

from langchain_core.documents import Document

from fusion_kb.domain.document import (
    content_hash,
    decode_document,
    document_key,
    encode_document,
    with_metadata,
)


def test_hash_is_sha3_256_hex() -> None:
    text = "The sky is blue because of Rayleigh scattering."
    h = content_hash(text)
    assert h == hashlib.sha3_256(text.encode("utf-8")).hexdigest()
    assert len(h) == 64
    assert content_hash(text) == h


def test_hash_distinguishes_whitespace_and_case() -> None:
    assert content_hash("abc") != content_hash("abc ")
    assert content_hash("abc") != content_hash("ABC")
    assert content_hash("") == hashlib.sha3_256(b"").hexdigest()


def test_document_key_ignores_field_order_and_scores() -> None:
    a = Document(page_content="x", metadata={"id": "1", "source": "p"})
    b = Document(page_content="x", metadata={"source": "p", "id": "1", "distance": 0.2})
    c = Document(page_content="x", metadata={"source": "p", "id": "1", "score": 0.9})
    assert document_key(a) == document_key(b) == document_key(c)


def test_document_key_falls_back_to_content_hash() -> None:
    a = Document(page_content="same text", metadata={"source": "p"})
    b = Document(
        page_content="same text", metadata={"source": "p", "id": content_hash("same text")}
    )
    other = Document(page_content="other text", metadata={"source": "p"})
    assert document_key(a) == document_key(b)
    assert document_key(a) != document_key(other)


def test_with_metadata_returns_copy() -> None:
    d = Document(id="x", page_content="t", metadata={"id": "x"})
    d2 = with_metadata(d, distance=0.3)
    assert d2.metadata == {"id": "x", "distance": 0.3}
    assert d.metadata == {"id": "x"}
    assert d2.id == "x"


def test_encode_decode_parent() -> None:
    parent = Document(page_content="Grüße – ü", metadata={"source": "a/b.md"})
    key = content_hash(parent.page_content)
    restored = decode_document(key, encode_document(parent))
    assert restored.id == key
    assert restored.page_content == parent.page_content
    assert restored.metadata == {"source": "a/b.md"}
