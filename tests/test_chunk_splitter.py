from __future__ import annotations

from langchain_core.documents import Document

from fusion_kb.domain.document import content_hash
from fusion_kb.infra.splitting.chunk_splitter import ChunkSplitter


def test_children_link_back_to_parent() -> None:
    text = " ".join(f"sentence number {i}." for i in range(200))
    parent = Document(page_content=text, metadata={"source": "docs/guide.md"})

    children = ChunkSplitter(chunk_size=300, chunk_overlap=50).split(parent)

    assert parent.id == content_hash(text)
    assert len(children) > 1
    for child in children:
        assert len(child.page_content) <= 300
        assert child.metadata["source"] == parent.id
        assert child.metadata["id"] == content_hash(child.page_content) == child.id
        assert child.metadata["file_path"] == "docs/guide.md"


def test_consecutive_chunks_overlap() -> None:
    words = " ".join(f"w{i}" for i in range(400))
    children = ChunkSplitter(chunk_size=200, chunk_overlap=60).split(Document(page_content=words))
    for left, right in zip(children, children[1:]):
        tail = left.page_content.split()[-1]
        assert tail in right.page_content.split()


def test_short_document_is_a_single_chunk() -> None:
    parent = Document(page_content="The sky is blue because of Rayleigh scattering.")
    children = ChunkSplitter().split(parent)
    assert len(children) == 1
    assert children[0].page_content == parent.page_content
    assert "file_path" not in children[0].metadata
