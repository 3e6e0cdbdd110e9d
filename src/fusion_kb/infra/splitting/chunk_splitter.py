from __future__ import annotations

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from fusion_kb.domain.document import content_hash


class ChunkSplitter:
    """Split a parent document into overlapping child chunks.

    Children point back to the parent through ``metadata.source`` (the parent hash)
    and carry their own hash as ``id``. The parent's original ``source`` survives on
    each child as ``file_path``; the parent itself gets ``id`` = hash of its content.
    """

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 100) -> None:
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
        )

    def split(self, parent: Document) -> list[Document]:
        parent_id = content_hash(parent.page_content or "")
        parent.id = parent_id
        origin = (parent.metadata or {}).get("source")

        children: list[Document] = []
        for chunk in self._splitter.split_documents([parent]):
            chunk_id = content_hash(chunk.page_content)
            meta = dict(chunk.metadata or {})
            if origin is not None:
                meta["file_path"] = str(origin)
            meta.update(source=parent_id, id=chunk_id)
            children.append(Document(id=chunk_id, page_content=chunk.page_content, metadata=meta))
        return children
