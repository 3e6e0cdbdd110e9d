"""Content-addressed blob store on top of a LangChain ``ByteStore``.

Keys are content hashes, so a key's value never changes: ``put`` on an existing key
is a no-op. ``exists`` doubles as the ingestion dedup gate.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from langchain_classic.storage import LocalFileStore
from langchain_core.documents import Document
from langchain_core.stores import ByteStore

from fusion_kb.domain.document import decode_document

log = logging.getLogger(__name__)


class ContentAddressedStore:
    def __init__(self, store: ByteStore) -> None:
        self._store = store

    @classmethod
    def on_disk(cls, root: Path) -> ContentAddressedStore:
        root.mkdir(parents=True, exist_ok=True)
        return cls(LocalFileStore(str(root)))

    def exists(self, key: str) -> bool:
        return self._store.mget([key])[0] is not None

    def put(self, key: str, value: bytes) -> None:
        if self.exists(key):
            log.debug("blob %s already stored", key)
            return
        self._store.mset([(key, value)])

    def get(self, keys: Sequence[str]) -> list[bytes | None]:
        return list(self._store.mget(list(keys)))

    def get_document(self, key: str) -> Document | None:
        """Stored parent document for ``key``, or ``None`` when unknown."""
        raw = self.get([key])[0]
        return decode_document(key, raw) if raw is not None else None
