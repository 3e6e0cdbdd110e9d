from __future__ import annotations

import logging

from langchain_community.document_loaders import TextLoader
from langchain_core.documents import Document

log = logging.getLogger(__name__)


class TextFileLoader:
    """UTF-8 text loader; returns one parent Document per file with ``source`` set."""

    def __init__(self, encoding: str = "utf-8", autodetect_encoding: bool = True) -> None:
        self.encoding = encoding
        self.autodetect_encoding = autodetect_encoding

    def load(self, path: str) -> list[Document]:
        docs = TextLoader(
            path, encoding=self.encoding, autodetect_encoding=self.autodetect_encoding
        ).load()
        for d in docs:
            d.metadata = d.metadata or {}
            d.metadata["source"] = path
        log.debug("[load] %s docs=%d", path, len(docs))
        return docs
