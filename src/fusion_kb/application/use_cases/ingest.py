from __future__ import annotations

import logging
import time
from collections.abc import Collection
from dataclasses import dataclass

from langchain_core.documents import Document

from fusion_kb.application.ports.blob_store_port import BlobStorePort
from fusion_kb.application.ports.splitter_port import SplitterPort
from fusion_kb.application.ports.summarizer_port import SummarizerPort
from fusion_kb.application.ports.vector_index_port import VectorIndexPort
from fusion_kb.domain.document import content_hash, encode_document
from fusion_kb.domain.summarization import (
    DEFAULT_SUMMARY_EXTENSIONS,
    DEFAULT_SUMMARY_MIN_CHARS,
    worth_summarizing,
)

log = logging.getLogger(__name__)

SKIPPED = "skipped"


@dataclass
class SummarizationGate:
    """Decide which chunks get a summary and produce those summaries.

    Only chunks of allowed file types that are longer than ``min_chars`` reach the
    summarizer. A summarizer that fails outright yields no summaries; it never
    aborts the ingestion.
    """

    summarizer: SummarizerPort
    extensions: Collection[str] = DEFAULT_SUMMARY_EXTENSIONS
    min_chars: int = DEFAULT_SUMMARY_MIN_CHARS

    def select(self, parent: Document, chunks: list[Document]) -> list[Document]:
        source = str((parent.metadata or {}).get("source", ""))
        return worth_summarizing(
            source, chunks, extensions=self.extensions, min_chars=self.min_chars
        )

    def summarize(self, parent: Document, chunks: list[Document]) -> list[Document]:
        selected = self.select(parent, chunks)
        if not selected:
            return []
        try:
            summaries = self.summarizer.summarize(selected)
        except Exception:  # noqa: BLE001 - chunks stay indexed without summaries
            log.warning(
                "[ingest/summaries] summarizer failed for %d chunks of %s",
                len(selected),
                parent.id,
                exc_info=True,
            )
            return []
        log.info(
            "[ingest/summaries] worth=%d/%d summarized=%d",
            len(selected),
            len(chunks),
            len(summaries),
        )
        return summaries


@dataclass
class IngestDocumentUseCase:
    """Content-addressed ingestion of one parent document.

    1) Hash the parent; if the store already has it, report ``"skipped"``
    2) Index all child chunks
    3) Summarize the chunks worth summarizing and index the summaries
    4) Record the parent's raw content in the store
    Returns the parent id.

    The store write comes last, so an ingestion that died before it can simply be
    run again. Two concurrent ingestions of the same content may both write.
    """

    store: BlobStorePort
    chunk_index: VectorIndexPort
    summary_index: VectorIndexPort
    splitter: SplitterPort
    gate: SummarizationGate | None = None

    def execute(self, parent: Document) -> str:
        """Split ``parent`` and ingest it; see :meth:`ingest`."""
        if self.store.exists(content_hash(parent.page_content or "")):
            log.info("[ingest] %s already exists, skipping", parent.metadata.get("source"))
            return SKIPPED
        return self.ingest(parent, self.splitter.split(parent))

    def ingest(self, parent: Document, chunks: list[Document]) -> str:
        parent_id = content_hash(parent.page_content or "")
        parent.id = parent_id
        if self.store.exists(parent_id):
            log.info("[ingest] %s already exists, skipping", parent_id)
            return SKIPPED

        t0 = time.perf_counter()
        self.chunk_index.add(chunks)

        summaries = self.gate.summarize(parent, chunks) if self.gate is not None else []
        if summaries:
            try:
                self.summary_index.add(summaries)
            except Exception:  # noqa: BLE001 - degraded: chunks indexed, summaries missing
                log.warning(
                    "[ingest/summaries] indexing %d summaries for %s failed",
                    len(summaries),
                    parent_id,
                    exc_info=True,
                )
                summaries = []

        self.store.put(parent_id, encode_document(parent))
        log.info(
            "[ingest] %s chunks=%d summaries=%d took %d ms",
            parent_id[:12],
            len(chunks),
            len(summaries),
            int((time.perf_counter() - t0) * 1000),
        )
        return parent_id
