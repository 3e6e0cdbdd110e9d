from __future__ import annotations

import logging
from dataclasses import dataclass

from langchain_core.documents import Document
from langchain_core.runnables import RunnableLambda

from fusion_kb.application.ports.llm_port import LLMPort
from fusion_kb.domain.document import content_hash
from fusion_kb.infra.prompting.parsers import parse_summary
from fusion_kb.infra.prompting.templates import summary_prompt

log = logging.getLogger(__name__)


@dataclass
class LLMSummarizer:
    """Summarize chunks with an LLM, ``max_concurrency`` requests at a time.

    Each summary is a new document whose ``metadata.source`` is the summarized
    chunk's id and whose ``id`` is the hash of the summary text. Chunks whose
    summary failed or came back empty are left out.
    """

    llm: LLMPort
    max_concurrency: int = 10

    def _summarize_one(self, chunk: Document) -> str:
        return parse_summary(self.llm.complete(summary_prompt(chunk.page_content)))

    def summarize(self, chunks: list[Document]) -> list[Document]:
        if not chunks:
            return []
        outcomes = RunnableLambda(self._summarize_one).batch(
            chunks, config={"max_concurrency": self.max_concurrency}, return_exceptions=True
        )
        summaries: list[Document] = []
        for chunk, outcome in zip(chunks, outcomes, strict=True):
            chunk_id = str(chunk.id or (chunk.metadata or {}).get("id", ""))
            if isinstance(outcome, Exception):
                log.warning(
                    "[ingest/summaries] chunk %s not summarized: %s", chunk_id[:12], outcome
                )
                continue
            summary_id = content_hash(outcome)
            summaries.append(
                Document(
                    id=summary_id,
                    page_content=outcome,
                    metadata={"source": chunk_id, "id": summary_id},
                )
            )
        return summaries
