"""Composition root: builds use cases from :class:`AppSettings` and concrete adapters.

Keeps environment/settings handling out of the CLI.
"""

from __future__ import annotations

import logging

from langchain_core.embeddings import Embeddings

from fusion_kb.application.use_cases import (
    FusionRetriever,
    ImportFilesUseCase,
    IngestDocumentUseCase,
    MultiStoreRetriever,
    QueryKnowledgeBase,
    SummarizationGate,
)
from fusion_kb.core.settings import AppSettings, get_settings
from fusion_kb.infra.chains import LLMSummarizer, QueryParaphraser, QueryRewriter
from fusion_kb.infra.embeddings.factory import build_embeddings
from fusion_kb.infra.llm.providers import build_llm
from fusion_kb.infra.loaders import TextFileLoader
from fusion_kb.infra.splitting.chunk_splitter import ChunkSplitter
from fusion_kb.infra.storage.content_store import ContentAddressedStore
from fusion_kb.infra.vectorstores import ChromaIndex

log = logging.getLogger(__name__)


def build_indices(app: AppSettings, embedder: Embeddings) -> tuple[ChromaIndex, ChromaIndex]:
    """(summary index, chunk index) sharing one persist directory."""
    s = app.storage
    summaries = ChromaIndex(s.summaries_collection, s.persist_dir, embedder, s.summaries_metric)
    chunks = ChromaIndex(s.chunks_collection, s.persist_dir, embedder, s.chunks_metric)
    return summaries, chunks


def build_summarization_gate(app: AppSettings) -> SummarizationGate | None:
    """Summary gate for ingestion, or None when no real model is configured.

    Summaries are written once per document, so placeholder output from the dummy
    provider would stay in the summary index for good.
    """
    if app.llm.provider == "dummy":
        log.info("[ingest] LLM_PROVIDER=dummy: summaries disabled")
        return None
    ing = app.ingest
    return SummarizationGate(
        summarizer=LLMSummarizer(build_llm(app.llm), max_concurrency=ing.summary_max_concurrency),
        extensions=ing.summary_extensions,
        min_chars=ing.summary_min_chars,
    )


def build_import_use_case(app: AppSettings | None = None) -> ImportFilesUseCase:
    app = app or get_settings()
    embedder = build_embeddings(app.embeddings)
    summary_index, chunk_index = build_indices(app, embedder)
    ing = app.ingest
    ingest = IngestDocumentUseCase(
        store=ContentAddressedStore.on_disk(app.storage.blob_store_dir),
        chunk_index=chunk_index,
        summary_index=summary_index,
        splitter=ChunkSplitter(ing.chunk_size, ing.chunk_overlap),
        gate=build_summarization_gate(app),
    )
    return ImportFilesUseCase(
        loader=TextFileLoader(), ingest=ingest, extensions=ing.ingest_extensions
    )


def build_query_use_case(app: AppSettings | None = None) -> QueryKnowledgeBase:
    app = app or get_settings()
    embedder = build_embeddings(app.embeddings)
    summary_index, chunk_index = build_indices(app, embedder)
    llm = build_llm(app.llm)
    base = MultiStoreRetriever(
        summary_index=summary_index,
        chunk_index=chunk_index,
        embedder=embedder,
        settings=app.retrieval,
    )
    return QueryKnowledgeBase(
        retriever=base,
        fusion=FusionRetriever(
            base=base,
            embedder=embedder,
            paraphraser=QueryParaphraser(llm),
            settings=app.retrieval,
        ),
        rewriter=QueryRewriter(llm),
        llm=llm,
        settings=app.retrieval,
    )


__all__ = [
    "build_import_use_case",
    "build_indices",
    "build_query_use_case",
    "build_summarization_gate",
]
