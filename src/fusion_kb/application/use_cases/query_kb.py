from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from langchain_core.documents import Document

from fusion_kb.application.ports.llm_port import LLMPort
from fusion_kb.application.ports.query_port import RewriterPort
from fusion_kb.application.ports.retriever_port import RetrieverPort
from fusion_kb.application.use_cases.retrieve import require_query
from fusion_kb.core.settings import RetrievalSettings
from fusion_kb.domain.context import assemble_context

log = logging.getLogger(__name__)

ANSWER_TEMPLATE = """\
Answer the user's question from the following context. This is your only source of truth.
If the context does not contain the answer, say that you don't know.

CONTEXT:
{context}

QUESTION:
{question}"""


@dataclass(frozen=True)
class AnswerResult:
    question: str
    documents: list[Document]
    context: str
    answer: str | None = None


@dataclass
class QueryKnowledgeBase:
    """Question in, relevant passages (and optionally an answer) out.

    1) Validate the question; optionally rewrite it (``REWRITE``)
    2) Retrieve with multi-query fusion when ``FUSION`` is on, else plainly
    3) Assemble the passages into a context block and, for :meth:`ask`, let the LLM answer

    Per-call ``overrides`` are applied to a copy of :attr:`settings`.
    """

    retriever: RetrieverPort
    fusion: RetrieverPort | None = None
    rewriter: RewriterPort | None = None
    llm: LLMPort | None = None
    settings: RetrievalSettings = field(default_factory=RetrievalSettings)
    prompt_template: str = ANSWER_TEMPLATE

    def _prepare(
        self, question: str, overrides: Mapping[str, Any] | None
    ) -> tuple[str, RetrievalSettings]:
        cfg = self.settings.with_overrides(overrides)
        q = require_query(question)
        if cfg.rewrite and self.rewriter is not None:
            q = self.rewriter.rewrite(q).strip() or q
        return q, cfg

    def _search(self, question: str, cfg: RetrievalSettings) -> list[Document]:
        strategy = self.fusion if cfg.fusion and self.fusion is not None else self.retriever
        if cfg.fusion and self.fusion is None:
            log.warning("[query] fusion requested but no fusion retriever is wired")
        return strategy.retrieve(question, settings=cfg)

    def retrieve(
        self, question: str, overrides: Mapping[str, Any] | None = None
    ) -> list[Document]:
        q, cfg = self._prepare(question, overrides)
        return self._search(q, cfg)

    def ask(self, question: str, overrides: Mapping[str, Any] | None = None) -> AnswerResult:
        q, cfg = self._prepare(question, overrides)
        docs = self._search(q, cfg)
        context = assemble_context(docs)
        if self.llm is None:
            return AnswerResult(question=q, documents=docs, context=context)
        answer = self.llm.complete(self.prompt_template.format(context=context, question=q))
        log.info("[query] docs=%d answer_chars=%d", len(docs), len(answer))
        return AnswerResult(question=q, documents=docs, context=context, answer=answer)
