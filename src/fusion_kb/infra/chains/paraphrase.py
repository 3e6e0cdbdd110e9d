from __future__ import annotations

import logging
from dataclasses import dataclass

from fusion_kb.application.ports.llm_port import LLMPort
from fusion_kb.infra.prompting.parsers import parse_alternate_queries
from fusion_kb.infra.prompting.templates import paraphrase_prompt

log = logging.getLogger(__name__)


@dataclass
class QueryParaphraser:
    """Ask the LLM for alternate phrasings of a query (JSON ``{"question": [...]}``)."""

    llm: LLMPort

    def generate(self, query: str) -> list[str]:
        try:
            alternates = parse_alternate_queries(self.llm.complete(paraphrase_prompt(query)))
        except Exception as e:  # noqa: BLE001 - fall back to the original query
            log.warning("[fusion] failed to provide alternate questions: %s", e)
            return [query]
        return alternates or [query]
