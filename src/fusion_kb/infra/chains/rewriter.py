from __future__ import annotations

import logging
from dataclasses import dataclass

from fusion_kb.application.ports.llm_port import LLMPort
from fusion_kb.infra.prompting.parsers import parse_rephrased_question
from fusion_kb.infra.prompting.templates import rewrite_prompt

log = logging.getLogger(__name__)


@dataclass
class QueryRewriter:
    llm: LLMPort

    def rewrite(self, question: str) -> str:
        try:
            rephrased = parse_rephrased_question(self.llm.complete(rewrite_prompt(question)))
        except Exception as e:  # noqa: BLE001 - keep the user's wording
            log.warning("[rewrite] failed to rephrase question: %s", e)
            return question
        log.info("[rewrite] %r -> %r", question, rephrased)
        return rephrased
