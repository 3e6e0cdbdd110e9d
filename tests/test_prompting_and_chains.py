from __future__ import annotations

import json

import pytest
from langchain_core.documents import Document
from langchain_core.exceptions import OutputParserException

from fusion_kb.domain.document import content_hash
from fusion_kb.infra.chains import LLMSummarizer, QueryParaphraser, QueryRewriter
from fusion_kb.infra.prompting.parsers import (
    parse_alternate_queries,
    parse_rephrased_question,
    parse_summary,
)
from fusion_kb.infra.prompting.templates import paraphrase_prompt, rewrite_prompt

from fakes import InFlightCounter, ScriptedLLM


def test_parse_alternate_queries_accepts_fenced_json() -> None:
    text = (
        '```json\n{"question": '
        '["why is the sky blue", " reason for sky\'s blue color ", ""]}\n```'
    )
    assert parse_alternate_queries(text) == ["why is the sky blue", "reason for sky's blue color"]


@pytest.mark.parametrize("text", ["not json", '{"question": "single"}', '{"other": []}', ""])
def test_parse_alternate_queries_rejects_malformed(text: str) -> None:
    with pytest.raises(OutputParserException):
        parse_alternate_queries(text)


def test_parse_rephrased_question() -> None:
    assert parse_rephrased_question('{"question": " what makes the sky blue "}') == (
        "what makes the sky blue"
    )
    with pytest.raises(OutputParserException):
        parse_rephrased_question('{"question": "  "}')


def test_parse_summary_rejects_blank() -> None:
    assert parse_summary("  A summary. ") == "A summary."
    with pytest.raises(OutputParserException):
        parse_summary(" \n ")


def test_prompts_embed_schema_and_input() -> None:
    p = paraphrase_prompt("why is the sky blue")
    assert "why is the sky blue" in p
    assert '"question": ["Alternate Question 1"' in p
    r = rewrite_prompt("sky blue?")
    assert '{"question": "Rephrased Question"}' in r
    assert r.rstrip().endswith("sky blue?")


def test_paraphraser_parses_model_output() -> None:
    llm = ScriptedLLM(json.dumps({"question": ["a", "b"]}))
    assert QueryParaphraser(llm).generate("q") == ["a", "b"]
    assert len(llm.prompts) == 1


def test_paraphraser_falls_back_to_query() -> None:
    assert QueryParaphraser(ScriptedLLM("Sure! Here are some questions")).generate("q") == ["q"]

    def boom(prompt: str) -> str:
        raise TimeoutError("timed out")

    assert QueryParaphraser(ScriptedLLM(boom)).generate("q") == ["q"]


def test_rewriter_returns_original_on_bad_output() -> None:
    assert QueryRewriter(ScriptedLLM('{"question": "better q"}')).rewrite("q") == "better q"
    assert QueryRewriter(ScriptedLLM("garbage")).rewrite("q") == "q"


def test_summarizer_builds_summary_documents() -> None:
    chunks = [
        Document(id="c1", page_content="first chunk", metadata={"id": "c1"}),
        Document(id="c2", page_content="second chunk", metadata={"id": "c2"}),
    ]

    def respond(prompt: str) -> str:
        return "Summary: first" if "first chunk" in prompt else "Summary: second"

    summaries = LLMSummarizer(ScriptedLLM(respond), max_concurrency=2).summarize(chunks)

    assert [s.metadata["source"] for s in summaries] == ["c1", "c2"]
    assert summaries[0].page_content == "Summary: first"
    assert summaries[0].metadata["id"] == content_hash("Summary: first") == summaries[0].id


def test_summarizer_isolates_per_chunk_failures() -> None:
    chunks = [
        Document(id=f"c{i}", page_content=f"chunk {i}", metadata={"id": f"c{i}"}) for i in range(4)
    ]

    def respond(prompt: str) -> str:
        if "chunk 1" in prompt:
            raise ConnectionError("dropped")
        if "chunk 2" in prompt:
            return "   "
        return "ok " + prompt[-7:]

    summaries = LLMSummarizer(ScriptedLLM(respond)).summarize(chunks)
    assert [s.metadata["source"] for s in summaries] == ["c0", "c3"]


def test_summarizer_empty_input() -> None:
    llm = ScriptedLLM("x")
    assert LLMSummarizer(llm).summarize([]) == []
    assert llm.prompts == []


def test_summarizer_keeps_at_most_max_concurrency_calls_in_flight() -> None:
    counter = InFlightCounter()
    chunks = [
        Document(id=f"c{i}", page_content=f"chunk {i}", metadata={"id": f"c{i}"}) for i in range(6)
    ]

    def respond(prompt: str) -> str:
        with counter:
            return "summary " + prompt[-7:]

    summaries = LLMSummarizer(ScriptedLLM(respond), max_concurrency=2).summarize(chunks)

    assert len(summaries) == 6
    assert counter.calls == 6
    assert counter.peak <= 2
