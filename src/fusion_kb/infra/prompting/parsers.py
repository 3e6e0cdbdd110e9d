from __future__ import annotations

from typing import TypeVar

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import JsonOutputParser
from pydantic import BaseModel, Field, ValidationError

M = TypeVar("M", bound=BaseModel)


class AlternateQueries(BaseModel):
    question: list[str] = Field(description="Alternate questions")


class RephrasedQuestion(BaseModel):
    question: str = Field(description="Rephrased question")


def _parse_json(text: str, model: type[M]) -> M:
    # JsonOutputParser tolerates ```json fences around the payload
    data = JsonOutputParser(pydantic_object=model).parse(text or "")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise OutputParserException(f"Unexpected {model.__name__} payload: {e}") from e


def parse_alternate_queries(text: str) -> list[str]:
    """Non-empty, stripped alternates from ``{"question": [...]}``."""
    parsed = _parse_json(text, AlternateQueries)
    return [q.strip() for q in parsed.question if q and q.strip()]


def parse_rephrased_question(text: str) -> str:
    parsed = _parse_json(text, RephrasedQuestion)
    question = parsed.question.strip()
    if not question:
        raise OutputParserException("Rephrased question is empty")
    return question


def parse_summary(text: str) -> str:
    summary = (text or "").strip()
    if not summary:
        raise OutputParserException("Summary is empty")
    return summary
