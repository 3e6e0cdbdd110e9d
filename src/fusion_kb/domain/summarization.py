from __future__ import annotations

from collections.abc import Collection, Iterable
from pathlib import PurePath

from langchain_core.documents import Document

DEFAULT_SUMMARY_EXTENSIONS: tuple[str, ...] = (".js", ".html", ".ts", ".md", ".pdf")
DEFAULT_SUMMARY_MIN_CHARS = 400


def has_summarizable_type(source: str, extensions: Collection[str]) -> bool:
    suffix = PurePath(source or "").suffix.lower()
    return bool(suffix) and suffix in {e.lower() for e in extensions}


def worth_summarizing(
    parent_source: str,
    chunks: Iterable[Document],
    *,
    extensions: Collection[str] = DEFAULT_SUMMARY_EXTENSIONS,
    min_chars: int = DEFAULT_SUMMARY_MIN_CHARS,
) -> list[Document]:
    """Select the chunks to send to the summarizer.

    The parent's file type must be in ``extensions`` and the chunk text must be
    strictly longer than ``min_chars``.
    """
    if not has_summarizable_type(parent_source, extensions):
        return []
    return [c for c in chunks if len(c.page_content or "") > int(min_chars)]
