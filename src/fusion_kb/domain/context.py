from __future__ import annotations

from collections.abc import Iterable

from langchain_core.documents import Document


def assemble_context(docs: Iterable[Document]) -> str:
    """Assemble a prompt-ready context block.

    Format per passage:
    [i] source | id (score)\nText...
    """
    out: list[str] = []
    for i, d in enumerate(docs, 1):
        meta = d.metadata or {}
        score = meta.get("score", meta.get("distance"))
        where = meta.get("file_path") or meta.get("source", "")
        header = f"[{i}] {where} | {str(meta.get('id', ''))[:12]}"
        if isinstance(score, (int, float)):
            header += f" ({float(score):.3f})"
        out.append(header)
        out.append((d.page_content or "").strip())
    return "\n\n".join(out)
