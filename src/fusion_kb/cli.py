from __future__ import annotations

import json
import logging
import sys
import warnings
from collections import Counter
from pathlib import Path
from typing import Any

import typer
from langchain_core.documents import Document

from .application.use_cases import SKIPPED
from .application.use_cases.import_files import FAILED
from .config import composition
from .exceptions import ConfigurationError, InvalidQueryError
from .logging_setup import setup_logging

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Fusion KB tools")


def _overrides(
    fusion: bool | None,
    rewrite: bool | None,
    cosine_threshold: float | None,
    l2_threshold: float | None,
    fusion_threshold: float | None,
) -> dict[str, Any]:
    given = {
        "fusion": fusion,
        "rewrite": rewrite,
        "cosine_index_threshold": cosine_threshold,
        "l2_index_threshold": l2_threshold,
        "fusion_threshold": fusion_threshold,
    }
    return {k: v for k, v in given.items() if v is not None}


def _hit_payload(i: int, d: Document) -> dict[str, Any]:
    meta = d.metadata or {}
    return {
        "index": i,
        "id": meta.get("id", d.id),
        "source": meta.get("file_path") or meta.get("source"),
        "score": meta.get("score"),
        "distance": meta.get("distance"),
        "content": d.page_content,
        "metadata": meta,
    }


def _write_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


FusionOpt = typer.Option(None, "--fusion/--no-fusion", help="Multi-query rank fusion")
RewriteOpt = typer.Option(None, "--rewrite/--no-rewrite", help="Rephrase the question first")
CosineOpt = typer.Option(None, "--cosine-threshold", help="Max cosine distance per index")
L2Opt = typer.Option(None, "--l2-threshold", help="Max L2 distance per index")
FusionThresholdOpt = typer.Option(None, "--fusion-threshold", help="Min fused RRF score")


@app.command("ingest")
def ingest(
    path: Path = typer.Argument(..., help="File or directory to ingest (recursive)."),  # noqa: B008
) -> None:
    """Ingest a file or every supported file under a directory."""
    setup_logging(logging.INFO)
    outcomes = composition.build_import_use_case().execute(path)
    if not outcomes:
        typer.echo(f"No supported files found under {path}")
        raise typer.Exit(code=0)

    for file, outcome in outcomes.items():
        shown = outcome if outcome in (SKIPPED, FAILED) else outcome[:12]
        typer.echo(f"{shown:<12}  {file}")
    totals = Counter(o if o in (SKIPPED, FAILED) else "ingested" for o in outcomes.values())
    typer.echo(
        f"OK: ingested={totals['ingested']} skipped={totals[SKIPPED]} failed={totals[FAILED]}"
    )
    if totals[FAILED]:
        raise typer.Exit(code=1)


@app.command("query")
def query_cmd(
    text: str = typer.Argument(..., help="Query text"),
    fusion: bool | None = FusionOpt,
    rewrite: bool | None = RewriteOpt,
    cosine_threshold: float | None = CosineOpt,
    l2_threshold: float | None = L2Opt,
    fusion_threshold: float | None = FusionThresholdOpt,
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Read-only retrieval across the summary and chunk indices."""
    setup_logging(logging.ERROR if as_json else logging.INFO)
    if as_json:
        warnings.filterwarnings("ignore")

    uc = composition.build_query_use_case()
    docs = uc.retrieve(
        text, _overrides(fusion, rewrite, cosine_threshold, l2_threshold, fusion_threshold)
    )

    if as_json:
        _write_json([_hit_payload(i, d) for i, d in enumerate(docs, start=1)])
        raise typer.Exit()

    if not docs:
        typer.echo("No relevant documents.")
        return

    for i, d in enumerate(docs, start=1):
        hit = _hit_payload(i, d)
        if hit["score"] is not None:
            header = f"[{i}] score={float(hit['score']):.4f}"
        elif hit["distance"] is not None:
            header = f"[{i}] distance={float(hit['distance']):.3f}"
        else:
            header = f"[{i}]"
        typer.echo(f"{header}  {hit['source']}  {str(hit['id'])[:12]}")
        content_line = (d.page_content or "").strip().replace("\n", " ")
        if len(content_line) > 600:
            content_line = content_line[:600] + "..."
        typer.echo(content_line)
        typer.echo("-" * 80)


@app.command("ask")
def ask_cmd(
    text: str = typer.Argument(..., help="Question"),
    fusion: bool | None = FusionOpt,
    rewrite: bool | None = RewriteOpt,
    cosine_threshold: float | None = CosineOpt,
    l2_threshold: float | None = L2Opt,
    fusion_threshold: float | None = FusionThresholdOpt,
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Answer a question from the retrieved context."""
    setup_logging(logging.ERROR if as_json else logging.INFO)
    uc = composition.build_query_use_case()
    result = uc.ask(
        text, _overrides(fusion, rewrite, cosine_threshold, l2_threshold, fusion_threshold)
    )
    if as_json:
        _write_json(
            {
                "question": result.question,
                "context": result.context,
                "answer": result.answer,
                "sources": [_hit_payload(i, d) for i, d in enumerate(result.documents, 1)],
            }
        )
        raise typer.Exit()
    typer.echo(result.answer if result.answer is not None else result.context)


def main() -> int:
    try:
        app()
        return 0
    except ConfigurationError as ce:
        typer.secho(f"Config error: {ce}", fg=typer.colors.RED)
        return 2
    except InvalidQueryError as qe:
        typer.secho(f"Invalid query: {qe}", fg=typer.colors.RED)
        return 2
    except Exception as e:  # noqa: BLE001
        typer.secho(f"Unexpected error: {e}", fg=typer.colors.RED)
        return 1


if __name__ == "__main__":
    sys.exit(main())
