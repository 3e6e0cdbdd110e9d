from __future__ import annotations

from pathlib import Path

from fusion_kb.application.use_cases import SummarizationGate
from fusion_kb.config import composition
from fusion_kb.core.settings import (
    AppSettings,
    EmbeddingConfig,
    IngestSettings,
    LLMConfig,
    StorageSettings,
)


def _app(tmp_path: Path, **llm: object) -> AppSettings:
    return AppSettings(
        ingest=IngestSettings(),
        storage=StorageSettings(
            KB_PERSIST_DIR=tmp_path / "chroma", KB_STORAGE_DIR=tmp_path / "storage"
        ),
        embeddings=EmbeddingConfig(EMBEDDING_PROVIDER="dummy"),
        llm=LLMConfig(**llm),
    )


def test_dummy_llm_disables_summaries(tmp_path: Path) -> None:
    app = _app(tmp_path, LLM_PROVIDER="dummy")
    assert composition.build_summarization_gate(app) is None


def test_real_llm_gets_a_summary_gate(tmp_path: Path) -> None:
    app = _app(tmp_path, LLM_PROVIDER="openai", OPENAI_API_KEY="sk-test")
    gate = composition.build_summarization_gate(app)
    assert isinstance(gate, SummarizationGate)
    assert gate.min_chars == app.ingest.summary_min_chars


def test_ingest_with_dummy_llm_writes_no_summaries(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    body = "The sky is blue because of Rayleigh scattering. " * 20
    (docs / "guide.md").write_text(body, encoding="utf-8")

    uc = composition.build_import_use_case(_app(tmp_path, LLM_PROVIDER="dummy"))
    outcomes = uc.execute(docs)

    assert len(outcomes) == 1
    assert uc.ingest.gate is None
    assert uc.ingest.summary_index.count() == 0
    assert uc.ingest.chunk_index.count() >= 1
