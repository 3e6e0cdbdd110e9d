from __future__ import annotations

import pytest

from fusion_kb.core.settings import (
    AppSettings,
    EmbeddingConfig,
    IngestSettings,
    RetrievalSettings,
    StorageSettings,
    get_settings,
)
from fusion_kb.domain.metrics import DistanceMetric, ScoreDirection
from fusion_kb.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # keep a developer's .env out of the defaults under test
    monkeypatch.chdir(tmp_path)
    for name in (
        "L2_INDEX_THRESHOLD",
        "COSINE_INDEX_THRESHOLD",
        "FUSION_THRESHOLD",
        "FUSION",
        "REWRITE",
        "CHUNK_SIZE",
        "CHUNK_OVERLAP",
        "SUMMARY_EXTENSIONS",
        "KB_CHUNKS_DISTANCE_METRIC",
        "EMBEDDING_PROVIDER",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


def test_retrieval_defaults() -> None:
    s = RetrievalSettings()
    assert s.l2_index_threshold == 400.0
    assert s.cosine_index_threshold == 0.4
    assert s.fusion_threshold == 0.1
    assert s.fusion is False and s.rewrite is False
    assert s.top_k == 10
    rules = s.threshold_rules()
    assert rules[DistanceMetric.COSINE].direction is ScoreDirection.LOWER_IS_BETTER
    assert rules[DistanceMetric.L2].threshold == 400.0


def test_env_values_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COSINE_INDEX_THRESHOLD", "0.25")
    monkeypatch.setenv("FUSION", " true ")
    monkeypatch.setenv("REWRITE", "0")
    s = RetrievalSettings()
    assert s.cosine_index_threshold == 0.25
    assert s.fusion is True
    assert s.rewrite is False


def test_overrides_return_new_value_and_leave_original_untouched() -> None:
    base = RetrievalSettings()
    changed = base.with_overrides({"FUSION_THRESHOLD": 0.3, "fusion": "yes"})
    assert changed.fusion_threshold == 0.3
    assert changed.fusion is True
    assert base.fusion_threshold == 0.1
    assert base.fusion is False
    assert base.with_overrides(None) is base


def test_overrides_ignore_unknown_keys_and_reject_bad_values() -> None:
    base = RetrievalSettings()
    assert base.with_overrides({"not_a_setting": 1}) == base
    with pytest.raises(ConfigurationError):
        base.with_overrides({"top_k": 0})


def test_retrieval_settings_are_frozen() -> None:
    s = RetrievalSettings()
    with pytest.raises(Exception):
        s.fusion_threshold = 0.5  # type: ignore[misc]


def test_ingest_extensions_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUMMARY_EXTENSIONS", "md, .TS ,html")
    s = IngestSettings()
    assert s.summary_extensions == (".md", ".ts", ".html")
    assert ".json" in s.ingest_extensions


def test_overlap_must_be_smaller_than_chunk_size(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHUNK_SIZE", "100")
    monkeypatch.setenv("CHUNK_OVERLAP", "100")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_storage_metric_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KB_CHUNKS_DISTANCE_METRIC", "L2")
    s = StorageSettings()
    assert s.chunks_metric is DistanceMetric.L2
    assert s.summaries_metric is DistanceMetric.COSINE


def test_unknown_embedding_provider_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMBEDDING_PROVIDER", "nope")
    with pytest.raises(Exception):
        EmbeddingConfig()
    with pytest.raises(ConfigurationError):
        get_settings()


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
    assert isinstance(get_settings(), AppSettings)
