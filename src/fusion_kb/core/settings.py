from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from fusion_kb.domain.metrics import DistanceMetric, ScoreDirection, ThresholdRule
from fusion_kb.domain.relevance import RelevanceFilter
from fusion_kb.exceptions import ConfigurationError

_ENV = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    populate_by_name=True,
)


def _coerce_bool(v: Any) -> Any:
    # Accept tolerant boolean env values and trim whitespace (e.g., "false ", "0 ")
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off", ""):
            return False
    return v


def _split_extensions(v: Any) -> Any:
    if isinstance(v, str):
        v = [part for part in v.split(",") if part.strip()]
    if isinstance(v, (list, tuple)):
        exts = []
        for e in v:
            e = str(e).strip().lower()
            exts.append(e if e.startswith(".") else f".{e}")
        return tuple(exts)
    return v


class RetrievalSettings(BaseSettings):
    """Query-time knobs. Frozen: per-call changes go through :meth:`with_overrides`."""

    model_config = SettingsConfigDict(**_ENV, frozen=True)

    l2_index_threshold: float = Field(400.0, alias="L2_INDEX_THRESHOLD")
    cosine_index_threshold: float = Field(0.4, alias="COSINE_INDEX_THRESHOLD")
    # Chroma reports distances for both metrics, so lower passes
    l2_score_direction: ScoreDirection = Field(
        ScoreDirection.LOWER_IS_BETTER, alias="L2_SCORE_DIRECTION"
    )
    cosine_score_direction: ScoreDirection = Field(
        ScoreDirection.LOWER_IS_BETTER, alias="COSINE_SCORE_DIRECTION"
    )
    fusion_threshold: float = Field(0.1, alias="FUSION_THRESHOLD")
    fusion: bool = Field(False, alias="FUSION")
    rewrite: bool = Field(False, alias="REWRITE")
    top_k: int = Field(10, alias="RETRIEVAL_TOP_K", ge=1)
    max_concurrency: int = Field(5, alias="RETRIEVAL_MAX_CONCURRENCY", ge=1)
    index_query_timeout: float = Field(10.0, alias="INDEX_QUERY_TIMEOUT", gt=0)

    @field_validator("fusion", "rewrite", mode="before")
    @classmethod
    def _bools(cls, v: Any) -> Any:
        return _coerce_bool(v)

    def threshold_rules(self) -> dict[DistanceMetric, ThresholdRule]:
        return {
            DistanceMetric.COSINE: ThresholdRule(
                self.cosine_index_threshold, self.cosine_score_direction
            ),
            DistanceMetric.L2: ThresholdRule(self.l2_index_threshold, self.l2_score_direction),
        }

    def relevance_filter(self) -> RelevanceFilter:
        return RelevanceFilter(self.threshold_rules())

    def with_overrides(self, overrides: Mapping[str, Any] | None = None) -> RetrievalSettings:
        """Return a new value with ``overrides`` applied; ``self`` is left untouched.

        Keys may be field names (``fusion_threshold``) or env names (``FUSION_THRESHOLD``).
        Unknown keys are ignored.
        """
        if not overrides:
            return self
        by_alias = {f.alias: name for name, f in type(self).model_fields.items() if f.alias}
        data = self.model_dump()
        data.update({by_alias.get(k, k): v for k, v in overrides.items()})
        try:
            return type(self).model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid retrieval override: {e}") from e


class IngestSettings(BaseSettings):
    model_config = _ENV

    chunk_size: int = Field(1000, alias="CHUNK_SIZE", gt=0)
    chunk_overlap: int = Field(100, alias="CHUNK_OVERLAP", ge=0)
    summary_min_chars: int = Field(400, alias="SUMMARY_MIN_CHARS", ge=0)
    summary_extensions: Annotated[tuple[str, ...], NoDecode] = Field(
        (".js", ".html", ".ts", ".md", ".pdf"), alias="SUMMARY_EXTENSIONS"
    )
    summary_max_concurrency: int = Field(10, alias="SUMMARY_MAX_CONCURRENCY", ge=1)
    ingest_extensions: Annotated[tuple[str, ...], NoDecode] = Field(
        (".js", ".html", ".ts", ".env", ".md", ".json"), alias="INGEST_EXTENSIONS"
    )

    @field_validator("summary_extensions", "ingest_extensions", mode="before")
    @classmethod
    def _exts(cls, v: Any) -> Any:
        return _split_extensions(v)

    @model_validator(mode="after")
    def _overlap_below_size(self) -> IngestSettings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"CHUNK_OVERLAP ({self.chunk_overlap}) must be smaller than "
                f"CHUNK_SIZE ({self.chunk_size})"
            )
        return self


class StorageSettings(BaseSettings):
    model_config = _ENV

    persist_dir: Path = Field(Path(".vector_store/chroma"), alias="KB_PERSIST_DIR")
    blob_store_dir: Path = Field(Path("storage"), alias="KB_STORAGE_DIR")
    summaries_collection: str = Field("summaries", alias="KB_SUMMARIES_COLLECTION")
    chunks_collection: str = Field("sub_docs", alias="KB_CHUNKS_COLLECTION")
    summaries_metric: DistanceMetric = Field(
        DistanceMetric.COSINE, alias="KB_SUMMARIES_DISTANCE_METRIC"
    )
    chunks_metric: DistanceMetric = Field(DistanceMetric.COSINE, alias="KB_CHUNKS_DISTANCE_METRIC")

    @field_validator("summaries_metric", "chunks_metric", mode="before")
    @classmethod
    def _metric(cls, v: Any) -> DistanceMetric:
        return DistanceMetric.parse(v)


EmbeddingProvider = Literal["huggingface", "openai", "dummy"]
LLMProvider = Literal["openai", "dummy"]


class EmbeddingConfig(BaseSettings):
    model_config = _ENV

    provider: EmbeddingProvider = Field("huggingface", alias="EMBEDDING_PROVIDER")
    model_name: str = Field("sentence-transformers/all-MiniLM-L6-v2", alias="EMBEDDING_MODEL")
    # "auto" | "cpu" | "cuda" | "cuda:0" | "mps"
    device: str = Field("auto", alias="EMBEDDING_DEVICE")
    normalize_embeddings: bool = Field(True, alias="EMBEDDING_NORMALIZE")
    batch_size: int = Field(32, alias="EMBEDDING_BATCH_SIZE", ge=1)
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(None, alias="OPENAI_BASE_URL")
    request_timeout: float = Field(30.0, alias="EMBEDDING_TIMEOUT", gt=0)

    @field_validator("normalize_embeddings", mode="before")
    @classmethod
    def _bools(cls, v: Any) -> Any:
        return _coerce_bool(v)

    @field_validator("provider", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class LLMConfig(BaseSettings):
    model_config = _ENV

    provider: LLMProvider = Field("dummy", alias="LLM_PROVIDER")
    model: str = Field("gpt-4o-mini", alias="CHAT_MODEL")
    temperature: float = Field(0.0, alias="CHAT_TEMPERATURE")
    api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    base_url: str | None = Field(None, alias="OPENAI_BASE_URL")
    request_timeout: float = Field(60.0, alias="LLM_TIMEOUT", gt=0)
    max_retries: int = Field(2, alias="LLM_MAX_RETRIES", ge=0)

    @field_validator("provider", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class AppSettings(BaseModel):
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    ingest: IngestSettings = Field(default_factory=IngestSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    embeddings: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)


# Cached accessor shared between ingest and query without re-parsing env
@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    try:
        return AppSettings()
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
