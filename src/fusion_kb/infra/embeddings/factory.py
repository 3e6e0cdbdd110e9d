from __future__ import annotations

import math
from typing import Any

import numpy as np
from langchain_core.embeddings import Embeddings

from fusion_kb.core.settings import EmbeddingConfig
from fusion_kb.exceptions import ConfigurationError


class DummyEmbeddings(Embeddings):
    """Deterministic tiny embedding for offline use and tests (no external model)."""

    dim: int = 16

    def _embed(self, text: str) -> list[float]:
        vec = [0.0] * self.dim
        # simple hashed character-based features
        for i, ch in enumerate(text.lower()):
            vec[(i + ord(ch)) % self.dim] += 1.0
        norm = math.sqrt(sum(v * v for v in vec)) or 1.0
        return [v / norm for v in vec]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self._embed(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text)


class _NormalizedEmbeddings(Embeddings):
    """L2-normalizes the vectors of a wrapped provider."""

    def __init__(self, base: Embeddings) -> None:
        self._base = base

    @staticmethod
    def _l2(arr: np.ndarray) -> np.ndarray:
        denom = np.linalg.norm(arr, axis=-1, keepdims=True) + 1e-12
        return arr / denom

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        X = np.asarray(self._base.embed_documents(texts), dtype=np.float32)
        return self._l2(X).tolist()

    def embed_query(self, text: str) -> list[float]:
        x = np.asarray(self._base.embed_query(text), dtype=np.float32)
        return self._l2(x).tolist()


def resolve_device(requested: str) -> str:
    """Return the requested device, or pick CUDA → MPS → CPU when set to "auto"."""
    if requested and requested.lower() != "auto":
        return requested
    try:
        import torch
    except ImportError:
        return "cpu"
    if torch.cuda.is_available():
        return "cuda"
    mps = getattr(torch.backends, "mps", None)
    if mps is not None and mps.is_available():
        return "mps"
    return "cpu"


def build_embeddings(cfg: EmbeddingConfig) -> Embeddings:
    provider = cfg.provider.lower()

    if provider == "huggingface":
        from langchain_huggingface import HuggingFaceEmbeddings

        return HuggingFaceEmbeddings(
            model_name=cfg.model_name,
            model_kwargs={"device": resolve_device(cfg.device)},
            encode_kwargs={
                "normalize_embeddings": bool(cfg.normalize_embeddings),
                "batch_size": cfg.batch_size,
            },
        )

    if provider == "openai":
        from langchain_openai import OpenAIEmbeddings

        kwargs: dict[str, Any] = {
            "model": cfg.model_name,  # e.g. text-embedding-3-small / large
            "timeout": cfg.request_timeout,
        }
        if cfg.openai_api_key:
            kwargs["api_key"] = cfg.openai_api_key
        if cfg.openai_base_url:
            kwargs["base_url"] = cfg.openai_base_url
        emb: Embeddings = OpenAIEmbeddings(**kwargs)
        return _NormalizedEmbeddings(emb) if cfg.normalize_embeddings else emb

    if provider == "dummy":
        return DummyEmbeddings()

    raise ConfigurationError(f"Unsupported embeddings provider: {cfg.provider}")

