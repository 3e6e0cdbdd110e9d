from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class BlobStorePort(Protocol):
    """Write-once key/value store keyed by content hash."""

    def exists(self, key: str) -> bool:  # pragma: no cover - interface
        ...

    def put(self, key: str, value: bytes) -> None:  # pragma: no cover - interface
        ...

    def get(self, keys: Sequence[str]) -> list[bytes | None]:  # pragma: no cover - interface
        ...
