from __future__ import annotations

import logging
import time
from collections.abc import Collection
from dataclasses import dataclass
from pathlib import Path

from fusion_kb.application.ports.loader_port import DocumentLoaderPort
from fusion_kb.application.use_cases.ingest import IngestDocumentUseCase
from fusion_kb.exceptions import IngestionError

log = logging.getLogger(__name__)

FAILED = "failed"


@dataclass
class ImportFilesUseCase:
    loader: DocumentLoaderPort
    ingest: IngestDocumentUseCase
    extensions: Collection[str]

    def discover(self, source: Path) -> list[Path]:
        """``source`` itself, or the files under it with an allowed extension, sorted."""
        allowed = {e.lower() for e in self.extensions}
        if source.is_file():
            return [source] if source.suffix.lower() in allowed else []
        return sorted(p for p in source.rglob("*") if p.is_file() and p.suffix.lower() in allowed)

    def ingest_file(self, path: Path) -> list[str]:
        """Load ``path`` and ingest each parent document it yields.

        Returns one outcome per parent (its id or ``"skipped"``). Any failure is
        raised as :class:`IngestionError` naming the file.
        """
        try:
            parents = self.loader.load(str(path))
            return [self.ingest.execute(parent) for parent in parents]
        except Exception as e:
            raise IngestionError(f"Failed to ingest {path}: {e}") from e

    def execute(self, source: Path) -> dict[str, str]:
        """Ingest a file, or every file with an allowed extension under a directory.

        Returns ``{path: parent id | "skipped" | "failed"}``. A failing file is logged
        and the run continues with the next one.
        """
        source = Path(source)
        if not source.exists():
            raise IngestionError(f"Path not found: {source}")

        outcomes: dict[str, str] = {}
        t0 = time.perf_counter()
        for path in self.discover(source):
            try:
                results = self.ingest_file(path)
            except IngestionError as e:
                log.error("[ingest] %s", e)
                outcomes[str(path)] = FAILED
                continue
            # A text file yields exactly one parent
            outcomes[str(path)] = results[0] if results else FAILED
        log.info(
            "[ingest] files=%d took %d ms",
            len(outcomes),
            int((time.perf_counter() - t0) * 1000),
        )
        return outcomes
