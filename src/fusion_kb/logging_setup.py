from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
        force=True,
    )
    # chromadb and httpx are chatty at INFO
    for noisy in ("chromadb", "httpx"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
