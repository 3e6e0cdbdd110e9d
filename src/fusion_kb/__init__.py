"""Multi-index retrieval core: relevance filtering, rank fusion and content-addressed ingestion."""

__version__ = "0.1.0"
