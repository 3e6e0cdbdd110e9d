from .fusion import FusionRetriever, fuse, query_variants
from .import_files import ImportFilesUseCase
from .ingest import SKIPPED, IngestDocumentUseCase, SummarizationGate
from .query_kb import AnswerResult, QueryKnowledgeBase
from .retrieve import MultiStoreRetriever, drop_covered_chunks, require_query

__all__ = [
    "FusionRetriever",
    "fuse",
    "query_variants",
    "ImportFilesUseCase",
    "SKIPPED",
    "IngestDocumentUseCase",
    "SummarizationGate",
    "AnswerResult",
    "QueryKnowledgeBase",
    "MultiStoreRetriever",
    "drop_covered_chunks",
    "require_query",
]
