"""Domain layer: pure types and logic (no I/O).

Keep this layer free of side-effects. Documents are LangChain ``Document`` values;
everything here only reads or copies them.
"""

from .context import assemble_context
from .document import content_hash, decode_document, document_key, encode_document, with_metadata
from .fusion import reciprocal_rank_fusion
from .metrics import DistanceMetric, ScoreDirection, ThresholdRule
from .relevance import RelevanceFilter, filter_relevant
from .summarization import worth_summarizing

__all__ = [
    "content_hash",
    "document_key",
    "with_metadata",
    "encode_document",
    "decode_document",
    "DistanceMetric",
    "ScoreDirection",
    "ThresholdRule",
    "RelevanceFilter",
    "filter_relevant",
    "reciprocal_rank_fusion",
    "worth_summarizing",
    "assemble_context",
]
