from .blob_store_port import BlobStorePort
from .embeddings_port import EmbeddingsPort
from .llm_port import LLMPort
from .loader_port import DocumentLoaderPort
from .query_port import ParaphraserPort, RewriterPort
from .retriever_port import RetrieverPort
from .splitter_port import SplitterPort
from .summarizer_port import SummarizerPort
from .vector_index_port import VectorIndexPort

__all__ = [
    "BlobStorePort",
    "EmbeddingsPort",
    "LLMPort",
    "DocumentLoaderPort",
    "ParaphraserPort",
    "RewriterPort",
    "RetrieverPort",
    "SplitterPort",
    "SummarizerPort",
    "VectorIndexPort",
]
