from .chroma_index import ChromaIndex

__all__ = ["ChromaIndex"]
