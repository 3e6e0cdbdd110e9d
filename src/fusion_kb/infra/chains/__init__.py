from .paraphrase import QueryParaphraser
from .rewriter import QueryRewriter
from .summary import LLMSummarizer

__all__ = ["QueryParaphraser", "QueryRewriter", "LLMSummarizer"]
