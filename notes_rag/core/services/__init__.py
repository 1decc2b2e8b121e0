"""Core business services."""
from .chunker import TextChunker
from .keyword_search import KeywordMatcher
from .query_expander import QueryExpander
from .search_service import SearchService
from .multi_query_service import MultiQuerySearchService
from .rerank_service import Reranker
from .context_builder import ContextBuilder
from .ingest_service import IngestService
from .answer_service import AnswerService

__all__ = [
    "TextChunker",
    "KeywordMatcher",
    "QueryExpander",
    "SearchService",
    "MultiQuerySearchService",
    "Reranker",
    "ContextBuilder",
    "IngestService",
    "AnswerService",
]
