"""Protocol interfaces for dependency injection."""
from .embedder import EmbedderProtocol
from .vector_store import VectorStoreProtocol
from .reranker import RerankerProtocol
from .generator import AnswerGeneratorProtocol
from .document_source import DocumentSourceProtocol

__all__ = [
    "EmbedderProtocol",
    "VectorStoreProtocol",
    "RerankerProtocol",
    "AnswerGeneratorProtocol",
    "DocumentSourceProtocol",
]
