"""Embedder protocol for dependency injection."""
from typing import Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for the text -> vector capability behind the vector index."""

    def embed_query(self, text: str) -> np.ndarray:
        """Embed a query.

        Args:
            text: Query text (may be empty).

        Returns:
            1-D embedding vector.
        """
        ...

    def embed_documents(self, texts: Sequence[str]) -> np.ndarray:
        """Embed chunk texts.

        Args:
            texts: Chunk texts.

        Returns:
            Matrix with one row per text.
        """
        ...

    def cosine_similarity(
        self,
        query_embedding: np.ndarray,
        embeddings: np.ndarray
    ) -> np.ndarray:
        """Compute cosine similarity between a query and a matrix of embeddings."""
        ...

    def warmup(self) -> None:
        """Pre-load the model for faster inference."""
        ...
