"""Vector store protocol for dependency injection."""
from typing import Protocol, Sequence, runtime_checkable

from ..models.document import Chunk


@runtime_checkable
class VectorStoreProtocol(Protocol):
    """Protocol for the vector index holding chunk embeddings."""

    def upsert(self, chunks: Sequence[Chunk]) -> None:
        """Embed and store chunks.

        Args:
            chunks: Chunks to add or replace.
        """
        ...

    def similarity_search(self, query: str, k: int = 5) -> list[tuple[Chunk, float]]:
        """Search nearest neighbors of a query.

        Args:
            query: Query text.
            k: Number of neighbors.

        Returns:
            (chunk, similarity) pairs, most similar first.
        """
        ...

    def all_chunks(self) -> Sequence[Chunk]:
        """Return a self-consistent snapshot of every indexed chunk."""
        ...

    def count(self) -> int:
        """Get chunk count."""
        ...

    def delete(self) -> None:
        """Drop every indexed chunk."""
        ...

    def rebuild(self, chunks: Sequence[Chunk]) -> None:
        """Replace the whole index, swapping it in atomically for readers."""
        ...
