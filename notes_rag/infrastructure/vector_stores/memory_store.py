import logging
import threading
from typing import Sequence

import numpy as np

from notes_rag.core.models.document import Chunk
from notes_rag.core.protocols.embedder import EmbedderProtocol

logger = logging.getLogger(__name__)


class InMemoryVectorStore:
    """Process-local vector store.

    Chunks and their embeddings live in one immutable snapshot that is
    replaced wholesale on every write, so readers never see a partial index.
    """

    def __init__(self, embedder: EmbedderProtocol):
        self._embedder = embedder
        self._lock = threading.Lock()
        self._snapshot: tuple[tuple[Chunk, ...], np.ndarray] = ((), np.empty((0, 0)))

    def _embed(self, chunks: Sequence[Chunk]) -> np.ndarray:
        return self._embedder.embed_documents([c.text for c in chunks])

    def upsert(self, chunks: Sequence[Chunk]) -> None:
        if not chunks:
            return
        new_embeddings = self._embed(chunks)
        with self._lock:
            current, embeddings = self._snapshot
            if current:
                embeddings = np.vstack([embeddings, new_embeddings])
            else:
                embeddings = new_embeddings
            self._snapshot = (current + tuple(chunks), embeddings)
        logger.info(f"Added {len(chunks)} chunks to in-memory index")

    def similarity_search(self, query: str, k: int = 5) -> list[tuple[Chunk, float]]:
        chunks, embeddings = self._snapshot
        if k <= 0 or not chunks:
            return []

        query_embedding = self._embedder.embed_query(query)
        scores = self._embedder.cosine_similarity(query_embedding, embeddings)
        # Stable so equal scores keep insertion order
        order = np.argsort(-scores, kind="stable")[:k]
        return [(chunks[i], float(scores[i])) for i in order]

    def all_chunks(self) -> tuple[Chunk, ...]:
        return self._snapshot[0]

    def count(self) -> int:
        return len(self._snapshot[0])

    def delete(self) -> None:
        with self._lock:
            self._snapshot = ((), np.empty((0, 0)))

    def rebuild(self, chunks: Sequence[Chunk]) -> None:
        """Embed everything first, then swap the snapshot in one assignment."""
        chunks = tuple(chunks)
        embeddings = self._embed(chunks) if chunks else np.empty((0, 0))
        with self._lock:
            self._snapshot = (chunks, embeddings)
        logger.info(f"Rebuilt in-memory index with {len(chunks)} chunks")
