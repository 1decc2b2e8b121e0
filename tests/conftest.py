"""Shared fixtures: in-process fakes for the embedder and vector index."""

import zlib
from datetime import datetime
from typing import Optional, Sequence

import numpy as np
import pytest

from notes_rag.core.models.document import Chunk, ChunkMetadata

EMBEDDING_DIM = 64


def make_chunk(
    text: str,
    source: str = "",
    file_name: str = "",
    directory: str = "",
    relative_path: str = "",
    last_modified: Optional[datetime] = None,
) -> Chunk:
    return Chunk(
        text=text,
        metadata=ChunkMetadata(
            source_id=source,
            file_name=file_name,
            relative_path=relative_path,
            directory=directory,
            file_type="markdown",
            last_modified=last_modified,
        ),
    )


class FakeEmbedder:
    """Hashed bag-of-words vectors; texts sharing words are similar."""

    def __init__(self):
        self.embedded_documents = 0

    def _vector(self, text: str) -> np.ndarray:
        vector = np.zeros(EMBEDDING_DIM)
        for word in text.lower().split():
            vector[zlib.crc32(word.encode()) % EMBEDDING_DIM] += 1.0
        norm = np.linalg.norm(vector)
        return vector / norm if norm else vector

    def embed_query(self, text: str) -> np.ndarray:
        return self._vector(text)

    def embed_documents(self, texts: Sequence[str]) -> np.ndarray:
        self.embedded_documents += len(texts)
        return np.array([self._vector(t) for t in texts]).reshape(len(texts), EMBEDDING_DIM)

    def cosine_similarity(self, query_embedding: np.ndarray, embeddings: np.ndarray) -> np.ndarray:
        return embeddings @ query_embedding

    def warmup(self) -> None:
        pass


class FakeVectorStore:
    """Vector index returning preset similarities.

    Chunks missing from ``similarities`` score 0.0. ``semantic_error`` makes
    only the first similarity_search call fail, so the fallback path can
    still read the index.
    """

    def __init__(
        self,
        chunks: Sequence[Chunk] = (),
        similarities: Optional[dict[str, float]] = None,
        semantic_error: Optional[Exception] = None,
        error: Optional[Exception] = None,
    ):
        self.chunks = list(chunks)
        self.similarities = similarities or {}
        self.semantic_error = semantic_error
        self.error = error
        self.search_calls: list[tuple[str, int]] = []
        self.rebuilt_with: Optional[list[Chunk]] = None

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def upsert(self, chunks: Sequence[Chunk]) -> None:
        self._check()
        self.chunks.extend(chunks)

    def similarity_search(self, query: str, k: int = 5) -> list[tuple[Chunk, float]]:
        self._check()
        self.search_calls.append((query, k))
        if self.semantic_error is not None:
            error, self.semantic_error = self.semantic_error, None
            raise error
        scored = [(c, self.similarities.get(c.text, 0.0)) for c in self.chunks]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:k]

    def all_chunks(self) -> tuple[Chunk, ...]:
        self._check()
        return tuple(self.chunks)

    def count(self) -> int:
        self._check()
        return len(self.chunks)

    def delete(self) -> None:
        self._check()
        self.chunks = []

    def rebuild(self, chunks: Sequence[Chunk]) -> None:
        self._check()
        self.rebuilt_with = list(chunks)
        self.chunks = list(chunks)


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def fixed_now():
    from datetime import timezone

    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
