"""Search service - hybrid semantic + keyword retrieval."""

import logging
from typing import Optional

from ..models.document import (
    Candidate,
    CorpusStats,
    Origin,
    RelevanceBands,
    merge_candidates,
    rank_candidates,
)
from ..protocols.vector_store import VectorStoreProtocol
from .keyword_search import KeywordMatcher

logger = logging.getLogger(__name__)

FALLBACK_SCORE = 0.5
SAMPLE_SOURCES = 5


class SearchService:
    """Hybrid retriever with a plain-similarity fallback."""

    def __init__(
        self,
        vector_store: VectorStoreProtocol,
        keyword_matcher: Optional[KeywordMatcher] = None,
        bands: Optional[RelevanceBands] = None,
        semantic_multiplier: int = 2,
    ):
        """Initialize search service.

        Args:
            vector_store: Vector index.
            keyword_matcher: Keyword scan over the corpus snapshot.
            bands: Per-origin relevance band thresholds.
            semantic_multiplier: Neighbors requested per result slot.
        """
        self._vector_store = vector_store
        self._bands = bands or RelevanceBands()
        self._keyword_matcher = keyword_matcher or KeywordMatcher(self._bands)
        self._semantic_multiplier = semantic_multiplier

    def search(self, query: str, k: int = 5) -> list[Candidate]:
        """Run semantic and keyword passes and merge them.

        Args:
            query: Search query. Empty string is a valid "fetch everything" probe.
            k: Number of results.

        Returns:
            At most k candidates, highest score first.
        """
        if k <= 0:
            return []

        try:
            results = self._semantic_pass(query, k * self._semantic_multiplier)
            results.extend(self._keyword_pass(query))
        except Exception as e:
            logger.warning(f"Hybrid search degraded for '{query[:50]}': {e}")
            return self._fallback(query, k)

        merged = merge_candidates(results)
        ranked = rank_candidates(merged, k)

        logger.info(
            f"Hybrid search: {len(results)} raw, {len(merged)} unique, "
            f"returned {len(ranked)}/{k} for '{query[:50]}'"
        )
        return ranked

    def _semantic_pass(self, query: str, n_results: int) -> list[Candidate]:
        return [
            Candidate(
                chunk=chunk,
                score=float(similarity),
                origin=Origin.SEMANTIC,
                relevance=self._bands.classify(float(similarity), Origin.SEMANTIC),
            )
            for chunk, similarity in self._vector_store.similarity_search(query, n_results)
        ]

    def _keyword_pass(self, query: str) -> list[Candidate]:
        return self._keyword_matcher.match(query, self._vector_store.all_chunks())

    def _fallback(self, query: str, k: int) -> list[Candidate]:
        """Plain similarity search with neutral scores. Never raises."""
        relevance = self._bands.classify(FALLBACK_SCORE, Origin.FALLBACK)
        try:
            return [
                Candidate(
                    chunk=chunk,
                    score=FALLBACK_SCORE,
                    origin=Origin.FALLBACK,
                    relevance=relevance,
                )
                for chunk, _ in self._vector_store.similarity_search(query, k)[:k]
            ]
        except Exception as e:
            logger.error(f"Fallback search failed for '{query[:50]}': {e}")
            return []

    def stats(self) -> CorpusStats:
        """Corpus size, unique sources and average chunk length."""
        chunks = self._vector_store.all_chunks()
        sources: list[str] = []
        seen = set()
        for chunk in chunks:
            source = chunk.metadata.source_id
            if source and source not in seen:
                seen.add(source)
                sources.append(source)

        average = sum(len(c.text) for c in chunks) / len(chunks) if chunks else 0.0
        return CorpusStats(
            total_chunks=len(chunks),
            unique_sources=len(sources),
            average_chunk_length=average,
            sample_sources=sources[:SAMPLE_SOURCES],
        )
