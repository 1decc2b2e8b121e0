"""Answer service - coordinates retrieval, ranking and generation."""

import logging
from datetime import datetime
from typing import Optional

from ..models.answer import (
    BELOW_THRESHOLD_MESSAGE,
    NO_RESULTS_MESSAGE,
    QueryOutcome,
    QueryResult,
    SourceInfo,
)
from ..models.document import Candidate
from ..protocols.generator import AnswerGeneratorProtocol
from ..protocols.reranker import RerankerProtocol
from ..protocols.vector_store import VectorStoreProtocol
from ..strategies.scoring import RelevanceFilter
from .context_builder import ContextBuilder
from .multi_query_service import MultiQuerySearchService

logger = logging.getLogger(__name__)


class AnswerService:
    """Answers a question from the notes.

    Flow:
        1. Multi-query hybrid search
        2. Heuristic reranking
        3. Relevance filtering
        4. Context assembly and generation
    """

    def __init__(
        self,
        vector_store: VectorStoreProtocol,
        search_service: MultiQuerySearchService,
        reranker: RerankerProtocol,
        relevance_filter: RelevanceFilter,
        context_builder: ContextBuilder,
        generator: AnswerGeneratorProtocol,
        top_k: int = 8,
        enable_reranking: bool = True,
    ):
        """Initialize answer service.

        Args:
            vector_store: Vector index (checked before each query).
            search_service: Multi-query retriever.
            reranker: Reranking service.
            relevance_filter: Threshold filter.
            context_builder: Context and prompt renderer.
            generator: Answer generator.
            top_k: Number of candidates to retrieve.
            enable_reranking: Apply the reranker before filtering.
        """
        self._vector_store = vector_store
        self._search = search_service
        self._reranker = reranker
        self._filter = relevance_filter
        self._context_builder = context_builder
        self._generator = generator
        self._top_k = top_k
        self._enable_reranking = enable_reranking

    def retrieve(self, query: str, now: Optional[datetime] = None) -> list[Candidate]:
        """Retrieve and rank candidates without filtering.

        Raises:
            IndexUnavailableError: Vector index unreachable.
        """
        # Propagates IndexUnavailableError: there is no fallback for a dead index.
        self._vector_store.count()

        candidates = self._search.advanced_search(query, self._top_k)
        if self._enable_reranking:
            candidates = self._reranker.rerank(candidates, query, now=now)
        return candidates

    def answer(self, query: str, now: Optional[datetime] = None) -> QueryResult:
        """Answer a question.

        Args:
            query: User question.
            now: Reference time for recency scoring.

        Returns:
            Query result. ``outcome`` tells answered / no results / below threshold apart.

        Raises:
            ValueError: Empty question.
            IndexUnavailableError: Vector index unreachable.
            GeneratorUnavailableError: Answer generator unreachable.
        """
        if not query or not query.strip():
            raise ValueError("Query is required")

        logger.info(f"Processing query: '{query[:80]}'")
        candidates = self.retrieve(query, now=now)

        if not candidates:
            logger.info(f"No results for '{query[:50]}'")
            return QueryResult(
                query=query,
                outcome=QueryOutcome.NO_RESULTS,
                answer=NO_RESULTS_MESSAGE,
            )

        relevant = self._filter.filter(candidates)
        if not relevant:
            logger.info(
                f"All {len(candidates)} candidates below threshold for '{query[:50]}'"
            )
            return QueryResult(
                query=query,
                outcome=QueryOutcome.BELOW_THRESHOLD,
                answer=BELOW_THRESHOLD_MESSAGE,
                candidates=candidates,
            )

        context = self._context_builder.build_context(relevant)
        prompt = self._context_builder.build_prompt(context, query)
        generation = self._generator.generate(prompt)

        search_types = list(dict.fromkeys(c.origin.value for c in relevant))
        logger.info(
            f"Answered from {len(relevant)} chunks (types: {', '.join(search_types)})"
        )

        return QueryResult(
            query=query,
            outcome=QueryOutcome.ANSWERED,
            answer=generation.text,
            sources=[SourceInfo.from_candidate(i, c) for i, c in enumerate(relevant, 1)],
            search_types=search_types,
            candidates=relevant,
            context=context,
        )
