"""Rerank service - multi-signal heuristic reranking."""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..models.document import Candidate
from ..strategies.scoring import BoostStrategy, QueryTerms, default_boosts

logger = logging.getLogger(__name__)


class Reranker:
    """Adds exact-match, title, directory, frequency and recency boosts."""

    def __init__(self, boosts: Optional[list[BoostStrategy]] = None):
        self._boosts = boosts if boosts is not None else default_boosts()

    def rerank(
        self,
        candidates: list[Candidate],
        query: str,
        now: Optional[datetime] = None,
    ) -> list[Candidate]:
        """Assign rerank scores and sort by them.

        Args:
            candidates: Retrieved candidates (left unchanged).
            query: User query.
            now: Reference time for the recency boost (defaults to UTC now).

        Returns:
            New candidates carrying rerank and original scores, best first.
        """
        if not candidates:
            return []

        now = now or datetime.now(timezone.utc)
        terms = QueryTerms.from_query(query)

        reranked = []
        for candidate in candidates:
            total = sum(b.boost(terms, candidate, now) for b in self._boosts)
            reranked.append(
                candidate.with_changes(
                    rerank_score=candidate.score + total,
                    original_score=candidate.score,
                )
            )

        reranked.sort(key=lambda c: c.rerank_score, reverse=True)

        if logger.isEnabledFor(logging.DEBUG):
            top_scores = ", ".join(f"{c.rerank_score:.2f}" for c in reranked[:3])
            logger.debug(f"Reranker top-3 scores: [{top_scores}]")

        return reranked
