"""Reranker protocol for dependency injection."""
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from ..models.document import Candidate


@runtime_checkable
class RerankerProtocol(Protocol):
    """Protocol for reranking service."""

    def rerank(
        self,
        candidates: list[Candidate],
        query: str,
        now: Optional[datetime] = None,
    ) -> list[Candidate]:
        """Rerank candidates by relevance.

        Args:
            candidates: Retrieved candidates.
            query: User query.
            now: Reference time for time-based signals.

        Returns:
            Candidates with rerank scores, sorted by them.
        """
        ...
