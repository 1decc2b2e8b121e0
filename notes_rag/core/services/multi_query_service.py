"""Multi-query search - hybrid search over the query and its expansions."""

import logging
import math
from typing import Optional

from ..models.document import (
    Candidate,
    Origin,
    RelevanceBands,
    merge_candidates,
    rank_candidates,
)
from .query_expander import QueryExpander
from .search_service import SearchService

logger = logging.getLogger(__name__)

MAX_EXPANSIONS = 3


class MultiQuerySearchService:
    """Runs hybrid search for the original query plus a few lexical variants."""

    def __init__(
        self,
        search_service: SearchService,
        expander: QueryExpander,
        enable_expansion: bool = True,
        max_expansions: int = MAX_EXPANSIONS,
        bands: Optional[RelevanceBands] = None,
    ):
        self._search = search_service
        self._expander = expander
        self._enable_expansion = enable_expansion
        self._max_expansions = max_expansions
        self._bands = bands or RelevanceBands()

    def advanced_search(self, query: str, k: int = 5) -> list[Candidate]:
        """Search with query expansion.

        Args:
            query: User query.
            k: Number of results.

        Returns:
            At most k candidates, highest score first. Candidates kept from
            an expansion are tagged ``expanded`` with the variant used.
        """
        if k <= 0:
            return []

        results = list(self._search.search(query, k))

        if self._enable_expansion:
            sub_k = math.ceil(k / 2)
            variants = self._expander.expand(query)[1:1 + self._max_expansions]
            for variant in variants:
                try:
                    expanded = self._search.search(variant, sub_k)
                except Exception as e:
                    logger.warning(f"Expanded query '{variant}' failed: {e}")
                    continue
                results.extend(
                    c.with_changes(
                        origin=Origin.EXPANDED,
                        relevance=self._bands.classify(c.score, Origin.EXPANDED),
                        expanded_query=variant,
                    )
                    for c in expanded
                )
            if variants:
                logger.info(f"Query expansion: {len(variants)} variants for '{query[:50]}'")

        return rank_candidates(merge_candidates(results), k)
