"""Keyword matcher - literal token overlap over the whole corpus."""

import logging
from typing import Optional, Sequence

from ..models.document import Candidate, Chunk, Origin, RelevanceBands

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 3


def tokenize(query: str) -> list[str]:
    """Lower-cased whitespace tokens longer than two characters."""
    return [t for t in query.lower().split() if len(t) >= MIN_TOKEN_LENGTH]


class KeywordMatcher:
    """Brute-force substring scan.

    Reads every chunk on each call. Fine for a personal vault; a larger
    corpus would swap this for an inverted index behind the same method.
    """

    def __init__(self, bands: Optional[RelevanceBands] = None):
        self._bands = bands or RelevanceBands()

    def match(self, query: str, chunks: Sequence[Chunk]) -> list[Candidate]:
        """Score chunks by the share of query tokens they contain.

        A token counts when it occurs as a substring of the chunk text,
        file name or relative path.

        Args:
            query: Search query.
            chunks: Corpus snapshot to scan.

        Returns:
            Keyword candidates in corpus order (matches > 0 only).
        """
        tokens = tokenize(query)
        if not tokens:
            return []

        candidates = []
        for chunk in chunks:
            content = chunk.text.lower()
            file_name = chunk.metadata.file_name.lower()
            relative_path = chunk.metadata.relative_path.lower()

            matches = sum(
                1
                for token in tokens
                if token in content or token in file_name or token in relative_path
            )
            if matches == 0:
                continue

            score = matches / len(tokens)
            candidates.append(
                Candidate(
                    chunk=chunk,
                    score=score,
                    origin=Origin.KEYWORD,
                    relevance=self._bands.classify(score, Origin.KEYWORD),
                    keyword_matches=matches,
                )
            )

        logger.debug(f"Keyword scan: {len(candidates)}/{len(chunks)} chunks matched")
        return candidates
