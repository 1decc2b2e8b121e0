"""Scoring strategies - rerank boosts and the relevance threshold."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..models.document import Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryTerms:
    """Lower-cased query and its whitespace-delimited words."""
    phrase: str
    words: tuple[str, ...]

    @classmethod
    def from_query(cls, query: str) -> "QueryTerms":
        phrase = query.lower()
        return cls(phrase=phrase, words=tuple(phrase.split()))


class BoostStrategy(ABC):
    """Additive, non-negative score adjustment for one candidate."""

    @abstractmethod
    def boost(self, terms: QueryTerms, candidate: Candidate, now: datetime) -> float:
        ...


class ExactPhraseBoost(BoostStrategy):
    """Chunk text contains the whole query."""

    def __init__(self, weight: float = 0.2):
        self._weight = weight

    def boost(self, terms: QueryTerms, candidate: Candidate, now: datetime) -> float:
        if terms.phrase in candidate.chunk.text.lower():
            return self._weight
        return 0.0


class FileNameBoost(BoostStrategy):
    """File name contains the whole query."""

    def __init__(self, weight: float = 0.15):
        self._weight = weight

    def boost(self, terms: QueryTerms, candidate: Candidate, now: datetime) -> float:
        if terms.phrase in candidate.chunk.metadata.file_name.lower():
            return self._weight
        return 0.0


class DirectoryBoost(BoostStrategy):
    """Directory name shares a word with the query."""

    def __init__(self, weight: float = 0.1):
        self._weight = weight

    def boost(self, terms: QueryTerms, candidate: Candidate, now: datetime) -> float:
        directory = candidate.chunk.metadata.directory.lower()
        if directory and any(word in directory for word in terms.words):
            return self._weight
        return 0.0


class TermFrequencyBoost(BoostStrategy):
    """Whole-word occurrences of query words, weighted by where they occur."""

    def __init__(
        self,
        per_match: float = 0.05,
        cap: float = 0.3,
        text_weight: float = 1.0,
        file_name_weight: float = 2.0,
        directory_weight: float = 1.5,
    ):
        self._per_match = per_match
        self._cap = cap
        self._text_weight = text_weight
        self._file_name_weight = file_name_weight
        self._directory_weight = directory_weight

    def boost(self, terms: QueryTerms, candidate: Candidate, now: datetime) -> float:
        content = candidate.chunk.text.lower()
        file_name = candidate.chunk.metadata.file_name.lower()
        directory = candidate.chunk.metadata.directory.lower()

        frequency = 0.0
        for word in terms.words:
            pattern = re.compile(rf"\b{re.escape(word)}\b")
            frequency += (
                len(pattern.findall(content)) * self._text_weight
                + len(pattern.findall(file_name)) * self._file_name_weight
                + len(pattern.findall(directory)) * self._directory_weight
            )

        return min(frequency * self._per_match, self._cap)


class RecencyBoost(BoostStrategy):
    """Note modified recently."""

    def __init__(self, weight: float = 0.1, max_age_days: int = 30):
        self._weight = weight
        self._max_age = timedelta(days=max_age_days)

    def boost(self, terms: QueryTerms, candidate: Candidate, now: datetime) -> float:
        modified = candidate.chunk.metadata.last_modified
        if modified is None:
            return 0.0
        if modified.tzinfo is None:
            modified = modified.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return self._weight if now - modified < self._max_age else 0.0


def default_boosts() -> list[BoostStrategy]:
    return [
        ExactPhraseBoost(),
        FileNameBoost(),
        DirectoryBoost(),
        TermFrequencyBoost(),
        RecencyBoost(),
    ]


class RelevanceFilter:
    """Drop candidates whose effective score is not above a threshold."""

    def __init__(self, threshold: float = 0.25):
        """Initialize filter.

        Args:
            threshold: Minimum effective score (exclusive).
        """
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def filter(
        self, candidates: list[Candidate], threshold: Optional[float] = None
    ) -> list[Candidate]:
        """Keep candidates with effective score strictly above the threshold."""
        limit = self._threshold if threshold is None else threshold
        kept = [c for c in candidates if c.effective_score > limit]

        if len(kept) < len(candidates):
            logger.info(
                f"Relevance filter: {len(candidates)} → {len(kept)} (threshold={limit:.2f})"
            )

        return kept
