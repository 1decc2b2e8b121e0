"""Scoring and filtering strategies."""
from .scoring import (
    BoostStrategy,
    DirectoryBoost,
    ExactPhraseBoost,
    FileNameBoost,
    QueryTerms,
    RecencyBoost,
    RelevanceFilter,
    TermFrequencyBoost,
    default_boosts,
)

__all__ = [
    "BoostStrategy",
    "DirectoryBoost",
    "ExactPhraseBoost",
    "FileNameBoost",
    "QueryTerms",
    "RecencyBoost",
    "RelevanceFilter",
    "TermFrequencyBoost",
    "default_boosts",
]
