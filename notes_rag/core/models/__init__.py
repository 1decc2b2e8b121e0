"""Domain models."""
from .document import (
    Candidate,
    Chunk,
    ChunkMetadata,
    CorpusStats,
    Document,
    Origin,
    RelevanceBand,
    RelevanceBands,
    identity_key,
    merge_candidates,
    rank_candidates,
)
from .answer import (
    BELOW_THRESHOLD_MESSAGE,
    NO_RESULTS_MESSAGE,
    Generation,
    IngestReport,
    QueryOutcome,
    QueryResult,
    SourceInfo,
)

__all__ = [
    "Candidate",
    "Chunk",
    "ChunkMetadata",
    "CorpusStats",
    "Document",
    "Origin",
    "RelevanceBand",
    "RelevanceBands",
    "identity_key",
    "merge_candidates",
    "rank_candidates",
    "BELOW_THRESHOLD_MESSAGE",
    "NO_RESULTS_MESSAGE",
    "Generation",
    "IngestReport",
    "QueryOutcome",
    "QueryResult",
    "SourceInfo",
]
