"""Document domain models."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

IDENTITY_PREFIX_LENGTH = 100


class Origin(str, Enum):
    """Which retrieval pass produced a candidate."""
    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    EXPANDED = "expanded"
    FALLBACK = "fallback"


class RelevanceBand(str, Enum):
    """Coarse relevance classification shown to the answer generator."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ChunkMetadata:
    """Provenance of a chunk, inherited verbatim from its document."""
    source_id: str = ""
    file_name: str = ""
    relative_path: str = ""
    directory: str = ""
    file_type: str = ""
    last_modified: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Flatten to primitive values (vector store metadata)."""
        data = {
            "source": self.source_id,
            "file_name": self.file_name,
            "relative_path": self.relative_path,
            "directory": self.directory,
            "file_type": self.file_type,
        }
        if self.last_modified is not None:
            data["last_modified"] = self.last_modified.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ChunkMetadata":
        data = data or {}
        last_modified = data.get("last_modified")
        if isinstance(last_modified, str) and last_modified:
            last_modified = datetime.fromisoformat(last_modified)
        elif not isinstance(last_modified, datetime):
            last_modified = None
        return cls(
            source_id=data.get("source", "") or "",
            file_name=data.get("file_name", "") or "",
            relative_path=data.get("relative_path", "") or "",
            directory=data.get("directory", "") or "",
            file_type=data.get("file_type", "") or "",
            last_modified=last_modified,
        )


@dataclass(frozen=True)
class Document:
    """Raw document supplied by a document source."""
    text: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)


@dataclass(frozen=True)
class Chunk:
    """Contiguous span of a document, the unit of indexing and retrieval."""
    text: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    @property
    def identity_key(self) -> str:
        """Deduplication key: source id, or a content prefix without one."""
        return identity_key(self)


def identity_key(chunk: Chunk) -> str:
    if chunk.metadata.source_id:
        return chunk.metadata.source_id
    return chunk.text[:IDENTITY_PREFIX_LENGTH]


@dataclass(frozen=True)
class RelevanceBands:
    """Per-origin (high, medium) score thresholds.

    Semantic similarities and keyword overlap ratios live on different
    scales, so each origin may be tuned separately.
    """
    thresholds: dict[Origin, tuple[float, float]] = field(
        default_factory=lambda: {
            Origin.SEMANTIC: (0.7, 0.5),
            Origin.KEYWORD: (0.7, 0.5),
            Origin.EXPANDED: (0.7, 0.5),
            Origin.FALLBACK: (0.7, 0.4),
        }
    )

    def classify(self, score: float, origin: Origin) -> RelevanceBand:
        high, medium = self.thresholds.get(origin, (0.7, 0.5))
        if score > high:
            return RelevanceBand.HIGH
        if score > medium:
            return RelevanceBand.MEDIUM
        return RelevanceBand.LOW

    @classmethod
    def from_mapping(cls, mapping: dict[str, list[float]]) -> "RelevanceBands":
        bands = cls()
        thresholds = dict(bands.thresholds)
        for origin_name, (high, medium) in mapping.items():
            thresholds[Origin(origin_name)] = (float(high), float(medium))
        return cls(thresholds=thresholds)


@dataclass(frozen=True)
class Candidate:
    """A chunk scored against one query."""
    chunk: Chunk
    score: float
    origin: Origin
    relevance: RelevanceBand = RelevanceBand.LOW
    rerank_score: Optional[float] = None
    original_score: Optional[float] = None
    expanded_query: Optional[str] = None
    keyword_matches: Optional[int] = None

    @property
    def effective_score(self) -> float:
        """Rerank score if available, else retrieval score."""
        return self.rerank_score if self.rerank_score is not None else self.score

    @property
    def identity_key(self) -> str:
        return self.chunk.identity_key

    def with_changes(self, **changes) -> "Candidate":
        return replace(self, **changes)


def merge_candidates(candidates: list[Candidate]) -> list[Candidate]:
    """Keep the highest-scoring candidate per identity key.

    Ties keep the first candidate seen. Output follows first-seen key order.
    """
    best: dict[str, Candidate] = {}
    for candidate in candidates:
        key = candidate.identity_key
        current = best.get(key)
        if current is None or candidate.score > current.score:
            best[key] = candidate
    return list(best.values())


def rank_candidates(candidates: list[Candidate], k: int) -> list[Candidate]:
    """Sort by retrieval score (descending, stable) and truncate to k."""
    if k <= 0:
        return []
    return sorted(candidates, key=lambda c: c.score, reverse=True)[:k]


@dataclass(frozen=True)
class CorpusStats:
    """Operational view of the indexed corpus."""
    total_chunks: int
    unique_sources: int
    average_chunk_length: float
    sample_sources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalDocuments": self.total_chunks,
            "uniqueFiles": self.unique_sources,
            "averageChunkLength": self.average_chunk_length,
            "sampleSources": list(self.sample_sources),
        }
