"""Answer pipeline domain models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .document import Candidate

NO_RESULTS_MESSAGE = (
    "No relevant information found in your notes. "
    "Try using different keywords or phrases."
)
BELOW_THRESHOLD_MESSAGE = (
    "Found some matches but they have low relevance scores. "
    "Try rephrasing your question or using more specific terms from your notes."
)

PREVIEW_LENGTH = 200


class QueryOutcome(str, Enum):
    """How a query ended."""
    ANSWERED = "answered"
    NO_RESULTS = "no_results"
    BELOW_THRESHOLD = "below_threshold"


@dataclass(frozen=True)
class Generation:
    """Reply from the answer generator."""
    text: str


@dataclass
class SourceInfo:
    """Source entry returned alongside an answer."""
    id: int
    file_name: str
    directory: Optional[str]
    source: str
    relevance: str
    score: str
    original_score: Optional[str]
    type: str
    expanded_query: Optional[str]
    preview: str

    @classmethod
    def from_candidate(cls, index: int, candidate: Candidate) -> "SourceInfo":
        meta = candidate.chunk.metadata
        text = candidate.chunk.text
        preview = text[:PREVIEW_LENGTH] + ("..." if len(text) > PREVIEW_LENGTH else "")
        return cls(
            id=index,
            file_name=meta.file_name or "Unknown",
            directory=meta.directory or None,
            source=meta.source_id or "Unknown",
            relevance=candidate.relevance.value,
            score=f"{candidate.effective_score:.3f}",
            original_score=(
                f"{candidate.original_score:.3f}"
                if candidate.original_score is not None
                else None
            ),
            type=candidate.origin.value,
            expanded_query=candidate.expanded_query,
            preview=preview,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "directory": self.directory,
            "source": self.source,
            "relevance": self.relevance,
            "score": self.score,
            "originalScore": self.original_score,
            "type": self.type,
            "expandedQuery": self.expanded_query,
            "preview": self.preview,
        }


@dataclass
class QueryResult:
    """Answer response for presentation layer."""
    query: str
    outcome: QueryOutcome
    answer: str
    sources: list[SourceInfo] = field(default_factory=list)
    search_types: list[str] = field(default_factory=list)
    candidates: list[Candidate] = field(default_factory=list)
    context: str = ""

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "sources": [s.to_dict() for s in self.sources],
            "searchTypes": list(self.search_types),
            "outcome": self.outcome.value,
            "query": self.query,
        }


@dataclass(frozen=True)
class IngestReport:
    """Summary of an indexing pass."""
    documents: int
    chunks: int
    skipped: bool = False
