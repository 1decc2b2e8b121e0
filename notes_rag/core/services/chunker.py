"""Chunker - splits notes into overlapping chunks at structural boundaries."""

import logging
from bisect import bisect_right
from typing import Iterable, Optional, Sequence

from ..models.document import Chunk, Document

logger = logging.getLogger(__name__)

# Largest structural unit first; "" allows a cut between any two characters.
DEFAULT_SEPARATORS: tuple[str, ...] = (
    "\n\n## ",
    "\n\n# ",
    "\n\n",
    "\n",
    ". ",
    "! ",
    "? ",
    "; ",
    ", ",
    " ",
    "",
)


def find_boundaries(text: str, separators: Sequence[str]) -> dict[int, int]:
    """Map every cut position in text to the best separator level found there.

    Whitespace separators cut before themselves so the following heading or
    word opens the next chunk. Punctuation separators cut after the mark so
    sentences keep their ending.
    """
    boundaries: dict[int, int] = {}
    for level, separator in enumerate(separators):
        if not separator:
            continue
        offset = 0 if separator[0].isspace() else len(separator.rstrip())
        index = text.find(separator)
        while index != -1:
            position = index + offset
            if 0 < position < len(text) and position not in boundaries:
                boundaries[position] = level
            index = text.find(separator, index + 1)
    return boundaries


class TextChunker:
    """Sliding-window chunker that cuts at the coarsest separator in reach."""

    def __init__(
        self,
        chunk_size: int = 1200,
        chunk_overlap: int = 300,
        separators: Optional[Sequence[str]] = None,
    ):
        """Initialize chunker.

        Args:
            chunk_size: Maximum chunk length in characters.
            chunk_overlap: Minimum characters shared by consecutive chunks.
            separators: Priority-ordered separators.
        """
        if chunk_size <= 0 or chunk_overlap <= 0:
            raise ValueError("chunk_size and chunk_overlap must be positive")
        if chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be smaller than "
                f"chunk_size ({chunk_size})"
            )
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._separators = tuple(separators) if separators is not None else DEFAULT_SEPARATORS
        self._split_anywhere = "" in self._separators

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split_text(self, text: str) -> list[str]:
        """Split raw text into chunk strings."""
        boundaries = find_boundaries(text, self._separators)
        positions = sorted(boundaries)

        chunks: list[str] = []
        start, previous_end = 0, 0
        while start < len(text):
            if len(text) - start <= self._chunk_size:
                end = len(text)
            else:
                floor = max(start + self._chunk_overlap, previous_end)
                end = self._window_end(
                    positions, boundaries, floor, start + self._chunk_size, len(text)
                )

            piece = text[start:end].strip()
            if piece:
                chunks.append(piece)
            if end >= len(text):
                break

            start, previous_end = self._next_start(text, positions, start, end), end
        return chunks

    def split_document(self, document: Document) -> list[Chunk]:
        """Split a document; every chunk inherits its metadata."""
        return [
            Chunk(text=piece, metadata=document.metadata)
            for piece in self.split_text(document.text)
        ]

    def split_documents(self, documents: Iterable[Document]) -> list[Chunk]:
        chunks: list[Chunk] = []
        for document in documents:
            chunks.extend(self.split_document(document))
        logger.info(f"Created {len(chunks)} chunks")
        return chunks

    def _window_end(
        self,
        positions: list[int],
        boundaries: dict[int, int],
        floor: int,
        limit: int,
        text_length: int,
    ) -> int:
        """Latest cut in (floor, limit] at the coarsest separator level available."""
        in_reach = positions[bisect_right(positions, floor):bisect_right(positions, limit)]
        if in_reach:
            best = min(boundaries[p] for p in in_reach)
            return max(p for p in in_reach if boundaries[p] == best)
        if self._split_anywhere:
            return limit

        # Indivisible token longer than chunk_size
        following = bisect_right(positions, limit)
        return positions[following] if following < len(positions) else text_length

    def _next_start(self, text: str, positions: list[int], start: int, end: int) -> int:
        """Where the next window opens so it repeats at least chunk_overlap characters."""
        lowest = max(start, end - self._chunk_size)
        latest = end - self._chunk_overlap

        first = bisect_right(positions, lowest)
        for i in range(bisect_right(positions, latest) - 1, first - 1, -1):
            if len(text[positions[i]:end].strip()) >= self._chunk_overlap:
                return positions[i]

        if self._split_anywhere:
            position = latest
            while position > lowest + 1 and len(text[position:end].strip()) < self._chunk_overlap:
                position -= 1
            return position
        return end
