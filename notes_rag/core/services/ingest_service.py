"""Ingest service - note indexing."""

import logging
import threading

from ..errors import InvalidDocumentsPathError
from ..models.answer import IngestReport
from ..protocols.document_source import DocumentSourceProtocol
from ..protocols.vector_store import VectorStoreProtocol
from .chunker import TextChunker

logger = logging.getLogger(__name__)


class IngestService:
    """Service for (re)building the vector index from the notes."""

    def __init__(
        self,
        document_source: DocumentSourceProtocol,
        chunker: TextChunker,
        vector_store: VectorStoreProtocol,
    ):
        """Initialize ingest service.

        Args:
            document_source: Supplies raw notes.
            chunker: Splits notes into chunks.
            vector_store: Index to rebuild.
        """
        self._source = document_source
        self._chunker = chunker
        self._vector_store = vector_store
        self._lock = threading.Lock()

    def run(self, force: bool = False) -> IngestReport:
        """Index notes unless the index is already populated.

        Args:
            force: Rebuild even when the index has chunks.

        Returns:
            Report of documents and chunks indexed.

        Raises:
            InvalidDocumentsPathError: No notes to index.
            IndexUnavailableError: Vector index unreachable.
        """
        with self._lock:
            return self._run(force)

    def _run(self, force: bool) -> IngestReport:
        existing = self._vector_store.count()
        if existing > 0 and not force:
            logger.info(
                f"Index already holds {existing} chunks, skipping "
                "(use --refresh to rebuild)"
            )
            return IngestReport(documents=0, chunks=existing, skipped=True)

        if force and existing > 0:
            logger.info("Force refresh requested, rebuilding index")

        documents = self._source.load()
        if not documents:
            raise InvalidDocumentsPathError("No notes found to index")
        logger.info(f"Loaded {len(documents)} documents")

        chunks = self._chunker.split_documents(documents)
        self._vector_store.rebuild(chunks)

        logger.info(
            f"Indexing complete: {len(chunks)} chunks from {len(documents)} documents"
        )
        return IngestReport(documents=len(documents), chunks=len(chunks))
