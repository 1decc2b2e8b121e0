"""
Notes RAG HTTP API

Endpoints:
- GET  /api/health: Liveness check
- POST /api/init: Index the vault unless already indexed
- POST /api/refresh: Rebuild the index from the vault
- POST /api/query: Answer a question from the notes
- GET  /api/debug/stats: Corpus statistics
- POST /api/debug/search: Raw hybrid search results
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from notes_rag.container import Container
from notes_rag.core.errors import CollaboratorUnavailableError, InvalidDocumentsPathError
from notes_rag.core.protocols.generator import AnswerGeneratorProtocol
from notes_rag.core.services.answer_service import AnswerService
from notes_rag.core.services.ingest_service import IngestService
from notes_rag.core.services.search_service import SearchService
from notes_rag.infrastructure.llm.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

DEBUG_SEARCH_K = 3
DEBUG_PREVIEW_LENGTH = 300


class QueryRequest(BaseModel):
    query: str = ""


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


def create_app(container: Container) -> FastAPI:
    """Build the API around a configured container."""
    app = FastAPI(title="Notes RAG")
    app.state.initialized = False

    @app.exception_handler(CollaboratorUnavailableError)
    async def collaborator_unavailable(request, exc: CollaboratorUnavailableError):
        logger.error(f"{request.url.path}: {exc}")
        return _error(503, str(exc), collaborator=exc.collaborator)

    @app.exception_handler(InvalidDocumentsPathError)
    async def invalid_documents_path(request, exc: InvalidDocumentsPathError):
        logger.error(f"{request.url.path}: {exc}")
        return _error(400, "Invalid documents path", detail=str(exc))

    def stats() -> dict:
        return container.resolve(SearchService).stats().to_dict()

    @app.get("/api/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/api/init")
    def init():
        if app.state.initialized:
            return {
                "success": True,
                "message": "RAG system already initialized",
                "stats": stats(),
            }

        logger.info("Initializing RAG system...")
        generator = container.resolve(AnswerGeneratorProtocol)
        if isinstance(generator, OllamaClient) and not generator.check_model():
            return _error(
                503,
                f"Model '{generator.model}' is not available in Ollama",
                collaborator="generator",
            )

        report = container.resolve(IngestService).run()
        app.state.initialized = True
        return {
            "success": True,
            "message": "RAG system initialized successfully",
            "indexSkipped": report.skipped,
            "stats": stats(),
        }

    @app.post("/api/refresh")
    def refresh():
        logger.info("Refreshing vector store...")
        report = container.resolve(IngestService).run(force=True)
        app.state.initialized = True
        return {
            "success": True,
            "message": "Vector store refreshed successfully",
            "stats": stats(),
            "documentsProcessed": report.documents,
            "chunksCreated": report.chunks,
        }

    @app.post("/api/query")
    def query(request: QueryRequest):
        if not app.state.initialized:
            return _error(400, "RAG system not initialized. Please initialize first.")
        if not request.query.strip():
            return _error(400, "Query is required")

        result = container.resolve(AnswerService).answer(request.query)
        return {
            "success": True,
            **result.to_dict(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/debug/stats")
    def debug_stats():
        if not app.state.initialized:
            return _error(400, "RAG system not initialized")
        return {"success": True, "stats": stats()}

    @app.post("/api/debug/search")
    def debug_search(request: QueryRequest):
        if not app.state.initialized:
            return _error(400, "RAG system not initialized")
        if not request.query.strip():
            return _error(400, "Query is required")

        candidates = container.resolve(SearchService).search(request.query, DEBUG_SEARCH_K)
        results = []
        for i, candidate in enumerate(candidates, 1):
            text = candidate.chunk.text
            results.append(
                {
                    "id": i,
                    "type": candidate.origin.value,
                    "score": f"{candidate.score:.3f}",
                    "relevance": candidate.relevance.value,
                    "fileName": candidate.chunk.metadata.file_name or "Unknown",
                    "content": text[:DEBUG_PREVIEW_LENGTH]
                    + ("..." if len(text) > DEBUG_PREVIEW_LENGTH else ""),
                }
            )
        return {"success": True, "results": results}

    return app
