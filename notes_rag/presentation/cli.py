"""
Notes RAG - ask questions about an Obsidian vault from the command line

Usage:
    notes-rag ingest [--refresh]
    notes-rag ask "what did I decide about the garden project?"
    notes-rag chat
    notes-rag serve [--host HOST] [--port PORT]
    notes-rag ui
"""

import argparse
import logging
import subprocess
import sys
from pathlib import Path

from notes_rag.config.settings import Settings
from notes_rag.container import Container, configure_container
from notes_rag.core.errors import CollaboratorUnavailableError, InvalidDocumentsPathError
from notes_rag.core.models.answer import QueryResult
from notes_rag.core.protocols.generator import AnswerGeneratorProtocol
from notes_rag.core.protocols.vector_store import VectorStoreProtocol
from notes_rag.core.services.answer_service import AnswerService
from notes_rag.core.services.ingest_service import IngestService
from notes_rag.core.services.search_service import SearchService
from notes_rag.infrastructure.llm.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

CHAINLIT_APP = Path(__file__).parent / "chainlit_app.py"

REPL_HELP = """Commands:
  exit                 quit
  test                 show a few indexed chunks
  debug stats          corpus statistics
  debug search <q>     raw hybrid search results
  debug chunks         full text of sample chunks
Anything else is answered from your notes."""


def ensure_ollama_model(container: Container) -> bool:
    """Check the configured model is pulled.

    Returns:
        True if model ready, False otherwise.
    """
    generator = container.resolve(AnswerGeneratorProtocol)
    if not isinstance(generator, OllamaClient):
        return True
    logger.info(f"Checking Ollama model: {generator.model}")
    return generator.check_model()


def print_result(result: QueryResult) -> None:
    print(f"\n{result.answer}\n")
    if not result.sources:
        return
    print(f"Sources (search types: {', '.join(result.search_types)}):")
    for source in result.sources:
        directory = f" [{source.directory}]" if source.directory else ""
        print(
            f"  {source.id}. {source.file_name}{directory} "
            f"score={source.score} relevance={source.relevance} type={source.type}"
        )


def cmd_ingest(container: Container, refresh: bool) -> int:
    """Ingest command - index notes only."""
    report = container.resolve(IngestService).run(force=refresh)
    if report.skipped:
        logger.info(f"Index already has {report.chunks} chunks")
    else:
        logger.info(f"Indexed {report.chunks} chunks from {report.documents} notes")
    return 0


def cmd_ask(container: Container, question: str) -> int:
    container.resolve(IngestService).run()
    result = container.resolve(AnswerService).answer(question)
    print_result(result)
    return 0


def _show_samples(container: Container, k: int, full: bool) -> None:
    # An empty query embeds to an arbitrary point, which gives a rough sample
    samples = container.resolve(VectorStoreProtocol).similarity_search("", k)
    print(f"Found {len(samples)} chunks in vector store:")
    for i, (chunk, _) in enumerate(samples, 1):
        print(f"\n--- Chunk {i} ---")
        print(f"Source: {chunk.metadata.source_id or 'Unknown'}")
        if full:
            print(f"Length: {len(chunk.text)} characters")
            print(f"Content: {chunk.text}")
        else:
            print(f"Content preview: {chunk.text[:150]}...")


def _debug(container: Container, command: str) -> None:
    search = container.resolve(SearchService)

    if command == "stats":
        stats = search.stats()
        print("\nVector Store Statistics:")
        print(f"- Total chunks: {stats.total_chunks}")
        print(f"- Unique files: {stats.unique_sources}")
        print(f"- Average chunk length: {stats.average_chunk_length:.0f} characters")
        print("- Sample sources:")
        for source in stats.sample_sources:
            print(f"  * {source}")
    elif command.startswith("search "):
        query = command[len("search "):].strip()
        results = search.search(query, 3)
        print(f"\nFound {len(results)} results for: '{query}'")
        for i, candidate in enumerate(results, 1):
            print(f"\n--- Result {i} ---")
            print(f"Type: {candidate.origin.value}")
            print(f"Score: {candidate.score:.3f}")
            print(f"Relevance: {candidate.relevance.value}")
            print(f"Source: {candidate.chunk.metadata.file_name or 'Unknown'}")
            print(f"Content: {candidate.chunk.text[:200]}...")
    elif command == "chunks":
        _show_samples(container, 3, full=True)
    else:
        print("Unknown debug command. Available: stats, search <query>, chunks")


def cmd_chat(container: Container) -> int:
    """Interactive question loop."""
    container.resolve(IngestService).run()
    answer_service = container.resolve(AnswerService)
    print(REPL_HELP)

    while True:
        try:
            line = input("\nAsk a question about your notes: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if not line:
            continue
        lowered = line.lower()
        if lowered == "exit":
            return 0

        try:
            if lowered == "test":
                _show_samples(container, 5, full=False)
            elif lowered.startswith("debug "):
                _debug(container, line[len("debug "):].strip())
            else:
                print("\nRetrieving relevant information...")
                print_result(answer_service.answer(line))
        except CollaboratorUnavailableError as e:
            # Keep the session alive; the collaborator may come back
            logger.error(f"Error: {e}")


def cmd_serve(container: Container, host: str, port: int) -> int:
    import uvicorn

    from notes_rag.presentation.api import create_app

    logger.info(f"Starting API on http://{host}:{port}")
    uvicorn.run(create_app(container), host=host, port=port)
    return 0


def cmd_ui(container: Container) -> int:
    """Index, then hand over to Chainlit."""
    if container.resolve(Settings).vector_backend == "memory":
        # The in-memory index lives in the Chainlit process, which indexes on first chat
        logger.info("In-memory index: notes are indexed when the first chat starts")
    else:
        container.resolve(IngestService).run()

    logger.info("Starting Chainlit...")
    completed = subprocess.run(
        [sys.executable, "-m", "chainlit", "run", str(CHAINLIT_APP)]
    )
    return completed.returncode


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notes-rag",
        description="Ask questions about your Obsidian notes with a local LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="Index the vault")
    ingest.add_argument(
        "-r", "--refresh",
        action="store_true",
        help="Rebuild the index even if it already has chunks",
    )

    ask = commands.add_parser("ask", help="Answer one question and exit")
    ask.add_argument("question", help="Question about your notes")

    commands.add_parser("chat", help="Interactive question loop")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.api_host)
    serve.add_argument("--port", type=int, default=settings.api_port)

    commands.add_parser("ui", help="Run the Chainlit chat UI")

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    settings = Settings()
    args = build_parser(settings).parse_args(argv)
    container = configure_container(settings)

    try:
        if args.command == "ingest":
            return cmd_ingest(container, args.refresh)
        if args.command == "serve":
            # /api/init checks the model itself
            return cmd_serve(container, args.host, args.port)

        if not ensure_ollama_model(container):
            logger.error(f"Ollama model '{settings.llm_model}' is not available")
            return 1

        if args.command == "ask":
            return cmd_ask(container, args.question)
        if args.command == "chat":
            return cmd_chat(container)
        return cmd_ui(container)
    except InvalidDocumentsPathError as e:
        logger.error(f"Invalid documents path: {e}")
        return 1
    except CollaboratorUnavailableError as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
