import chainlit as cl

from notes_rag.config.settings import settings
from notes_rag.container import configure_container
from notes_rag.core.errors import CollaboratorUnavailableError, InvalidDocumentsPathError
from notes_rag.core.models.answer import QueryOutcome, QueryResult
from notes_rag.core.protocols.embedder import EmbedderProtocol
from notes_rag.core.services.answer_service import AnswerService
from notes_rag.core.services.ingest_service import IngestService

container = configure_container(settings)


def _source_elements(result: QueryResult) -> list[cl.Text]:
    """One side panel per cited source, named as the answer cites it."""
    return [
        cl.Text(
            name=f"Source {source.id}",
            content=(
                f"{source.file_name} ({source.source})\n"
                f"score {source.score} | {source.relevance} | {source.type}\n\n"
                f"{source.preview}"
            ),
            display="side",
        )
        for source in result.sources
    ]


@cl.on_chat_start
async def start():
    embedder = container.resolve(EmbedderProtocol)
    await cl.make_async(embedder.warmup)()

    # No-op once the index holds chunks
    try:
        await cl.make_async(container.resolve(IngestService).run)()
    except (InvalidDocumentsPathError, CollaboratorUnavailableError) as e:
        await cl.Message(content=f"Cannot index notes: {e}").send()
        return

    await cl.Message(
        content="Ask me anything about your notes. "
        "Answers cite the notes they come from."
    ).send()


@cl.on_message
async def main(message: cl.Message):
    question = message.content.strip()
    if not question:
        return

    answer_service = container.resolve(AnswerService)

    try:
        async with cl.Step(name="Searching notes") as step:
            step.input = question
            result = await cl.make_async(answer_service.answer)(question)
            if result.outcome == QueryOutcome.ANSWERED:
                step.output = (
                    f"Found {len(result.sources)} relevant chunks "
                    f"(search types: {', '.join(result.search_types)})"
                )
            else:
                step.output = f"{len(result.candidates)} candidates, none used"
    except CollaboratorUnavailableError as e:
        await cl.Message(content=f"Cannot answer right now: {e}").send()
        return

    content = result.answer
    if result.sources:
        content += "\n\n" + " ".join(f"Source {s.id}" for s in result.sources)
    await cl.Message(content=content, elements=_source_elements(result)).send()
