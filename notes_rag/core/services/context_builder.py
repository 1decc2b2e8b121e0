"""Context builder - renders ranked candidates into a prompt for the LLM."""

from ..models.document import Candidate

BLOCK_SEPARATOR = "\n\n---\n\n"

INSUFFICIENT_CONTEXT_ANSWER = (
    "I don't have enough information in my notes to answer this question completely"
)

PROMPT_WITH_CONTEXT = """You are an expert assistant that provides highly accurate answers based on the user's personal notes and documents.

CRITICAL INSTRUCTIONS FOR MAXIMUM ACCURACY:
- Answer ONLY using the information provided in the context below
- If the context doesn't contain enough information to answer completely, explicitly state "{insufficient}"
- Be extremely specific and accurate - cite exact details when available
- If you find relevant information, provide it clearly with specific references to sources by their number (e.g. [Source 1])
- Don't make assumptions or add information not present in the context
- If multiple sources contain conflicting information, explicitly mention the conflicts
- Pay attention to relevance scores - higher scores indicate better matches
- If the question asks for specific details (names, dates, numbers), be precise
- Structure your answer logically with clear sections if appropriate
- Use bullet points or numbered lists when presenting multiple items

CONTEXT FROM USER'S NOTES:
{context}

QUESTION: {question}

Please provide a comprehensive, accurate answer based on the context above. If information is insufficient, clearly state what's missing."""


class ContextBuilder:
    """Formats candidates as numbered, provenance-annotated blocks."""

    def build_context(self, candidates: list[Candidate]) -> str:
        """Render candidates in the given order.

        Args:
            candidates: Already ranked candidates.

        Returns:
            Context text, empty when there are no candidates.
        """
        return BLOCK_SEPARATOR.join(
            self._format_block(i, c) for i, c in enumerate(candidates, 1)
        )

    def build_prompt(self, context: str, question: str) -> str:
        return PROMPT_WITH_CONTEXT.format(
            insufficient=INSUFFICIENT_CONTEXT_ANSWER,
            context=context,
            question=question,
        )

    @staticmethod
    def _format_block(index: int, candidate: Candidate) -> str:
        meta = candidate.chunk.metadata
        source = meta.file_name or meta.source_id or "Unknown"
        directory = f" | Directory: {meta.directory}" if meta.directory else ""
        original = (
            f" (orig: {candidate.original_score:.3f})"
            if candidate.rerank_score is not None and candidate.original_score is not None
            else ""
        )
        header = (
            f"[Source {index}: {source}{directory}"
            f" | Relevance: {candidate.relevance.value}"
            f" | Score: {candidate.effective_score:.3f}{original}"
            f" | Type: {candidate.origin.value}]"
        )
        return f"{header}\n{candidate.chunk.text}"
