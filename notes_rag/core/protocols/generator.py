"""Answer generator protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.answer import Generation


@runtime_checkable
class AnswerGeneratorProtocol(Protocol):
    """Protocol for the language model producing answers."""

    def generate(self, prompt: str) -> Generation:
        """Generate an answer for a fully rendered prompt.

        Args:
            prompt: Prompt text including retrieved context.

        Returns:
            Generated answer.

        Raises:
            GeneratorUnavailableError: If the model cannot be reached.
        """
        ...
