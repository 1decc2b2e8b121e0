"""Document source protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.document import Document


@runtime_checkable
class DocumentSourceProtocol(Protocol):
    """Protocol for whatever supplies raw notes."""

    def load(self) -> list[Document]:
        """Load every document."""
        ...
