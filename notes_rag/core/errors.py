"""Error types surfaced by the answer pipeline."""


class NotesRagError(Exception):
    """Base error."""


class CollaboratorUnavailableError(NotesRagError):
    """A required external collaborator could not be reached."""

    collaborator = "collaborator"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.collaborator} unavailable: {detail}")


class IndexUnavailableError(CollaboratorUnavailableError):
    """Vector index unreachable or failing."""

    collaborator = "index"


class GeneratorUnavailableError(CollaboratorUnavailableError):
    """Answer generator unreachable or failing."""

    collaborator = "generator"


class InvalidDocumentsPathError(NotesRagError):
    """Notes folder missing or without supported documents."""
