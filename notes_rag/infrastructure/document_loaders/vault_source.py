import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional

from notes_rag.core.errors import InvalidDocumentsPathError
from notes_rag.core.models.document import ChunkMetadata, Document

from .composite_loader import CompositeLoader

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = (".obsidian", ".git", ".DS_Store", "_templates")


class VaultDocumentSource:
    """Loads every supported note under an Obsidian vault folder."""

    def __init__(
        self,
        vault_path: str,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        loader: Optional[CompositeLoader] = None,
    ):
        """Initialize vault source.

        Args:
            vault_path: Root folder of the vault.
            exclude_dirs: Directory names skipped at any depth.
            loader: File loader, defaults to markdown/text/pdf/docx.
        """
        self._root = Path(vault_path).expanduser()
        self._exclude_dirs = frozenset(exclude_dirs)
        self._loader = loader or CompositeLoader()

    @property
    def root(self) -> Path:
        return self._root

    def _iter_files(self) -> Iterator[Path]:
        for dir_path, dir_names, file_names in os.walk(self._root):
            # Prune in place so os.walk never descends into excluded folders
            dir_names[:] = sorted(d for d in dir_names if d not in self._exclude_dirs)
            for name in sorted(file_names):
                if name in self._exclude_dirs:
                    continue
                path = Path(dir_path) / name
                if self._loader.supports(path):
                    yield path

    def _metadata(self, path: Path) -> ChunkMetadata:
        relative = path.relative_to(self._root)
        directory = relative.parent.as_posix()
        return ChunkMetadata(
            source_id=str(path),
            file_name=path.stem,
            relative_path=relative.as_posix(),
            directory="" if directory == "." else directory,
            file_type=self._loader.file_type(path) or "",
            last_modified=datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc),
        )

    def load(self) -> list[Document]:
        """Load all notes, skipping unreadable or empty files.

        Raises:
            InvalidDocumentsPathError: Vault folder does not exist.
        """
        if not self._root.is_dir():
            logger.error(f"Vault path not found: {self._root}")
            raise InvalidDocumentsPathError(f"Not a directory: {self._root}")

        documents = []
        for path in self._iter_files():
            content = self._loader.load(path)
            if not content or not content.strip():
                logger.debug(f"Skip empty: {path}")
                continue
            documents.append(Document(text=content, metadata=self._metadata(path)))

        logger.info(f"Loaded {len(documents)} documents from {self._root}")
        return documents

    def validate(self) -> int:
        """Check that the vault holds at least one note.

        Returns:
            Number of notes found.

        Raises:
            InvalidDocumentsPathError: Folder missing or without notes.
        """
        documents = self.load()
        if not documents:
            raise InvalidDocumentsPathError(
                f"No supported notes found in the specified path: {self._root}"
            )
        logger.info(f"Found {len(documents)} notes")
        return len(documents)
