import logging
from pathlib import Path
from typing import Optional

from .docx_loader import DocxLoader
from .pdf_loader import PDFLoader
from .text_loader import TextLoader

logger = logging.getLogger(__name__)


class CompositeLoader:
    """Dispatches a file to the first loader that supports its extension."""

    def __init__(self, loaders: Optional[list] = None):
        self._loaders = loaders if loaders is not None else [
            TextLoader(),
            PDFLoader(),
            DocxLoader(),
        ]

    def _loader_for(self, file_path: Path):
        for loader in self._loaders:
            if loader.supports(file_path):
                return loader
        return None

    def supports(self, file_path: Path) -> bool:
        return self._loader_for(file_path) is not None

    def file_type(self, file_path: Path) -> Optional[str]:
        loader = self._loader_for(file_path)
        return loader.file_type(file_path) if loader else None

    def load(self, file_path: Path) -> Optional[str]:
        """Load text, or None when the file is unsupported or unreadable."""
        loader = self._loader_for(file_path)
        if loader is None:
            return None
        try:
            return loader.load(file_path)
        except Exception as e:
            logger.error(f"Failed to load {file_path}: {e}")
            return None
