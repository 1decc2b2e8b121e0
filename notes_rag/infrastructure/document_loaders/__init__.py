"""Note file loaders and the vault document source."""
from .composite_loader import CompositeLoader
from .docx_loader import DocxLoader
from .pdf_loader import PDFLoader
from .text_loader import TextLoader
from .vault_source import DEFAULT_EXCLUDE_DIRS, VaultDocumentSource

__all__ = [
    "CompositeLoader",
    "DocxLoader",
    "PDFLoader",
    "TextLoader",
    "DEFAULT_EXCLUDE_DIRS",
    "VaultDocumentSource",
]
