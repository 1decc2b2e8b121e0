from pathlib import Path

from pypdf import PdfReader


class PDFLoader:

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() == ".pdf"

    def file_type(self, file_path: Path) -> str:
        return "pdf"

    def load(self, file_path: Path) -> str:
        """Extract text page by page, pages separated by blank lines."""
        reader = PdfReader(file_path)
        pages = (page.extract_text() or "" for page in reader.pages)
        return "\n\n".join(text.strip() for text in pages if text.strip())
