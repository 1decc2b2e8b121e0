from pathlib import Path


class TextLoader:
    """Markdown notes and plain text files."""

    FILE_TYPES = {".md": "markdown", ".markdown": "markdown", ".txt": "text"}

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self.FILE_TYPES

    def file_type(self, file_path: Path) -> str:
        return self.FILE_TYPES[file_path.suffix.lower()]

    def load(self, file_path: Path) -> str:
        return file_path.read_text(encoding="utf-8", errors="replace")
