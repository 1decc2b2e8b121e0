from pathlib import Path

from docx import Document as DocxDocument


class DocxLoader:

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() == ".docx"

    def file_type(self, file_path: Path) -> str:
        return "docx"

    def load(self, file_path: Path) -> str:
        doc = DocxDocument(file_path)
        lines = []
        for paragraph in doc.paragraphs:
            text = paragraph.text.strip()
            if not text:
                continue
            # Word headings become markdown headings so the chunker splits on them
            style = paragraph.style.name if paragraph.style is not None else ""
            if style.startswith("Heading"):
                level = style.removeprefix("Heading").strip()
                text = f"{'#' * int(level) if level.isdigit() else '#'} {text}"
            lines.append(text)
        return "\n\n".join(lines)
