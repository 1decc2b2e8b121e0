"""
Tests for VaultDocumentSource and the file loaders
"""

import os
from datetime import datetime, timezone

import pytest

from notes_rag.core.errors import InvalidDocumentsPathError
from notes_rag.infrastructure.document_loaders import CompositeLoader, VaultDocumentSource


@pytest.fixture
def vault(tmp_path):
    (tmp_path / "work").mkdir()
    (tmp_path / "work" / "Project Plan.md").write_text("# Plan\n\nmeeting with John")
    (tmp_path / "inbox.md").write_text("quick thought")
    (tmp_path / "reading.txt").write_text("book list")
    (tmp_path / "empty.md").write_text("   \n")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")
    for excluded in (".obsidian", ".git", "_templates"):
        (tmp_path / excluded).mkdir()
        (tmp_path / excluded / "hidden.md").write_text("should not load")
    return tmp_path


class TestVaultDocumentSource:
    """Tests for VaultDocumentSource.load"""

    def test_loads_supported_notes_recursively(self, vault):
        documents = VaultDocumentSource(str(vault)).load()

        paths = sorted(d.metadata.relative_path for d in documents)
        assert paths == ["inbox.md", "reading.txt", "work/Project Plan.md"]

    def test_excluded_directories_skipped(self, vault):
        documents = VaultDocumentSource(str(vault)).load()

        assert all("should not load" not in d.text for d in documents)

    def test_custom_exclusions(self, vault):
        documents = VaultDocumentSource(str(vault), exclude_dirs=["work"]).load()

        assert "work/Project Plan.md" not in {d.metadata.relative_path for d in documents}
        assert "_templates/hidden.md" in {d.metadata.relative_path for d in documents}

    def test_metadata(self, vault):
        note = vault / "work" / "Project Plan.md"
        os.utime(note, (1_700_000_000, 1_700_000_000))

        [document] = [
            d for d in VaultDocumentSource(str(vault)).load()
            if d.metadata.file_name == "Project Plan"
        ]

        assert document.text == "# Plan\n\nmeeting with John"
        assert document.metadata.source_id == str(note)
        assert document.metadata.directory == "work"
        assert document.metadata.file_type == "markdown"
        assert document.metadata.last_modified == datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)

    def test_root_notes_have_no_directory(self, vault):
        [inbox] = [d for d in VaultDocumentSource(str(vault)).load() if d.metadata.file_name == "inbox"]

        assert inbox.metadata.directory == ""

    def test_missing_path(self, tmp_path):
        with pytest.raises(InvalidDocumentsPathError):
            VaultDocumentSource(str(tmp_path / "nope")).load()

    def test_validate_counts_notes(self, vault):
        assert VaultDocumentSource(str(vault)).validate() == 3

    def test_validate_empty_vault(self, tmp_path):
        with pytest.raises(InvalidDocumentsPathError):
            VaultDocumentSource(str(tmp_path)).validate()


class TestCompositeLoader:
    """Tests for CompositeLoader"""

    def test_file_types(self, tmp_path):
        loader = CompositeLoader()

        assert loader.file_type(tmp_path / "a.md") == "markdown"
        assert loader.file_type(tmp_path / "a.txt") == "text"
        assert loader.file_type(tmp_path / "a.pdf") == "pdf"
        assert loader.file_type(tmp_path / "a.docx") == "docx"
        assert loader.file_type(tmp_path / "a.png") is None

    def test_unreadable_file_returns_none(self, tmp_path):
        broken = tmp_path / "broken.pdf"
        broken.write_bytes(b"not a pdf")

        assert CompositeLoader().load(broken) is None

    def test_docx_headings_become_markdown(self, tmp_path):
        from docx import Document as DocxDocument

        path = tmp_path / "notes.docx"
        doc = DocxDocument()
        doc.add_heading("Garden", level=2)
        doc.add_paragraph("Plant tomatoes in May.")
        doc.save(path)

        assert CompositeLoader().load(path) == "## Garden\n\nPlant tomatoes in May."
