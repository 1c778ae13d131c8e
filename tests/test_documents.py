"""Tests for the exported document store."""

from pathlib import Path

import pytest
from drivesite.core.documents import DocumentStore, Section, extract_sections
from drivesite.core.errors import DocumentFetchError


class TestDocumentStore:
    """Tests for DocumentStore.fetch()."""

    def test__existing_body__returns_document(self, tmp_path: Path) -> None:
        """Body file is read with its sections."""
        (tmp_path / "doc1.html").write_text('<h1 id="intro">Intro</h1><p>Hello</p>')

        document = DocumentStore(tmp_path).fetch("doc1")

        assert "<p>Hello</p>" in document.html
        assert document.sections == [Section(level=1, title="Intro", anchor="intro")]

    def test__missing_body__raises(self, tmp_path: Path) -> None:
        """Missing body is an upstream failure."""
        with pytest.raises(DocumentFetchError, match="not available"):
            DocumentStore(tmp_path).fetch("missing")

    @pytest.mark.parametrize("node_id", ["", "../secret", ".hidden"])
    def test__invalid_id__raises(self, tmp_path: Path, node_id: str) -> None:
        """Ids never escape the content directory."""
        with pytest.raises(DocumentFetchError, match="Invalid document id"):
            DocumentStore(tmp_path).fetch(node_id)


class TestExtractSections:
    """Tests for extract_sections()."""

    def test__collects_h1_and_h2_with_ids(self) -> None:
        """Only anchored top-level headings become sections."""
        body = (
            '<h1 class="title" id="top">Guide</h1>'
            '<h2 id="step-1"><span>Step &amp; 1</span></h2>'
            "<h2>No anchor</h2>"
            '<h3 id="deep">Too deep</h3>'
        )

        sections = extract_sections(body)

        assert sections == [
            Section(level=1, title="Guide", anchor="top"),
            Section(level=2, title="Step & 1", anchor="step-1"),
        ]

    def test__to_dict__returns_dict(self) -> None:
        """Convert to dictionary."""
        assert Section(level=2, title="A", anchor="a").to_dict() == {
            "level": 2,
            "title": "A",
            "anchor": "a",
        }
