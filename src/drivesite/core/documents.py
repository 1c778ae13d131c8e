"""Exported document bodies.

Documents are stored as ``<content_dir>/<id>.html``, one file per store
document, as produced by the store's HTML export.
"""

import html
import re
from dataclasses import dataclass, field
from pathlib import Path

from drivesite.core.errors import DocumentFetchError

_HEADING_RE = re.compile(
    r"<h([12])\b[^>]*\bid=\"([^\"]+)\"[^>]*>(.*?)</h\1>",
    re.IGNORECASE | re.DOTALL,
)
_TAG_RE = re.compile(r"<[^>]+>")


@dataclass(frozen=True)
class Section:
    """Heading anchor inside a document."""

    level: int
    title: str
    anchor: str

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {"level": self.level, "title": self.title, "anchor": self.anchor}


@dataclass
class Document:
    """Fetched document body."""

    html: str
    sections: list[Section] = field(default_factory=list)


class DocumentStore:
    """Reads exported document bodies from a directory."""

    def __init__(self, content_dir: Path) -> None:
        self._content_dir = content_dir

    @property
    def content_dir(self) -> Path:
        """Directory containing exported bodies."""
        return self._content_dir

    def fetch(self, node_id: str) -> Document:
        """Fetch a document body by id.

        Args:
            node_id: Store identifier of the document

        Returns:
            Document with HTML and its section headings

        Raises:
            DocumentFetchError: If the body is missing or unreadable
        """
        if not node_id or "/" in node_id or node_id.startswith("."):
            raise DocumentFetchError(f"Invalid document id: {node_id!r}")

        body_path = self._content_dir / f"{node_id}.html"
        try:
            body = body_path.read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentFetchError(f"Document {node_id} not available: {e}") from e

        return Document(html=body, sections=extract_sections(body))


def extract_sections(body: str) -> list[Section]:
    """Collect h1/h2 headings that carry an id attribute."""
    sections: list[Section] = []
    for match in _HEADING_RE.finditer(body):
        title = html.unescape(_TAG_RE.sub("", match.group(3))).strip()
        if title:
            sections.append(Section(level=int(match.group(1)), title=title, anchor=match.group(2)))
    return sections
