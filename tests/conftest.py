"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
from drivesite.config import (
    Config,
    LiveReloadConfig,
    ServerConfig,
    SiteConfig,
    StoreConfig,
)

DOC = "application/vnd.google-apps.document"
FOLDER = "application/vnd.google-apps.folder"


def record(
    node_id: str,
    name: str,
    parent: str,
    mime_type: str = DOC,
    **extra: object,
) -> dict[str, object]:
    """Build a listing record in the Drive files.list shape."""
    data: dict[str, object] = {
        "id": node_id,
        "name": name,
        "mimeType": mime_type,
        "parents": [parent],
        "webViewLink": f"https://docs.example.com/{node_id}/edit",
        "createdTime": "2024-01-10T09:00:00.000Z",
        "modifiedTime": "2024-03-01T10:00:00.000Z",
        "lastModifyingUser": {"displayName": "Ada"},
        "owners": [{"displayName": "Grace"}],
    }
    data.update(extra)
    return data


SAMPLE_FILES = [
    record("d-home", "Home", "root"),
    record("f-guides", "01 - Guides", "root", FOLDER),
    record("d-about", "02 - About", "root"),
    record("f-empty", "Empty", "root", FOLDER),
    record("f-archive", "Archive", "root", FOLDER),
    record("d-old", "Old Notes", "f-archive"),
    record("d-guides-index", "Guides | index", "f-guides"),
    record("d-setup", "02 - Setup", "f-guides"),
    record("d-install", "01 - Install", "f-guides"),
    record("f-advanced", "Advanced", "f-guides", FOLDER),
    record("d-tuning", "Tuning", "f-advanced"),
    record("d-trashed", "Deleted Draft", "f-guides", trashed=True),
]


@pytest.fixture
def make_record():
    """Expose the record builder to tests."""
    return record


@pytest.fixture
def write_listing(tmp_path: Path):
    """Return a writer for custom listing exports."""

    def _write(data: object, name: str = "custom-listing.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return _write


@pytest.fixture
def listing_path(tmp_path: Path) -> Path:
    """Write the sample listing export and return its path."""
    path = tmp_path / "listing.json"
    path.write_text(json.dumps({"rootId": "root", "files": SAMPLE_FILES}))
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Write exported bodies for every sample document."""
    content = tmp_path / "content"
    content.mkdir()
    for item in SAMPLE_FILES:
        if item["mimeType"] == DOC:
            content.joinpath(f"{item['id']}.html").write_text(
                f'<h1 id="top">{item["name"]}</h1><p>Body of {item["id"]}.</p>',
            )
    return content


@pytest.fixture
def test_config(tmp_path: Path, listing_path: Path, content_dir: Path) -> Config:
    """Create a test configuration pointing at the sample store."""
    return Config(
        server=ServerConfig(),
        store=StoreConfig(listing=listing_path, content_dir=content_dir),
        site=SiteConfig(layouts=["default", "guides"]),
        live_reload=LiveReloadConfig(enabled=False),
    )
