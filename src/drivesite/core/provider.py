"""Tree provider backed by a store listing export.

The listing is a JSON dump of the store's file records (the shape returned
by a Drive ``files.list`` call). Snapshots are rebuilt only when the
listing file's mtime changes.

Listing format::

    {
        "rootId": "0AbcRoot",
        "files": [
            {
                "id": "1a2b",
                "name": "01 - Setup",
                "mimeType": "application/vnd.google-apps.document",
                "parents": ["0AbcRoot"],
                "webViewLink": "https://docs.google.com/document/d/1a2b/edit",
                "modifiedTime": "2024-03-01T10:00:00.000Z",
                "lastModifyingUser": {"displayName": "Ada"}
            }
        ]
    }
"""

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from drivesite.core.errors import TreeProviderError
from drivesite.core.names import clean_name, slugify_name, sort_key, sort_value
from drivesite.core.tree import Branch, Leaf, NodeMeta, TreeNode, TreeSnapshot

logger = logging.getLogger(__name__)


class TreeLoader:
    """Builds tree snapshots from a listing export with mtime caching."""

    def __init__(self, listing_path: Path, root_id: str | None = None) -> None:
        """Initialize loader.

        Args:
            listing_path: Path to the JSON listing export
            root_id: Id of the folder to serve as site root. When None, the
                     listing's ``rootId`` or its single unknown parent is used.
        """
        self._listing_path = listing_path
        self._root_id = root_id
        self._cached: TreeSnapshot | None = None
        self._cached_mtime: int | None = None

    @property
    def listing_path(self) -> Path:
        """Path to the listing export."""
        return self._listing_path

    def load(self) -> TreeSnapshot:
        """Return an up to date snapshot.

        Returns:
            TreeSnapshot built from the current listing

        Raises:
            TreeProviderError: If the listing is missing or malformed
        """
        try:
            mtime = self._listing_path.stat().st_mtime_ns
        except OSError as e:
            raise TreeProviderError(f"Listing not readable: {self._listing_path}") from e

        if self._cached is not None and self._cached_mtime == mtime:
            return self._cached

        logger.debug(f"Building tree snapshot from {self._listing_path}")
        snapshot = self._build(self._read_listing())
        self._cached = snapshot
        self._cached_mtime = mtime
        return snapshot

    def invalidate(self) -> None:
        """Drop the cached snapshot."""
        self._cached = None
        self._cached_mtime = None

    def _read_listing(self) -> tuple[str | None, list[dict[str, object]]]:
        """Read the listing file.

        Returns:
            Tuple of the listing's root id (if any) and its file records
        """
        try:
            data = json.loads(self._listing_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise TreeProviderError(f"Invalid listing {self._listing_path}: {e}") from e

        root_id: object = None
        if isinstance(data, dict):
            root_id = data.get("rootId")
            data = data.get("files")
        if not isinstance(data, list):
            raise TreeProviderError("Listing must be a list of files or an object with a files list")
        if root_id is not None and not isinstance(root_id, str):
            raise TreeProviderError("Listing rootId must be a string")

        records: list[dict[str, object]] = []
        for item in data:
            if not isinstance(item, dict):
                raise TreeProviderError(f"Listing records must be objects, got {item!r}")
            records.append(item)
        return root_id, records

    def _build(self, listing: tuple[str | None, list[dict[str, object]]]) -> TreeSnapshot:
        """Build snapshot from listing records."""
        listing_root_id, records = listing

        metadata: dict[str, NodeMeta] = {}
        parents: dict[str, list[str]] = {}
        for record in records:
            if record.get("trashed") is True:
                continue
            meta = _parse_record(record)
            metadata[meta.id] = meta
            parents[meta.id] = _parse_parents(record)

        root_id = self._root_id or listing_root_id or _infer_root_id(metadata, parents)

        by_parent: dict[str, list[NodeMeta]] = {}
        for node_id, parent_ids in parents.items():
            for parent_id in parent_ids:
                by_parent.setdefault(parent_id, []).append(metadata[node_id])

        children = _build_children(root_id, (), by_parent, frozenset({root_id}))
        return TreeSnapshot(Branch(id=root_id, children=children), metadata)


def _build_children(
    folder_id: str,
    breadcrumb: tuple[str, ...],
    by_parent: Mapping[str, list[NodeMeta]],
    ancestors: frozenset[str],
) -> dict[str, TreeNode]:
    """Recursively build the children mapping of a folder."""
    children: dict[str, TreeNode] = {}
    entries = sorted(by_parent.get(folder_id, []), key=lambda meta: (sort_key(meta.sort), meta.id))
    for meta in entries:
        if meta.slug in children:
            logger.warning(
                f"Duplicate slug {meta.slug!r} in folder {folder_id}, skipping {meta.name!r}",
            )
            continue
        if meta.id in ancestors:
            raise TreeProviderError(f"Folder cycle detected at {meta.id}")

        if meta.is_folder and by_parent.get(meta.id):
            children[meta.slug] = Branch(
                id=meta.id,
                children=_build_children(
                    meta.id,
                    (*breadcrumb, meta.id),
                    by_parent,
                    ancestors | {meta.id},
                ),
                breadcrumb=breadcrumb,
            )
        else:
            children[meta.slug] = Leaf(id=meta.id, breadcrumb=breadcrumb)
    return children


def _infer_root_id(metadata: Mapping[str, NodeMeta], parents: Mapping[str, list[str]]) -> str:
    """Find the single parent id that is not itself part of the listing."""
    unknown = {
        parent_id
        for parent_ids in parents.values()
        for parent_id in parent_ids
        if parent_id not in metadata
    }
    if len(unknown) != 1:
        raise TreeProviderError(
            f"Cannot infer root folder, found {len(unknown)} candidates; set store.root_id",
        )
    return unknown.pop()


def _parse_record(record: Mapping[str, object]) -> NodeMeta:
    """Parse a listing record into NodeMeta."""
    node_id = record.get("id")
    name = record.get("name")
    mime_type = record.get("mimeType")
    if not isinstance(node_id, str) or not node_id:
        raise TreeProviderError(f"Listing record without id: {record!r}")
    if not isinstance(name, str):
        raise TreeProviderError(f"Listing record {node_id} has no name")
    if not isinstance(mime_type, str):
        raise TreeProviderError(f"Listing record {node_id} has no mimeType")

    last_modifying_user = _display_name(record.get("lastModifyingUser"))
    owners = record.get("owners")
    created_by = ""
    if isinstance(owners, list) and owners:
        created_by = _display_name(owners[0])

    web_view_link = record.get("webViewLink", "")
    if not isinstance(web_view_link, str):
        raise TreeProviderError(f"Listing record {node_id} has invalid webViewLink")

    return NodeMeta(
        id=node_id,
        name=name,
        pretty_name=clean_name(name),
        slug=slugify_name(name) or node_id,
        sort=sort_value(name),
        mime_type=mime_type,
        web_view_link=web_view_link,
        created_time=_parse_time(record.get("createdTime"), node_id),
        modified_time=_parse_time(record.get("modifiedTime"), node_id),
        last_modifying_user=last_modifying_user,
        created_by=created_by or last_modifying_user,
    )


def _parse_parents(record: Mapping[str, object]) -> list[str]:
    parents = record.get("parents", [])
    if not isinstance(parents, list) or not all(isinstance(p, str) for p in parents):
        raise TreeProviderError(f"Listing record {record.get('id')} has invalid parents")
    return list(parents)


def _display_name(user: object) -> str:
    if isinstance(user, dict):
        name = user.get("displayName")
        if isinstance(name, str):
            return name
    return ""


def _parse_time(value: object, node_id: str) -> datetime | None:
    """Parse an RFC 3339 timestamp from the listing."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise TreeProviderError(f"Listing record {node_id} has invalid timestamp {value!r}")
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise TreeProviderError(f"Listing record {node_id} has invalid timestamp {value!r}") from e
