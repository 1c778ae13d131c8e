"""Document tree snapshot.

A snapshot pairs the folder hierarchy with per-node metadata. Nodes are
a two-variant union: ``Branch`` holds named children, ``Leaf`` is a
single document. Snapshots are immutable and safe to share between
concurrent requests.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Literal

from drivesite.core.errors import MissingMetadataError
from drivesite.core.names import SortValue

NodeType = Literal["branch", "leaf"]


@dataclass(frozen=True)
class Leaf:
    """Single document (or a folder with nothing visible inside)."""

    id: str
    breadcrumb: tuple[str, ...] = ()

    @property
    def node_type(self) -> NodeType:
        return "leaf"


@dataclass(frozen=True)
class Branch:
    """Folder with children addressed by path segment."""

    id: str
    children: Mapping[str, "TreeNode"] = field(default_factory=dict)
    breadcrumb: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    @property
    def node_type(self) -> NodeType:
        return "branch"


TreeNode = Branch | Leaf


@dataclass(frozen=True)
class NodeMeta:
    """Metadata of a store entry, keyed by its id."""

    id: str
    name: str
    pretty_name: str
    slug: str
    sort: SortValue
    mime_type: str
    web_view_link: str = ""
    created_time: datetime | None = None
    modified_time: datetime | None = None
    last_modifying_user: str = ""
    created_by: str = ""

    @property
    def is_folder(self) -> bool:
        """Whether the entry is a folder according to its mime type."""
        return self.mime_type.rsplit(".", 1)[-1] == "folder"


class TreeSnapshot:
    """Immutable view of the hierarchy and its metadata.

    Produced by a tree provider once per request and read by the resolver
    and navigation builder for the duration of that request.
    """

    __slots__ = ("_metadata", "_root")

    def __init__(self, root: Branch, metadata: Mapping[str, NodeMeta]) -> None:
        self._root = root
        self._metadata = MappingProxyType(dict(metadata))

    @property
    def root(self) -> Branch:
        """Root folder of the site."""
        return self._root

    @property
    def metadata(self) -> Mapping[str, NodeMeta]:
        """Metadata entries keyed by node id."""
        return self._metadata

    def get_meta(self, node_id: str) -> NodeMeta:
        """Get metadata for a node.

        Args:
            node_id: Store identifier of the node

        Returns:
            NodeMeta for the id

        Raises:
            MissingMetadataError: If the snapshot has no entry for the id
        """
        try:
            return self._metadata[node_id]
        except KeyError:
            raise MissingMetadataError(node_id) from None
