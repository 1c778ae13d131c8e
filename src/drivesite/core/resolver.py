"""URL path resolution against a document tree.

Maps a URL path onto a node of a tree snapshot, applying index-folder
aliasing: a path that ends on a folder resolves to that folder's
``index`` child when it has one.
"""

from typing import NamedTuple

from drivesite.core.names import INDEX_SLUG
from drivesite.core.tree import Branch, TreeNode


class Resolution(NamedTuple):
    """Resolved node and the branch that directly contains it.

    ``node`` is None when the path does not exist in the tree. ``parent``
    is None only when the root itself is the result.
    """

    node: TreeNode | None
    parent: Branch | None

    @property
    def found(self) -> bool:
        return self.node is not None


def split_path(url_path: str) -> list[str]:
    """Split a URL path into its non-empty segments."""
    return [segment for segment in url_path.split("/") if segment]


def index_redirect(url_path: str) -> str | None:
    """Return the redirect target for an explicit index URL.

    Index documents are only reachable through their folder's path, so
    ``/guides/index`` must be redirected to ``/guides``.

    Args:
        url_path: Requested URL path

    Returns:
        Path with the trailing ``index`` segment stripped, or None when the
        path does not end in ``index``
    """
    segments = split_path(url_path)
    if not segments or segments[-1] != INDEX_SLUG:
        return None
    return "/" + "/".join(segments[:-1])


def resolve(url_path: str, tree: Branch) -> Resolution:
    """Resolve a URL path to a node of the tree.

    Only one level of index aliasing is applied: when the ``index`` child
    is itself a folder, that folder is returned as is.

    Args:
        url_path: Slash-delimited path (e.g., "/guides/setup")
        tree: Root of the tree snapshot

    Returns:
        Resolution with the matched node, or with node None when any
        segment is left unmatched
    """
    segments = split_path(url_path)

    pointer: TreeNode | None = tree
    parent: Branch | None = None
    consumed = 0
    while isinstance(pointer, Branch) and consumed < len(segments):
        parent = pointer
        pointer = pointer.children.get(segments[consumed])
        consumed += 1

    if pointer is None or consumed < len(segments):
        return Resolution(None, parent)

    if isinstance(pointer, Branch) and INDEX_SLUG in pointer.children:
        parent = pointer
        pointer = pointer.children[INDEX_SLUG]

    return Resolution(pointer, parent)
