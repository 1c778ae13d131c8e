"""Navigation builders.

Derives navigation data from a node's position in the tree: parent links
(breadcrumb) and sibling links for a single page, and the full site
outline for the navigation UI.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TypedDict

from drivesite.core.names import INDEX_SLUG, SortValue, clean_name, sort_key
from drivesite.core.resolver import split_path
from drivesite.core.tree import Branch, Leaf, NodeMeta, TreeSnapshot
from drivesite.core.types import URLPath

MetaLookup = Callable[[str], NodeMeta]


@dataclass(frozen=True)
class ParentLink:
    """Link to an ancestor folder."""

    url: URLPath
    name: str
    edit_link: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"url": self.url, "name": self.name, "editLink": self.edit_link}


@dataclass(frozen=True)
class SiblingLink:
    """Link to another child of the same folder."""

    sort: SortValue
    name: str
    edit_link: str
    url: URLPath

    def to_dict(self) -> dict[str, SortValue]:
        """Convert to dictionary for JSON serialization."""
        return {
            "sort": self.sort,
            "name": self.name,
            "editLink": self.edit_link,
            "url": self.url,
        }


@dataclass
class NavigationContext:
    """Request-scoped navigation data for one rendered page."""

    parent_links: list[ParentLink] = field(default_factory=list)
    siblings: list[SiblingLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, SortValue]]]:
        """Convert to dictionary for JSON serialization."""
        return {
            "parentLinks": [link.to_dict() for link in self.parent_links],
            "siblings": [link.to_dict() for link in self.siblings],
        }


def build_navigation(
    url: str,
    breadcrumb: Sequence[str],
    parent: Branch | None,
    slug: str,
    *,
    get_meta: MetaLookup,
    clean: Callable[[str], str] = clean_name,
) -> NavigationContext:
    """Build parent and sibling links for a resolved node.

    Args:
        url: URL path the node was resolved from
        breadcrumb: Ancestor ids, root-first, excluding the node
        parent: Branch directly containing the node (None for the root)
        slug: Slug of the resolved node
        get_meta: Metadata lookup by node id
        clean: Display name transform for ancestor names

    Returns:
        NavigationContext with parent links and sorted siblings
    """
    if parent is None:
        return NavigationContext()

    segments = split_path(url)

    # one link per breadcrumb entry, paired with the url prefix of equal depth
    parent_links: list[ParentLink] = []
    for depth, node_id in zip(range(1, len(segments) + 1), breadcrumb):
        meta = get_meta(node_id)
        parent_links.append(
            ParentLink(
                url=URLPath("/" + "/".join(segments[:depth])),
                name=clean(meta.name),
                edit_link=meta.web_view_link,
            )
        )

    # on an index page siblings live under the current url
    base_segments = segments if slug == INDEX_SLUG else segments[:-1]
    base_url = "/" + "/".join(base_segments) if base_segments else ""

    siblings: list[SiblingLink] = []
    for key, child in parent.children.items():
        if key == slug or key == INDEX_SLUG:
            continue
        meta = get_meta(child.id)
        siblings.append(
            SiblingLink(
                sort=meta.sort,
                name=meta.pretty_name,
                edit_link=meta.web_view_link,
                url=URLPath(f"{base_url}/{key}"),
            )
        )
    siblings.sort(key=lambda link: sort_key(link.sort))

    return NavigationContext(parent_links=parent_links, siblings=siblings)


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    title: str
    path: str
    children: list["NavItemDict"]


@dataclass
class NavItem:
    """Navigation item with children for UI tree."""

    title: str
    path: URLPath
    children: list["NavItem"] = field(default_factory=list)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {"title": self.title, "path": self.path}
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def build_nav_tree(snapshot: TreeSnapshot) -> list[NavItem]:
    """Build the site outline from a snapshot.

    Index documents are folded into their folder's item and empty folders
    are left out.

    Args:
        snapshot: Tree snapshot to build navigation from

    Returns:
        List of NavItem trees for navigation UI
    """
    return _build_nav_items(snapshot, snapshot.root, "")


def _build_nav_items(snapshot: TreeSnapshot, branch: Branch, base_url: str) -> list[NavItem]:
    """Recursively build sorted NavItems for a branch's children."""
    entries: list[tuple[NodeMeta, NavItem]] = []
    for key, child in branch.children.items():
        if key == INDEX_SLUG:
            continue
        meta = snapshot.get_meta(child.id)
        if isinstance(child, Leaf) and meta.is_folder:
            continue
        path = URLPath(f"{base_url}/{key}")
        children = _build_nav_items(snapshot, child, path) if isinstance(child, Branch) else []
        entries.append((meta, NavItem(title=meta.pretty_name, path=path, children=children)))

    entries.sort(key=lambda entry: sort_key(entry[0].sort))
    return [item for _, item in entries]
