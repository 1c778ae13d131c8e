"""Display name, slug and sort helpers for store entry names.

Store names carry authoring conventions that never reach the rendered
site: a leading numeric prefix sets the position among siblings
("01 - Setup") and a trailing pipe qualifier marks a folder's index
document ("Guides | index").
"""

import re

from slugify import slugify

INDEX_SLUG = "index"

_SORT_PREFIX_RE = re.compile(r"^(\d+)\s*[-–—_]+\s*")
_QUALIFIER_RE = re.compile(r"\s*\|\s*([^|]*)$")
_INDEX_ALIASES = frozenset({"index", "home"})

SortValue = int | str


def clean_name(raw: str) -> str:
    """Strip sort prefix and trailing qualifier from a store name.

    Args:
        raw: Name as stored (e.g., "02 - Setup | index")

    Returns:
        Human-readable name (e.g., "Setup")
    """
    name = raw.strip()
    name = _SORT_PREFIX_RE.sub("", name, count=1)
    name = _QUALIFIER_RE.sub("", name, count=1)
    return name.strip()


def sort_value(raw: str) -> SortValue:
    """Return the ordering value encoded in a store name.

    Names with a numeric prefix sort by that number, everything else by
    its cleaned name.
    """
    match = _SORT_PREFIX_RE.match(raw.strip())
    if match:
        return int(match.group(1))
    return clean_name(raw)


def sort_key(value: SortValue) -> tuple[int, int | str]:
    """Total order over sort values: numbers first, then names."""
    if isinstance(value, int):
        return (0, value)
    return (1, value.casefold())


def is_index_name(raw: str) -> bool:
    """Check whether a store name marks a folder's index document."""
    name = raw.strip()
    qualifier = _QUALIFIER_RE.search(name)
    if qualifier and qualifier.group(1).strip().lower() in _INDEX_ALIASES:
        return True
    return clean_name(name).lower() in _INDEX_ALIASES


def slugify_name(raw: str) -> str:
    """Build the URL segment for a store name."""
    if is_index_name(raw):
        return INDEX_SLUG
    return slugify(clean_name(raw))
