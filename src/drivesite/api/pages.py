"""Page endpoint.

Resolves any site URL against the current tree snapshot and returns the
page context: document content, metadata and navigation links.
"""

import json
import logging
from datetime import datetime
from hashlib import md5

from aiohttp import web

from drivesite.app_keys import documents_key, layouts_key, tree_loader_key
from drivesite.core.errors import DrivesiteError
from drivesite.core.navigation import build_navigation
from drivesite.core.resolver import index_redirect, resolve, split_path
from drivesite.core.tree import Branch

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "default"


def create_pages_routes() -> list[web.RouteDef]:
    # Catch-all, must be registered last
    return [web.get("/{path:.*}", get_page)]


async def get_page(request: web.Request) -> web.Response:
    path = request.path
    logger.info(f"GET {path}")

    # index documents are only served through their folder url
    target = index_redirect(path)
    if target is not None:
        raise web.HTTPMovedPermanently(location=target)

    try:
        return _render_page(request, path)
    except DrivesiteError as e:
        logger.error(f"Failed to render {path}: {e}")
        return web.Response(status=500, text=str(e))


def _render_page(request: web.Request, path: str) -> web.Response:
    snapshot = request.app[tree_loader_key].load()

    node, parent = resolve(path, snapshot.root)
    if node is None:
        return web.Response(status=404, text="Not found.")

    if isinstance(node, Branch):
        return web.Response(status=404, text="Can't render contents of a folder yet.")

    meta = snapshot.get_meta(node.id)
    if meta.is_folder:
        return web.Response(status=404, text="It looks like this folder is empty...")

    document = request.app[documents_key].fetch(node.id)
    navigation = build_navigation(
        path,
        node.breadcrumb,
        parent,
        meta.slug,
        get_meta=snapshot.get_meta,
    )

    response_data = {
        **navigation.to_dict(),
        "layout": _select_layout(path, request.app[layouts_key]),
        "url": path,
        "title": meta.pretty_name,
        "content": document.html,
        "sections": [section.to_dict() for section in document.sections],
        "editLink": meta.web_view_link,
        "lastUpdated": _isoformat(meta.modified_time),
        "lastUpdatedBy": meta.last_modifying_user,
        "createdAt": _isoformat(meta.created_time),
        "createdBy": meta.created_by,
    }

    etag = _compute_etag(response_data)
    if request.headers.get("If-None-Match") == etag:
        return web.Response(status=304)

    return web.json_response(
        response_data,
        headers={"ETag": etag, "Cache-Control": "private, max-age=60"},
    )


def _select_layout(path: str, layouts: frozenset[str]) -> str:
    """Use the top-level section's layout when one is configured."""
    segments = split_path(path)
    if segments and segments[0] in layouts:
        return segments[0]
    return DEFAULT_LAYOUT


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _compute_etag(data: dict[str, object]) -> str:
    # Use first 16 hex chars (64 bits) - sufficient for cache invalidation
    payload = json.dumps(data, sort_keys=True).encode("utf-8")
    content_hash = md5(payload, usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
