"""Navigation API endpoint.

Provides the full site outline for navigation menus.
"""

import logging

from aiohttp import web

from drivesite.app_keys import tree_loader_key
from drivesite.core.errors import DrivesiteError
from drivesite.core.navigation import build_nav_tree

logger = logging.getLogger(__name__)


def create_navigation_routes() -> list[web.RouteDef]:
    return [web.get("/api/navigation", get_navigation)]


async def get_navigation(request: web.Request) -> web.Response:
    loader = request.app[tree_loader_key]
    try:
        snapshot = loader.load()
        nav_items = build_nav_tree(snapshot)
    except DrivesiteError as e:
        logger.error(f"Failed to build navigation: {e}")
        return web.json_response({"error": str(e)}, status=500)

    return web.json_response({"items": [item.to_dict() for item in nav_items]})
