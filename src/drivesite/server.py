"""aiohttp server for Drivesite.

Application factory and route registration.
"""

from aiohttp import web

from drivesite.api.health import create_health_routes
from drivesite.api.navigation import create_navigation_routes
from drivesite.api.pages import create_pages_routes
from drivesite.app_keys import documents_key, layouts_key, live_reload_key, tree_loader_key
from drivesite.config import Config
from drivesite.core.documents import DocumentStore
from drivesite.core.provider import TreeLoader
from drivesite.live.reload import LiveReloadManager, create_live_reload_routes


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    tree_loader = TreeLoader(config.store.listing, root_id=config.store.root_id)
    documents = DocumentStore(config.store.content_dir)

    app[tree_loader_key] = tree_loader
    app[documents_key] = documents
    app[layouts_key] = frozenset(config.site.layouts)

    app.router.add_routes(create_health_routes())
    app.router.add_routes(create_navigation_routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.store.listing,
            config.store.content_dir,
            tree_loader=tree_loader,
        )
        app[live_reload_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    # Page catch-all - must be last
    app.router.add_routes(create_pages_routes())

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
