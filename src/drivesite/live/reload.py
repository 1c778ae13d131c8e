"""WebSocket-based live reload for development mode.

Monitors the listing export and exported document bodies for changes and
notifies connected clients via WebSocket to trigger page reloads.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from drivesite.core.provider import TreeLoader

logger = logging.getLogger(__name__)


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload.

    A listing change invalidates the tree snapshot and reloads every page;
    a document body change reloads pages showing that document.
    """

    def __init__(
        self,
        listing_path: Path,
        content_dir: Path,
        *,
        tree_loader: TreeLoader | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            listing_path: Listing export to watch
            content_dir: Directory of exported document bodies to watch
            tree_loader: TreeLoader whose snapshot cache is invalidated on listing changes
        """
        self._listing_path = listing_path.resolve()
        self._content_dir = content_dir.resolve()
        self._tree_loader = tree_loader
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        """Watch for file changes and broadcast reload events."""
        watched = [p for p in (self._listing_path, self._content_dir) if p.exists()]
        if not watched:
            logger.warning("Live reload: nothing to watch")
            return

        async for changes in awatch(*watched):
            for change_type, path_str in changes:
                event = self.classify_change(change_type, Path(path_str))
                if event is None:
                    continue
                if event.get("id") is None and self._tree_loader is not None:
                    self._tree_loader.invalidate()
                await self._broadcast(event)

    def classify_change(self, change_type: Change, path: Path) -> dict[str, str | None] | None:
        """Turn a filesystem change into a reload event.

        Args:
            change_type: Kind of change reported by the watcher
            path: Changed file

        Returns:
            Reload event, or None when the change is irrelevant
        """
        if path == self._listing_path:
            return {"type": "reload", "id": None}

        if change_type == Change.deleted or path.suffix != ".html":
            return None
        try:
            path.relative_to(self._content_dir)
        except ValueError:
            return None
        return {"type": "reload", "id": path.stem}

    async def _broadcast(self, event: dict[str, str | None]) -> None:
        """Broadcast reload event to all connected clients."""
        if not self._connections:
            return

        message = json.dumps(event)

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket."""
    return [web.get("/ws/live-reload", manager.handle_websocket)]
