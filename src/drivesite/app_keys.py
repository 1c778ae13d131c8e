"""Application keys for type-safe app configuration access."""

from aiohttp import web

from drivesite.core.documents import DocumentStore
from drivesite.core.provider import TreeLoader
from drivesite.live.reload import LiveReloadManager

tree_loader_key = web.AppKey("tree_loader", TreeLoader)
documents_key = web.AppKey("documents", DocumentStore)
layouts_key = web.AppKey("layouts", frozenset)
live_reload_key = web.AppKey("live_reload", LiveReloadManager)
