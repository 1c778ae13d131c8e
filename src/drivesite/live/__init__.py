"""Live reload support."""

from drivesite.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
