"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/guides", "/guides/setup")
URLPath = NewType("URLPath", str)
