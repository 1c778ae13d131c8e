"""Drivesite - serve a Drive-like document tree as a navigable website."""

__version__ = "0.1.0"
