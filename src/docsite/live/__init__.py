"""Live reload functionality for development mode."""

from docsite.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
