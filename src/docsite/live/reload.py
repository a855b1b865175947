"""WebSocket-based live reload for development mode.

Monitors content documents for changes and notifies connected clients
via WebSocket to trigger page reloads.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from docsite.core.content import ContentLibrary

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["*.md", "*.markdoc"]


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload.

    Coordinates between file system watcher and connected WebSocket clients
    to provide automatic page refresh on content changes.
    """

    def __init__(
        self,
        library: ContentLibrary,
        watch_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            library: Content library to watch and invalidate
            watch_patterns: Glob patterns to watch, relative to the content directory
        """
        self._library = library
        self._source_dir = library.source_dir
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        if not self._source_dir.is_dir():
            logger.warning("Live reload disabled, content directory missing: %s", self._source_dir)
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
        async for changes in awatch(self._source_dir):
            await self.handle_changes(changes)

    async def handle_changes(self, changes: set[tuple[Change, str]]) -> None:
        """Invalidate content and notify clients for matching changes.

        Args:
            changes: Change set as reported by watchfiles
        """
        paths: set[str] = set()
        for change_type, path_str in changes:
            path = Path(path_str)
            if not self._matches_patterns(path):
                continue
            paths.add(self._to_url_path(path, deleted=change_type == Change.deleted))

        if not paths:
            return

        self._library.invalidate()
        for url_path in sorted(paths):
            logger.info("Content changed: %s", url_path)
            await self._broadcast_reload(url_path)

    def _matches_patterns(self, path: Path) -> bool:
        try:
            relative = path.relative_to(self._source_dir)
        except ValueError:
            return False

        for pattern in self._watch_patterns:
            if relative.match(pattern):
                return True
        return False

    def _to_url_path(self, file_path: Path, *, deleted: bool = False) -> str:
        """Convert a content file path to the URL it is served under.

        Args:
            file_path: Absolute file path
            deleted: Whether the file was removed (reload the listing instead)

        Returns:
            URL path (e.g., "/blog/caching-at-the-edge")
        """
        prefix = self._library.url_prefix.rstrip("/")
        slug = self._library.slug_for(file_path)
        if deleted or slug is None:
            return prefix or "/"
        return f"{prefix}/{slug}"

    async def _broadcast_reload(self, path: str) -> None:
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "path": path})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket.

    Args:
        manager: LiveReloadManager instance

    Returns:
        List of route definitions
    """
    return [web.get("/ws/live-reload", manager.handle_websocket)]
