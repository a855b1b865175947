"""aiohttp server for Docsite.

Application factory and route registration.
"""

import logging
from pathlib import Path

from aiohttp import web

from docsite.api.config import create_config_routes
from docsite.api.posts import create_posts_routes
from docsite.api.redirects import create_redirect_routes, create_redirects_api_routes
from docsite.app_keys import content_key, live_reload_enabled_key, redirects_key
from docsite.assets import get_static_dir
from docsite.config import Config
from docsite.core.content import ContentLibrary
from docsite.core.redirects import RedirectTable
from docsite.live import LiveReloadManager
from docsite.live.reload import create_live_reload_routes

logger = logging.getLogger(__name__)

live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)
static_dir_key = web.AppKey("static_dir", Path)


async def spa_fallback(request: web.Request) -> web.FileResponse:
    """Serve index.html for SPA client-side routing.

    All non-API, non-redirect routes fall back to index.html.
    """
    static_dir = request.app[static_dir_key]
    return web.FileResponse(static_dir / "index.html")


def create_app(
    config: Config,
    *,
    redirects: RedirectTable | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        redirects: Redirect table to serve (default: built from config)

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    table = redirects if redirects is not None else config.build_redirect_table()
    library = ContentLibrary(config.content.source_dir, config.content.url_prefix)

    app[redirects_key] = table
    app[content_key] = library
    app[live_reload_enabled_key] = config.live_reload.enabled

    # Redirect and API routes must be registered before the SPA fallback
    app.router.add_routes(create_redirect_routes(table))
    app.router.add_routes(create_redirects_api_routes())
    app.router.add_routes(create_posts_routes())
    app.router.add_routes(create_config_routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(library, watch_patterns=config.live_reload.watch_patterns)
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    static_dir = get_static_dir()
    app[static_dir_key] = static_dir

    assets_dir = static_dir / "assets"
    if assets_dir.exists():
        app.router.add_static("/assets", assets_dir)

    app.router.add_get("/favicon.png", _serve_favicon)

    # SPA fallback - must be last to catch all remaining routes
    app.router.add_get("/{path:.*}", spa_fallback)

    logger.debug("Registered %d redirect rule(s)", len(table))
    return app


async def _start_live_reload(app: web.Application) -> None:
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    await app[live_reload_manager_key].stop()


async def _serve_favicon(request: web.Request) -> web.FileResponse:
    """Serve favicon from static directory."""
    favicon_path = request.app[static_dir_key] / "favicon.png"
    if not favicon_path.exists():
        raise web.HTTPNotFound()
    return web.FileResponse(favicon_path)


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
