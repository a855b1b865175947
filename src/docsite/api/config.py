"""Frontend runtime settings endpoint.

The bundled SPA shell asks for these once on startup to decide whether to
open the live reload WebSocket for blog posts.
"""

from aiohttp import web

from docsite.app_keys import live_reload_enabled_key


def create_config_routes() -> list[web.RouteDef]:
    return [web.get("/api/config", get_frontend_settings)]


async def get_frontend_settings(request: web.Request) -> web.Response:
    """Return settings the frontend needs, in its camelCase naming."""
    return web.json_response(
        {"liveReloadEnabled": request.app[live_reload_enabled_key]},
    )
