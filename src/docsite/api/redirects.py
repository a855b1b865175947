"""Redirect routes.

Registers a page-load handler for every redirect source and exposes the
redirect table as JSON.
"""

import logging

from aiohttp import web

from docsite.app_keys import redirects_key
from docsite.core.errors import UnmappedRouteError
from docsite.core.redirects import RedirectSignal, RedirectStatus, RedirectTable

logger = logging.getLogger(__name__)


def create_redirect_routes(table: RedirectTable) -> list[web.RouteDef]:
    """Create page-load routes for every rule in the table.

    Args:
        table: Redirect table to serve

    Returns:
        List of route definitions, including trailing-slash variants
    """
    routes: list[web.RouteDef] = []
    for source in table.sources():
        routes.append(web.get(source, load_redirect))
        if source != "/":
            routes.append(web.get(f"{source}/", load_redirect))
    return routes


def create_redirects_api_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/redirects", list_redirects),
        web.get("/api/redirects/{path:.*}", get_redirect),
    ]


async def load_redirect(request: web.Request) -> web.StreamResponse:
    """Page-load handler: redirect instead of rendering the page."""
    table = request.app[redirects_key]
    try:
        signal = table.resolve(request.path)
    except UnmappedRouteError as e:
        logger.warning("Redirect route registered without a rule: %s", e.path)
        raise web.HTTPNotFound() from e

    logger.debug("Redirecting %s -> %s (%d)", request.path, signal.location, signal.http_status)
    raise signal_to_http(signal)


def signal_to_http(signal: RedirectSignal) -> web.HTTPRedirection:
    """Convert a redirect signal to the matching aiohttp redirect exception."""
    if signal.status is RedirectStatus.PERMANENT:
        return web.HTTPMovedPermanently(location=signal.location)
    return web.HTTPSeeOther(location=signal.location)


async def list_redirects(request: web.Request) -> web.Response:
    table = request.app[redirects_key]
    return web.json_response({"items": [rule.to_dict() for rule in table]})


async def get_redirect(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    table = request.app[redirects_key]

    try:
        signal = table.resolve(path)
    except UnmappedRouteError:
        return web.json_response(
            {"error": "Route not mapped", "path": path},
            status=404,
        )

    return web.json_response(signal.to_dict())
