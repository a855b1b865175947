"""Application keys for type-safe app configuration access."""

from aiohttp import web

from docsite.core.content import ContentLibrary
from docsite.core.redirects import RedirectTable

redirects_key = web.AppKey("redirects", RedirectTable)
content_key = web.AppKey("content", ContentLibrary)
live_reload_enabled_key = web.AppKey("live_reload_enabled", bool)
