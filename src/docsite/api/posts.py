"""Posts API endpoints.

Serves blog content documents as structured data: front-matter metadata
plus the unrendered body.
"""

import json
from email.utils import formatdate
from hashlib import md5

from aiohttp import web

from docsite.app_keys import content_key
from docsite.core.content import ContentDocument


def create_posts_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/posts", list_posts),
        web.get("/api/posts/{slug}", get_post),
    ]


async def list_posts(request: web.Request) -> web.Response:
    library = request.app[content_key]

    category = request.query.get("category") or None
    featured_raw = request.query.get("featured")
    featured: bool | None = None
    if featured_raw is not None:
        if featured_raw.lower() not in ("true", "false", "1", "0"):
            return web.json_response(
                {"error": "featured must be a boolean", "value": featured_raw},
                status=400,
            )
        featured = featured_raw.lower() in ("true", "1")

    documents = library.list_documents(category=category, featured=featured)
    return web.json_response({"items": [_summary(doc) for doc in documents]})


async def get_post(request: web.Request) -> web.Response:
    slug = request.match_info["slug"]
    library = request.app[content_key]

    document = library.get(slug)
    if document is None:
        return web.json_response(
            {"error": "Post not found", "slug": slug},
            status=404,
        )

    headers = {"Cache-Control": "private, max-age=60"}
    if document.source_path is not None:
        try:
            source_mtime = document.source_path.stat().st_mtime
        except OSError:
            # Index is stale: the file went away before the watcher noticed
            library.invalidate()
            return web.json_response(
                {"error": "Post not found", "slug": slug},
                status=404,
            )
        headers["Last-Modified"] = formatdate(source_mtime, usegmt=True)

    payload = {"meta": _summary(document), "content": document.body}
    etag = _compute_etag(payload)

    if_none_match = request.headers.get("If-None-Match")
    if if_none_match == etag:
        return web.Response(status=304)

    headers["ETag"] = etag
    return web.json_response(payload, headers=headers)


def _summary(document: ContentDocument) -> dict[str, object]:
    return {"slug": document.slug, "path": document.path, **document.metadata.to_dict()}


def _compute_etag(payload: dict[str, object]) -> str:
    # Covers both meta and content
    # First 16 hex chars (64 bits) are enough for cache validation
    content = json.dumps(payload, sort_keys=True)
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
