"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/docs/tutorials/nextjs")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)


def normalize_url_path(path: str) -> URLPath:
    """Normalize URL path to have a leading slash and no trailing slash.

    The root path "/" is kept as is.
    """
    stripped = path.strip()
    if not stripped.startswith("/"):
        stripped = f"/{stripped}"
    if len(stripped) > 1:
        stripped = stripped.rstrip("/") or "/"
    return URLPath(stripped)
