"""Domain exceptions."""


class DocsiteError(Exception):
    """Base class for docsite domain errors."""


class InvalidRedirectError(DocsiteError):
    """Redirect rule or table violates its invariants."""


class UnmappedRouteError(DocsiteError):
    """No redirect rule is defined for the requested source route."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No redirect defined for route: {path}")
        self.path = path


class ContentError(DocsiteError):
    """Content document could not be parsed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
