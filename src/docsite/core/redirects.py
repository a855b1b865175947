"""Static redirect resolution.

Maps statically known source routes to destination routes. The table is
built once from configuration and never mutated afterwards, so resolution
is a pure lookup that is safe to call from any request handler.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from docsite.core.errors import InvalidRedirectError, UnmappedRouteError
from docsite.core.types import URLPath, normalize_url_path

logger = logging.getLogger(__name__)


class RedirectStatus(Enum):
    """Redirect status classification."""

    TEMPORARY = "temporary"
    PERMANENT = "permanent"

    @property
    def http_status(self) -> int:
        """HTTP status code for this classification."""
        return 303 if self is RedirectStatus.TEMPORARY else 301

    @classmethod
    def parse(cls, value: object) -> "RedirectStatus":
        """Parse status from a config value.

        Accepts "temporary"/"permanent" (any case) and the status codes 303/301.

        Raises:
            ValueError: If the value is not a known classification
        """
        if isinstance(value, RedirectStatus):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown redirect status: {value!r}")
        if isinstance(value, int):
            for status in cls:
                if status.http_status == value:
                    return status
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown redirect status: {value!r}")


@dataclass(frozen=True)
class RedirectSignal:
    """Instruction for the hosting pipeline to redirect instead of render."""

    location: URLPath
    status: RedirectStatus

    @property
    def http_status(self) -> int:
        return self.status.http_status

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {
            "location": self.location,
            "status": self.status.value,
            "http_status": self.http_status,
        }


@dataclass(frozen=True)
class RedirectRule:
    """Association between a source route and its destination."""

    source: URLPath
    target: URLPath
    status: RedirectStatus = RedirectStatus.TEMPORARY

    def __post_init__(self) -> None:
        source = _validated_path(self.source, "source")
        target = _validated_path(self.target, "target")
        if source == target:
            raise InvalidRedirectError(f"Redirect target equals its source: {source}")
        # Frozen dataclass: bypass __setattr__ to store normalized values
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "target", target)

    def signal(self) -> RedirectSignal:
        return RedirectSignal(location=self.target, status=self.status)

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "target": self.target,
            "status": self.status.value,
            "http_status": self.status.http_status,
        }


class RedirectTable:
    """Immutable redirect table with O(1) source lookups.

    Rules are validated as a whole on construction: sources are unique and
    following targets that are themselves sources never loops back.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: list[RedirectRule]) -> None:
        """Initialize redirect table.

        Args:
            rules: Redirect rules, at most one per source

        Raises:
            InvalidRedirectError: On duplicate sources or redirect cycles
        """
        index: dict[URLPath, RedirectRule] = {}
        for rule in rules:
            if rule.source in index:
                raise InvalidRedirectError(f"Duplicate redirect source: {rule.source}")
            index[rule.source] = rule
        _check_cycles(index)
        self._rules = index

    def resolve(self, source: str) -> RedirectSignal:
        """Resolve a source route to its redirect signal.

        Args:
            source: Source route (e.g., "/docs/tutorials/nextjs")

        Returns:
            RedirectSignal with destination and status

        Raises:
            UnmappedRouteError: If no rule is defined for the source
        """
        rule = self.get(source)
        if rule is None:
            raise UnmappedRouteError(source)
        return rule.signal()

    def get(self, source: str) -> RedirectRule | None:
        """Get rule by source route, None if unmapped."""
        return self._rules.get(normalize_url_path(source))

    def sources(self) -> list[URLPath]:
        return list(self._rules)

    def __contains__(self, source: object) -> bool:
        return isinstance(source, str) and self.get(source) is not None

    def __iter__(self) -> Iterator[RedirectRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)


class RedirectTableBuilder:
    """Builder for constructing RedirectTable instances."""

    def __init__(self) -> None:
        self._rules: list[RedirectRule] = []

    def add(
        self,
        source: str,
        target: str,
        status: RedirectStatus | str | int = RedirectStatus.TEMPORARY,
    ) -> "RedirectTableBuilder":
        """Add a redirect rule.

        Args:
            source: Source route
            target: Destination route
            status: Status classification or its config representation

        Returns:
            The builder, for chaining

        Raises:
            InvalidRedirectError: If the rule redirects to itself or a path is invalid
        """
        try:
            parsed_status = RedirectStatus.parse(status)
        except ValueError as e:
            raise InvalidRedirectError(str(e)) from e
        self._rules.append(
            RedirectRule(
                source=URLPath(source),
                target=URLPath(target),
                status=parsed_status,
            )
        )
        return self

    def build(self) -> RedirectTable:
        """Build the RedirectTable instance."""
        table = RedirectTable(self._rules)
        logger.debug("Built redirect table with %d rule(s)", len(table))
        return table


NEXTJS_TUTORIAL_ROUTE = "/docs/tutorials/nextjs"
NEXTJS_TUTORIAL_FIRST_STEP = "/docs/tutorials/nextjs/step-1"


def default_redirect_table() -> RedirectTable:
    """Build the redirect table shipped with the site.

    The tutorial landing page forwards to its first step. The step may
    change, so the redirect is temporary.
    """
    return (
        RedirectTableBuilder()
        .add(NEXTJS_TUTORIAL_ROUTE, NEXTJS_TUTORIAL_FIRST_STEP, RedirectStatus.TEMPORARY)
        .build()
    )


def _validated_path(path: str, field_name: str) -> URLPath:
    if not isinstance(path, str) or not path.strip():
        raise InvalidRedirectError(f"Redirect {field_name} must be a non-empty path")
    stripped = path.strip()
    if "{" in stripped or "}" in stripped:
        raise InvalidRedirectError(
            f"Redirect {field_name} must not contain route placeholders: {stripped}"
        )
    if "://" in stripped or stripped.startswith("//"):
        raise InvalidRedirectError(
            f"Redirect {field_name} must be a site-local path: {stripped}"
        )
    return normalize_url_path(stripped)


def _check_cycles(index: dict[URLPath, RedirectRule]) -> None:
    """Reject tables where following redirects loops forever."""
    for start in index:
        seen = {start}
        current = index[start].target
        while current in index:
            if current in seen:
                raise InvalidRedirectError(f"Redirect cycle detected starting at {start}")
            seen.add(current)
            current = index[current].target
