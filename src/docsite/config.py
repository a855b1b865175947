"""Configuration management for Docsite.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from docsite.core.errors import InvalidRedirectError
from docsite.core.redirects import (
    RedirectStatus,
    RedirectTable,
    RedirectTableBuilder,
    default_redirect_table,
)

CONFIG_FILENAME = "docsite.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Blog content configuration."""

    source_dir: Path = field(default_factory=lambda: Path("content"))
    url_prefix: str = "/blog"


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass(frozen=True)
class RedirectConfig:
    """Single redirect rule as written in configuration."""

    source: str
    target: str
    status: RedirectStatus = RedirectStatus.TEMPORARY


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    live_reload: LiveReloadConfig
    redirects: list[RedirectConfig] | None = None
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for docsite.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    def build_redirect_table(self) -> RedirectTable:
        """Build the redirect table for this configuration.

        Uses the shipped default table when no redirects are configured.

        Raises:
            ValueError: If the configured rules violate redirect invariants
        """
        if self.redirects is None:
            return default_redirect_table()

        builder = RedirectTableBuilder()
        try:
            for rule in self.redirects:
                builder.add(rule.source, rule.target, rule.status)
            return builder.build()
        except InvalidRedirectError as e:
            raise ValueError(f"Invalid redirects configuration: {e}") from e

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            content=ContentConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        config = cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            redirects=cls._parse_redirects(data.get("redirects")),
            config_path=path,
        )
        # Fail at load time rather than on first request
        config.build_redirect_table()
        return config

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(source_dir=config_dir / "content")

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        source_dir = data.get("source_dir", "content")
        if not isinstance(source_dir, str):
            raise ValueError("content.source_dir must be a string")

        url_prefix = data.get("url_prefix", "/blog")
        if not isinstance(url_prefix, str) or not url_prefix.startswith("/"):
            raise ValueError("content.url_prefix must be a string starting with '/'")

        return ContentConfig(source_dir=config_dir / source_dir, url_prefix=url_prefix)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        watch_patterns: list[str] | None = None
        if watch_patterns_raw is not None:
            if not isinstance(watch_patterns_raw, list):
                raise ValueError("live_reload.watch_patterns must be a list")
            watch_patterns = []
            for item in watch_patterns_raw:
                if not isinstance(item, str):
                    raise ValueError("live_reload.watch_patterns items must be strings")
                watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    @classmethod
    def _parse_redirects(cls, data: object) -> list[RedirectConfig] | None:
        """Parse [[redirects]] array of tables.

        Args:
            data: Raw redirects data

        Returns:
            List of RedirectConfig, or None if the key is absent
        """
        if data is None:
            return None

        if not isinstance(data, list):
            raise ValueError("redirects must be an array of tables")

        redirects: list[RedirectConfig] = []
        for item in data:
            if not isinstance(item, dict):
                raise ValueError("redirects items must be tables")

            source = item.get("source")
            if not isinstance(source, str):
                raise ValueError("redirects.source must be a string")

            target = item.get("target")
            if not isinstance(target, str):
                raise ValueError("redirects.target must be a string")

            try:
                status = RedirectStatus.parse(item.get("status", "temporary"))
            except ValueError as e:
                raise ValueError(
                    "redirects.status must be 'temporary', 'permanent', 303 or 301"
                ) from e

            redirects.append(RedirectConfig(source=source, target=target, status=status))

        return redirects

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        content_dir: Path | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            content_dir: Override content.source_dir
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if content_dir is not None:
            content = replace(self.content, source_dir=content_dir)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(self, server=server, content=content, live_reload=live_reload)
