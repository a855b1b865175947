"""CLI interface for Docsite.

Command-line tool for serving the site and inspecting its redirects and content.
"""

import logging
import sys
from pathlib import Path

import click

from docsite.config import Config
from docsite.core.content import ContentLibrary
from docsite.core.errors import UnmappedRouteError
from docsite.core.redirects import RedirectTable

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docsite.toml)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Docsite - documentation website server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
def redirects() -> None:
    """Redirect table commands."""


@click.group()
def posts() -> None:
    """Blog content commands."""


cli.add_command(redirects)
cli.add_command(posts)


@cli.command()
@config_option
@click.option(
    "--content-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Blog content directory (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    content_dir: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
) -> None:
    """Start the site server."""
    from docsite.server import run_server

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        content_dir=content_dir,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Content directory: {config.content.source_dir}")
    click.echo(f"Redirects: {len(config.build_redirect_table())}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


@redirects.command("list")
@config_option
def list_redirects(config_path: Path | None) -> None:
    """List configured redirects."""
    table = _load_redirect_table(config_path)
    if not len(table):
        click.echo("No redirects configured.")
        return

    for rule in table:
        click.echo(f"{rule.source} -> {rule.target} ({rule.status.http_status} {rule.status.value})")


@redirects.command("resolve")
@click.argument("path")
@config_option
def resolve_redirect(path: str, config_path: Path | None) -> None:
    """Resolve PATH against the redirect table."""
    table = _load_redirect_table(config_path)
    try:
        signal = table.resolve(path)
    except UnmappedRouteError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"HTTP {signal.http_status}")
    click.echo(f"Location: {signal.location}")


@posts.command("list")
@config_option
@click.option("--category", default=None, help="Only list posts in this category")
@click.option(
    "--featured/--not-featured",
    default=None,
    help="Only list featured (or non-featured) posts",
)
def list_posts(
    config_path: Path | None,
    category: str | None,
    featured: bool | None,
) -> None:
    """List blog posts, newest first."""
    config = _load_config(config_path)
    library = ContentLibrary(config.content.source_dir, config.content.url_prefix)

    documents = library.list_documents(category=category, featured=featured)
    if not documents:
        click.echo("No posts found.")
        return

    for doc in documents:
        published = doc.metadata.date.isoformat() if doc.metadata.date else "undated"
        marker = click.style(" *", fg="yellow") if doc.metadata.featured else ""
        click.echo(f"{published}  {doc.path}  {doc.metadata.title}{marker}")


def _load_config(config_path: Path | None) -> Config:
    """Load configuration or exit with error.

    Raises:
        SystemExit: If configuration is missing or invalid
    """
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _load_redirect_table(config_path: Path | None) -> RedirectTable:
    return _load_config(config_path).build_redirect_table()


if __name__ == "__main__":
    cli()
