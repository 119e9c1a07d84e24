"""Command-line interface for podfeed."""

import json
import logging
import sys
from pathlib import Path
from wsgiref.simple_server import make_server

import click
from rich.console import Console
from rich.logging import RichHandler

from podfeed import __version__
from podfeed.api import create_app
from podfeed.core.config import Config, load_config
from podfeed.core.errors import ConfigError, PodfeedError
from podfeed.output import display_import
from podfeed.services.rss import import_feed

console = Console()
error_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="podfeed")
@click.option(
    "--config", "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to a TOML configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Podfeed - import podcast RSS feeds into normalized records."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _configure_logging("DEBUG" if verbose else config.logging.level)
    ctx.obj = config


@main.command("import")
@click.argument("rss_url")
@click.option("--json", "as_json", is_flag=True, help="Print the JSON response body")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Request timeout in seconds (default from config)",
)
@click.pass_obj
def import_command(config: Config, rss_url: str, as_json: bool, timeout: float | None) -> None:
    """Import a podcast feed and show its podcast and episodes.

    Example: podfeed import https://example.com/feed.xml
    """
    if timeout is not None:
        config.fetch.timeout = timeout

    try:
        result = import_feed(rss_url, config=config.fetch)
    except PodfeedError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}))
        else:
            click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_json(), indent=2))
    else:
        display_import(result, console)


@main.command()
@click.option("--host", default=None, help="Interface to bind (default from config)")
@click.option("--port", type=int, default=None, help="Port to listen on (default from config)")
@click.pass_obj
def serve(config: Config, host: str | None, port: int | None) -> None:
    """Serve the import endpoint over HTTP.

    POST {"rssUrl": "..."} to any path to run an import.
    """
    host = host or config.server.host
    port = port or config.server.port

    with make_server(host, port, create_app(config)) as server:
        click.echo(f"Serving podfeed on http://{host}:{port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            click.echo("\nShutting down", err=True)


if __name__ == "__main__":
    main()
