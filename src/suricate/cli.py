"""Command-line interface for Suricate.

Provides quick checks against the configured App Services application.
Connection settings come from ``SURICATE_*`` environment variables or a
.env file.
"""

import asyncio
from typing import NoReturn

import click
import httpx
from bson import json_util

from suricate import __version__
from suricate.client import Suricate
from suricate.core.config import Settings, get_settings
from suricate.core.exceptions import SuricateError
from suricate.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="suricate")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides environment)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Suricate - timestamped, validated MongoDB collections over App Services."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.obj = settings


@cli.command()
@click.pass_obj
def ping(settings: Settings) -> None:
    """Authenticate and report whether the database is reachable."""

    async def run() -> None:
        async with Suricate(settings=settings) as client:
            await client.connect()
            database = client.get_database()
            click.echo(f"Connected to database '{database.name}' (app {settings.app_id}).")

    _run(run())


@cli.command()
@click.argument("collection")
@click.option(
    "--filter",
    "filter_json",
    default="{}",
    show_default=True,
    help="Query filter as MongoDB Extended JSON",
)
@click.pass_obj
def count(settings: Settings, collection: str, filter_json: str) -> None:
    """Print the number of documents in COLLECTION matching --filter."""
    try:
        query = json_util.loads(filter_json)
    except ValueError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--filter") from e
    if not isinstance(query, dict):
        raise click.BadParameter("Filter must be a JSON object", param_hint="--filter")

    async def run() -> None:
        async with Suricate(settings=settings) as client:
            await client.connect()
            total = await client.scheme(collection).count(query)
            click.echo(str(total))

    _run(run())


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except SuricateError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)
    except httpx.HTTPError as e:
        click.echo(f"Error: Request failed: {e}", err=True)
        raise SystemExit(1)


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `suricate` console script and `python -m suricate`.
    """
    cli()


if __name__ == "__main__":
    main()
