"""Command-line interface for querycache."""

import asyncio
import json
import sys
from typing import Any

import click

from querycache import __version__
from querycache.cache.keys import derive_key
from querycache.cache.models import CacheConfig, SerializedQuery
from querycache.cache.store import RedisStore
from querycache.core.config import settings
from querycache.core.exceptions import StoreError
from querycache.observability.logging import get_logger

logger = get_logger(__name__)


def _build_config(url: str | None) -> CacheConfig:
    config = CacheConfig.from_settings()
    if url:
        config = config.model_copy(update={"url": url})
    return config


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return repr(value)
    return json.dumps(value, indent=2, default=str)


@click.group()
def cli() -> None:
    """querycache - read-through Redis cache for query results."""
    pass


@cli.command()
@click.argument("sql")
@click.option(
    "--bindings",
    "-b",
    default="[]",
    help="Query bindings as a JSON array",
    show_default=True,
)
@click.option(
    "--prefix",
    default=settings.cache_key_prefix,
    help="Cache key prefix",
    show_default=True,
)
def key(sql: str, bindings: str, prefix: str) -> None:
    """Print the cache key for a SQL statement and its bindings."""
    try:
        parameters = json.loads(bindings)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--bindings")

    if not isinstance(parameters, list):
        raise click.BadParameter("must be a JSON array", param_hint="--bindings")

    serialized = SerializedQuery(command_text=sql, parameters=parameters)
    click.echo(derive_key(serialized, prefix))


@cli.command()
@click.argument("cache_key")
@click.option("--url", default=None, help="Redis URL (overrides REDIS_URL)")
def get(cache_key: str, url: str | None) -> None:
    """Read and print a cached value."""

    async def read() -> Any:
        store = RedisStore.from_config(_build_config(url))
        try:
            return await store.get(cache_key)
        finally:
            await store.close()

    try:
        value = asyncio.run(read())
    except (StoreError, ValueError) as e:
        logger.error("cli_get_failed", key=cache_key, error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if value is None:
        click.echo(f"No cached value for {cache_key}", err=True)
        sys.exit(1)

    click.echo(_format_value(value))


@cli.command()
@click.option("--url", default=None, help="Redis URL (overrides REDIS_URL)")
def ping(url: str | None) -> None:
    """Check connectivity to the cache store."""

    async def check() -> bool:
        store = RedisStore.from_config(_build_config(url))
        try:
            return await store.ping()
        finally:
            await store.close()

    try:
        ok = asyncio.run(check())
    except (StoreError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("PONG" if ok else "No response")
    if not ok:
        sys.exit(1)


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"querycache v{__version__}")


if __name__ == "__main__":
    cli()
