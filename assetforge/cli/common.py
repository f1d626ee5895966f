"""Shared CLI helpers: store construction, error mapping and tables."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from assetforge.config import AssetSettings
from assetforge.core.cache_store import CacheStore
from assetforge.core.errors import AssetCacheError
from assetforge.models.artifacts import ArtifactCollection

T = TypeVar("T")

console = Console()


def configure_logging(level: str) -> None:
    """Route library logging through Rich at *level*."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False)],
        force=True,
    )


def make_store(root: Path | None = None, cache: Path | None = None, **overrides: Any) -> CacheStore:
    """Build a ``CacheStore`` from environment settings plus CLI overrides."""
    values: dict[str, Any] = dict(overrides)
    if root is not None:
        values["root"] = root
    if cache is not None:
        values["cache_path"] = cache
    return CacheStore(settings=AssetSettings(**values))


def run(coro: Coroutine[Any, Any, T], failure: str = "Build failed") -> T:
    """Run *coro*; map cache errors to a red *failure* message and exit code 1."""
    try:
        return asyncio.run(coro)
    except AssetCacheError as exc:
        console.print(f"[bold red]{failure}:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc


def _size(n: int | None) -> str:
    if n is None:
        return "[dim]-[/dim]"
    return f"{n:,}"


def collection_table(collection: ArtifactCollection, title: str = "Asset Cache") -> Table:
    """Render one row per artifact with its sizes and etag."""
    table = Table(title=title)
    table.add_column("Category", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Mime")
    table.add_column("Bytes", justify="right")
    table.add_column("Gzip", justify="right")
    table.add_column("Brotli", justify="right")
    table.add_column("Etag", style="dim")

    for category, name, artifact in collection.iter_artifacts():
        table.add_row(
            category.value,
            name,
            artifact.mime,
            _size(artifact.size),
            _size(len(artifact.gzip) if artifact.gzip is not None else None),
            _size(len(artifact.brotli) if artifact.brotli is not None else None),
            artifact.etag,
        )
    return table
