"""``assetforge build`` — freshness-gated rebuild of the asset cache.

Rebuilds and atomically replaces the manifest when any declared source is
newer than it; otherwise the existing manifest is validated and kept.
"""

from __future__ import annotations

from pathlib import Path

import typer

from assetforge.cli.common import collection_table, console, make_store, run


def build_cmd(
    root: Path = typer.Option(
        None,
        "--root",
        "-r",
        help="Source root directory (defaults to ASSETFORGE_ROOT or '.').",
    ),
    cache: Path = typer.Option(
        None,
        "--cache",
        "-c",
        help="Manifest path (defaults to dist/cache.json under the root).",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Discard the existing manifest and rebuild unconditionally.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Do not print the artifact table.",
    ),
) -> None:
    """Build the asset cache if it is stale."""
    store = make_store(root, cache)
    if force:
        store.clear()

    collection = run(store.build())

    if not quiet:
        console.print(collection_table(collection))
    if collection.skipped_transforms:
        console.print(
            "[yellow]Built without optional transforms:[/yellow] "
            + ", ".join(collection.skipped_transforms)
        )
    console.print(
        f"[bold green]Cache ready:[/bold green] {store.cache_path} "
        f"({collection.artifact_count} artifacts, {collection.total_bytes():,} bytes)"
    )
