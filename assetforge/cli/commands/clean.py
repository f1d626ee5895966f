"""``assetforge clean`` — remove the manifest."""

from __future__ import annotations

from pathlib import Path

import typer

from assetforge.cli.common import console, make_store


def clean_cmd(
    root: Path = typer.Option(None, "--root", "-r", help="Source root directory."),
    cache: Path = typer.Option(None, "--cache", "-c", help="Manifest path."),
) -> None:
    """Delete the on-disk manifest so the next build starts from scratch."""
    store = make_store(root, cache)
    if store.clear():
        console.print(f"Removed {store.cache_path}")
    else:
        console.print(f"[dim]No manifest at {store.cache_path}[/dim]")
