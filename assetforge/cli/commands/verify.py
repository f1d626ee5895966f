"""``assetforge verify`` — check every stored encoding round-trips."""

from __future__ import annotations

from pathlib import Path

import typer

from assetforge.cli.common import console, make_store, run
from assetforge.core.compression import verify_encodings


def verify_cmd(
    root: Path = typer.Option(None, "--root", "-r", help="Source root directory."),
    cache: Path = typer.Option(None, "--cache", "-c", help="Manifest path."),
) -> None:
    """Decompress every gzip/brotli variant and compare it with its data."""
    store = make_store(root, cache)
    try:
        collection = run(store.read(), failure="Invalid manifest")
    except OSError as exc:
        console.print(f"[bold red]Cannot read manifest:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    mismatches = verify_encodings(collection)
    if mismatches:
        for key in mismatches:
            console.print(f"[red]Encoding mismatch:[/red] {key}")
        raise typer.Exit(code=1)

    if not collection.is_compressed:
        console.print("[yellow]Manifest has artifacts without encodings.[/yellow]")
        raise typer.Exit(code=1)

    console.print(
        f"[bold green]All {collection.artifact_count} artifacts verified.[/bold green]"
    )
