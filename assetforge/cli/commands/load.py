"""``assetforge load`` — run the server startup path and show the result."""

from __future__ import annotations

from pathlib import Path

import typer

from assetforge.cli.common import collection_table, console, make_store, run


def load_cmd(
    root: Path = typer.Option(None, "--root", "-r", help="Source root directory."),
    cache: Path = typer.Option(None, "--cache", "-c", help="Manifest path."),
    dev: bool = typer.Option(
        False,
        "--dev",
        "-d",
        help="Compile in memory without minification, compression or persistence.",
    ),
) -> None:
    """Load the asset cache the way a server would at startup."""
    store = make_store(root, cache)
    dev = dev or store.settings.dev
    collection = run(store.load(dev=dev))
    console.print(collection_table(collection, title="Asset Cache (dev)" if dev else "Asset Cache"))
