"""Main Typer application — imports and registers all CLI commands.

Entry point: ``assetforge`` (configured via pyproject.toml scripts).

Commands: build, load, check, verify, clean, transforms.
"""

from __future__ import annotations

import typer

from assetforge.cli.commands.build import build_cmd
from assetforge.cli.commands.check import check_cmd
from assetforge.cli.commands.clean import clean_cmd
from assetforge.cli.commands.load import load_cmd
from assetforge.cli.commands.verify import verify_cmd
from assetforge.cli.common import configure_logging
from assetforge.config import settings

app = typer.Typer(
    name="assetforge",
    help="assetforge: precomputed, multi-encoding static asset cache.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to ASSETFORGE_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(log_level or settings.log_level)


# Register subcommands
app.command(name="build", help="Build the asset cache if it is stale.")(build_cmd)
app.command(name="load", help="Load the cache the way a server does at startup.")(load_cmd)
app.command(name="check", help="Report whether the manifest is fresh.")(check_cmd)
app.command(name="verify", help="Verify every stored encoding round-trips.")(verify_cmd)
app.command(name="clean", help="Remove the manifest.")(clean_cmd)


@app.command(name="transforms", help="List transform slots and their backends.")
def transforms_cmd() -> None:
    """Show which minifiers and encoders are available."""
    from rich.console import Console
    from rich.table import Table

    from assetforge.core.transforms import SLOT_PACKAGES, TransformRegistry

    console = Console()
    registry = TransformRegistry.detect(
        gzip_level=settings.gzip_level,
        brotli_quality=settings.brotli_quality,
        brotli_lgwin=settings.brotli_lgwin,
    )

    table = Table(title="Transforms")
    table.add_column("Slot", style="cyan")
    table.add_column("Backend")
    table.add_column("Package", style="dim")
    table.add_column("Available", justify="center")

    for slot, backend in registry.describe().items():
        available = "[green]Yes[/green]" if backend else "[yellow]No[/yellow]"
        table.add_row(slot, backend or "-", SLOT_PACKAGES.get(slot) or "-", available)

    console.print(table)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
