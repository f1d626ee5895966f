"""``assetforge check`` — report whether the manifest is fresh.

Exits with code 1 when the cache is stale or missing, so it can gate a
build step in scripts.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer
from rich.panel import Panel

from assetforge.cli.common import console, make_store, run


def _fmt_ns(ns: int | None) -> str:
    if not ns:
        return "-"
    return datetime.fromtimestamp(ns / 1e9).isoformat(sep=" ", timespec="seconds")


def check_cmd(
    root: Path = typer.Option(None, "--root", "-r", help="Source root directory."),
    cache: Path = typer.Option(None, "--cache", "-c", help="Manifest path."),
) -> None:
    """Check the manifest against every declared source input."""
    store = make_store(root, cache)
    report = run(store.check())

    status = "[bold green]fresh[/bold green]" if report.fresh else "[bold yellow]stale[/bold yellow]"
    lines = [
        f"[bold]Manifest:[/bold]      {store.cache_path}",
        f"[bold]Status:[/bold]        {status}",
        f"[bold]Cache mtime:[/bold]   {_fmt_ns(report.cache_mtime_ns)}",
        f"[bold]Newest input:[/bold]  {report.newest_input or '-'} ({_fmt_ns(report.newest_input_mtime_ns)})",
        f"[bold]Inputs:[/bold]        {report.input_count} ({len(report.missing)} missing)",
    ]
    for path in report.missing[:10]:
        lines.append(f"  [dim]missing: {path}[/dim]")
    console.print(Panel("\n".join(lines), title="[bold]Freshness[/bold]", border_style="cyan"))

    if not report.fresh:
        raise typer.Exit(code=1)
