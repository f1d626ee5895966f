"""assetforge CLI — Typer-based command-line interface.

Provides the ``assetforge`` command with subcommands for building,
loading, checking and verifying the asset cache.

All output uses Rich for formatted terminal display.
"""
