"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and ASSETFORGE_* environment variables.

Examples
--------
Override via environment::

    export ASSETFORGE_ROOT=/srv/app
    export ASSETFORGE_CACHE_PATH=/var/cache/app/cache.json
    export ASSETFORGE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from assetforge.models.sources import DEFAULT_SOURCES, SourceDefinition


class AssetSettings(BaseSettings):
    """Settings for building and loading the asset cache.

    Relative ``cache_path``, ``sources_file`` and ``svg_dir`` values are
    resolved against ``root``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ASSETFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Source tree and manifest
    root: Path = Path(".")
    cache_path: Path = Path("dist/cache.json")
    sources_file: Path | None = None
    svg_dir: Path | None = None

    # Build behaviour
    dev: bool = False
    compress_in_dev: bool = False

    # Encoders
    gzip_level: int = 9
    brotli_quality: int = 11
    brotli_lgwin: int = 22

    log_level: str = "INFO"

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    @property
    def resolved_cache_path(self) -> Path:
        return self._resolve(self.cache_path)

    @property
    def resolved_svg_dir(self) -> Path | None:
        return self._resolve(self.svg_dir) if self.svg_dir else None

    def load_sources(self) -> SourceDefinition:
        """Return the configured source definition (defaults when unset)."""
        if self.sources_file is None:
            return DEFAULT_SOURCES
        return SourceDefinition.from_file(self._resolve(self.sources_file))


# Module-level singleton, import as `from assetforge.config import settings`
settings = AssetSettings()
