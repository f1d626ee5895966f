"""Exception hierarchy for the asset build-and-cache pipeline.

Every fatal failure surfaces from ``CacheStore.load`` / ``CacheStore.build``
as exactly one of these.  ``ManifestCorruptError`` is the only one the
store recovers from on its own.
"""

from __future__ import annotations


class AssetCacheError(RuntimeError):
    """Base class for all asset cache failures."""


class TransformUnavailableError(AssetCacheError):
    """Raised when a transform required by the current build mode is missing.

    A missing minifier must never produce unminified output labelled as
    minified, so the build is refused instead of degraded.
    """

    def __init__(self, transform: str, package: str | None = None) -> None:
        self.transform = transform
        self.package = package
        message = f"Transform '{transform}' is required to build the asset cache but is unavailable"
        if package:
            message += f"; install the '{package}' package"
        super().__init__(message)


class SourceReadError(AssetCacheError):
    """Raised when a mandatory source file cannot be read."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read source {path}: {reason}")


class ManifestCorruptError(AssetCacheError):
    """Raised when the on-disk manifest cannot be parsed or validated."""


class CompressionError(AssetCacheError):
    """Raised when compressing an artifact fails."""


class ModeInfoParseError(AssetCacheError):
    """Raised when the editor mode metadata cannot be parsed."""
