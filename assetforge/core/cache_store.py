"""Cache store — owns the on-disk manifest.

``load()`` is the startup path: serve the manifest when it parses, rebuild
otherwise.  ``build()`` is the freshness-gated rebuild used by deploy
tooling.  Builds within one store and event loop are serialized by an
``asyncio.Lock``;
across processes the manifest is only ever replaced atomically, so readers
never observe a partially written file.

Manifest layout::

    {"format": "assetforge-cache", "version": 1,
     "collection": {"res": {...}, "themes": {...}, "modes": {...}, "lib": {...}}}
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from assetforge.config import AssetSettings
from assetforge.core.compiler import Compiler
from assetforge.core.compression import Compressor
from assetforge.core.errors import ManifestCorruptError
from assetforge.core.fanout import run_blocking
from assetforge.core.freshness import FreshnessChecker, FreshnessReport
from assetforge.core.source_reader import SourceReader
from assetforge.core.sprites import DirectorySpriteProvider, SpriteProvider, empty_sprite
from assetforge.core.transforms import TransformRegistry
from assetforge.models.artifacts import ArtifactCollection, BuildMode
from assetforge.models.manifest import deserialize, serialize
from assetforge.models.sources import SourceDefinition

logger = logging.getLogger(__name__)

TEMP_PREFIX = ".cache-"
TEMP_SUFFIX = ".tmp"


def _default_file_mode() -> int:
    # os.umask can only be read by setting it.
    umask = os.umask(0o022)
    os.umask(umask)
    return 0o666 & ~umask


# mkstemp creates 0600 files; the manifest gets the usual new-file mode instead.
FILE_MODE = _default_file_mode()


def write_atomic(path: Path, data: bytes) -> None:
    """Write *data* to *path* via a temp file and ``os.replace``.

    The parent directory is created first.  On failure the temp file is
    removed and any existing file at *path* is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            os.fchmod(handle.fileno(), FILE_MODE)
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class CacheStore:
    """Builds, persists and loads the artifact collection.

    Parameters
    ----------
    settings:
        Runtime settings; defaults are read from the environment.
    sources:
        Source definition; defaults to ``settings.load_sources()``.
    transforms:
        Transform registry; defaults to the detected backends.
    sprite_provider:
        SVG sprite markup provider; defaults to the configured sprite
        directory, or no sprite.
    """

    def __init__(
        self,
        settings: AssetSettings | None = None,
        sources: SourceDefinition | None = None,
        transforms: TransformRegistry | None = None,
        sprite_provider: SpriteProvider | Callable[[], str] | None = None,
    ) -> None:
        self.settings = settings or AssetSettings()
        self.sources = sources or self.settings.load_sources()
        self.transforms = transforms or TransformRegistry.detect(
            gzip_level=self.settings.gzip_level,
            brotli_quality=self.settings.brotli_quality,
            brotli_lgwin=self.settings.brotli_lgwin,
        )
        if sprite_provider is None:
            svg_dir = self.settings.resolved_svg_dir
            sprite_provider = DirectorySpriteProvider(svg_dir) if svg_dir else empty_sprite

        self.root = Path(self.settings.root)
        self.cache_path = self.settings.resolved_cache_path
        self.reader = SourceReader(self.root, self.sources, self.transforms)
        self.compiler = Compiler(self.reader, self.transforms, sprite_provider)
        self.compressor = Compressor(
            self.transforms, compress_in_dev=self.settings.compress_in_dev
        )
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def _build_lock(self) -> asyncio.Lock:
        """Build lock for the running event loop.

        Each ``asyncio.run`` of the sync wrappers starts a new loop, and an
        ``asyncio.Lock`` must not be shared between loops.
        """
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    # ------------------------------------------------------------------
    # Manifest I/O
    # ------------------------------------------------------------------

    async def read(self) -> ArtifactCollection:
        """Read and parse the manifest.

        Raises ``OSError`` when it cannot be read and
        ``ManifestCorruptError`` when it does not parse.
        """
        raw = await run_blocking(self.cache_path.read_bytes)
        return await run_blocking(deserialize, raw)

    async def write(self, collection: ArtifactCollection) -> None:
        data = await run_blocking(serialize, collection)
        await run_blocking(write_atomic, self.cache_path, data)
        logger.info("Wrote %s (%d bytes)", self.cache_path, len(data))

    def clear(self) -> bool:
        """Remove the manifest.  Returns True if a file was removed."""
        try:
            self.cache_path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Removed %s", self.cache_path)
        return True

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def freshness_checker(self) -> FreshnessChecker:
        return FreshnessChecker(self.cache_path, self.sources.input_paths(self.root))

    async def check(self) -> FreshnessReport:
        return await self.freshness_checker().check()

    async def compile(self, mode: BuildMode, *, write: bool) -> ArtifactCollection:
        """Compile and compress; persist only when *write* is set.

        Nothing is written unless every stage succeeded.
        """
        self.compressor.check_transforms(mode)
        compiled = await self.compiler.compile(mode)
        collection = await self.compressor.compress(compiled, mode)
        if write:
            await self.write(collection)
        return collection

    async def _rebuild(self, *, write: bool) -> ArtifactCollection:
        async with self._build_lock:
            return await self.compile(BuildMode.MINIFY, write=write)

    async def build(self) -> ArtifactCollection:
        """Rebuild and persist the manifest unless it is already fresh."""
        async with self._build_lock:
            report = await self.check()
            if report.fresh:
                try:
                    return await self.read()
                except (OSError, ManifestCorruptError) as exc:
                    logger.warning("Fresh cache %s is unusable (%s); rebuilding", self.cache_path, exc)
            return await self.compile(BuildMode.MINIFY, write=True)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load(self, dev: bool = False) -> ArtifactCollection:
        """Return the collection a server should start with.

        Dev mode always compiles in memory without minification,
        compression or persistence.  Otherwise the manifest is used when
        readable; an unreadable manifest triggers a persisted rebuild and a
        corrupt one an in-memory rebuild.
        """
        if dev:
            return await self.compile(BuildMode.DEV, write=False)

        try:
            raw = await run_blocking(self.cache_path.read_bytes)
        except OSError as exc:
            logger.info("%s %s, building cache ...", exc.strerror or exc, self.cache_path)
            return await self._rebuild(write=True)

        try:
            return await run_blocking(deserialize, raw)
        except ManifestCorruptError as exc:
            logger.error("Corrupt cache manifest %s: %s", self.cache_path, exc)
            return await self._rebuild(write=False)

    # ------------------------------------------------------------------
    # Synchronous wrappers
    # ------------------------------------------------------------------

    def load_sync(self, dev: bool = False) -> ArtifactCollection:
        return asyncio.run(self.load(dev))

    def build_sync(self) -> ArtifactCollection:
        return asyncio.run(self.build())

    def check_sync(self) -> FreshnessReport:
        return asyncio.run(self.check())
