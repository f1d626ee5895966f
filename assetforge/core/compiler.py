"""Compilation pipeline — turns raw sources into named artifacts.

Produces one ``ArtifactCollection`` per build.  In ``MINIFY`` mode every
script and stylesheet runs through the registry's minifiers; in ``DEV``
mode data is passed through untouched.  Each artifact's etag is computed
from its final bytes.

Categories compile concurrently; the first failure anywhere aborts the
compile and no collection is produced.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from assetforge.core.fanout import gather_all, gather_map, run_blocking
from assetforge.core.source_reader import SourceReader
from assetforge.core.sprites import SVG_PLACEHOLDER, SpriteProvider, empty_sprite
from assetforge.core.templates import TEMPLATES_PLACEHOLDER
from assetforge.core.transforms import TransformRegistry
from assetforge.models.artifacts import Artifact, ArtifactCollection, BuildMode, Category

logger = logging.getLogger(__name__)

TYPE_MARKER = "{{type}}"

# HTML shell variants: artifact name -> type marker value
HTML_VARIANTS: dict[str, str] = {
    "auth.html": "a",
    "first.html": "f",
    "main.html": "m",
}

# Slots that must be available before a minified build may start
MINIFY_REQUIRED: tuple[str, ...] = ("minify_js", "minify_css", "minify_html")

# Slots a minified build runs without, reported in the collection when absent
MINIFY_OPTIONAL: tuple[str, ...] = ("prefix_css",)


class Compiler:
    """Builds the artifact collection from a ``SourceReader``.

    Parameters
    ----------
    reader:
        Source reader bound to the source root and definition.
    transforms:
        Transform registry; minifier slots are required in ``MINIFY`` mode.
    sprite_provider:
        Returns the SVG sprite markup inlined into the HTML shells.
    """

    def __init__(
        self,
        reader: SourceReader,
        transforms: TransformRegistry,
        sprite_provider: SpriteProvider | Callable[[], str] = empty_sprite,
    ) -> None:
        self.reader = reader
        self.transforms = transforms
        self.sprite_provider = sprite_provider

    def check_transforms(self, mode: BuildMode) -> None:
        """Fail before any work if a transform required by *mode* is missing."""
        if mode.minify:
            for slot in MINIFY_REQUIRED:
                self.transforms.require(slot)

    def skipped_transforms(self, mode: BuildMode) -> list[str]:
        """Optional slots *mode* would use that the registry lacks."""
        if not mode.minify:
            return []
        return [slot for slot in MINIFY_OPTIONAL if not self.transforms.is_available(slot)]

    async def _apply(self, slot: str, text: str, mode: BuildMode) -> str:
        if not mode.minify:
            return text
        return await run_blocking(self.transforms.require(slot), text)

    # ------------------------------------------------------------------
    # Primary resources
    # ------------------------------------------------------------------

    async def compile_js(self, mode: BuildMode) -> Artifact:
        js, chunk = await gather_all([self.reader.read_js(), self.reader.read_templates()])
        js = js.replace(TEMPLATES_PLACEHOLDER, chunk, 1)
        js = await self._apply("minify_js", js, mode)
        return Artifact.create("client.js", js, "js")

    async def compile_css(self, mode: BuildMode) -> Artifact:
        css = await self.reader.read_css()
        if self.transforms.prefix_css is not None:
            css = await run_blocking(self.transforms.prefix_css, css)
        css = await self._apply("minify_css", css, mode)
        return Artifact.create("style.css", css, "css")

    async def compile_html(self, mode: BuildMode) -> dict[str, Artifact]:
        """Build the three HTML shells, each minified on its own."""
        html, sprite = await gather_all([
            self.reader.read_html_shell(),
            run_blocking(self.sprite_provider),
        ])
        html = html.replace(SVG_PLACEHOLDER, sprite, 1)

        variants = await gather_map({
            name: self._apply("minify_html", html.replace(TYPE_MARKER, marker, 1), mode)
            for name, marker in HTML_VARIANTS.items()
        })
        return {name: Artifact.create(name, text, "html") for name, text in variants.items()}

    async def compile_other(self) -> dict[str, Artifact]:
        """Misc files are copied byte-for-byte."""
        files = await self.reader.read_other()
        return {name: Artifact.create(name, data) for name, data in files.items()}

    async def compile_res(self, mode: BuildMode) -> dict[str, Artifact]:
        js, css, html, other = await gather_all([
            self.compile_js(mode),
            self.compile_css(mode),
            self.compile_html(mode),
            self.compile_other(),
        ])
        res: dict[str, Artifact] = {js.name: js, css.name: css}
        res.update(html)
        res.update(other)
        return res

    # ------------------------------------------------------------------
    # Editor themes and modes
    # ------------------------------------------------------------------

    async def compile_themes(self, mode: BuildMode) -> dict[str, Artifact]:
        themes = await self.reader.read_themes()
        minified = await gather_map({
            name: self._apply("minify_css", css, mode) for name, css in themes.items()
        })
        return {name: Artifact.create(name, css, "css") for name, css in minified.items()}

    async def compile_modes(self, mode: BuildMode) -> dict[str, Artifact]:
        modes = await self.reader.read_modes()
        minified = await gather_map({
            name: self._apply("minify_js", js, mode) for name, js in modes.items()
        })
        return {name: Artifact.create(name, js, "js") for name, js in minified.items()}

    # ------------------------------------------------------------------
    # On-demand libraries
    # ------------------------------------------------------------------

    async def _compile_lib(self, key: str, data: bytes, mode: BuildMode) -> Artifact:
        if mode.minify and key.endswith(".js"):
            data = (await self._apply("minify_js", data.decode("utf-8"), mode)).encode("utf-8")
        elif mode.minify and key.endswith(".css"):
            data = (await self._apply("minify_css", data.decode("utf-8"), mode)).encode("utf-8")
        return Artifact.create(key, data)

    async def compile_libs(self, mode: BuildMode) -> dict[str, Artifact]:
        libs = await self.reader.read_libs()
        return await gather_map({
            key: self._compile_lib(key, data, mode) for key, data in libs.items()
        })

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def compile(self, mode: BuildMode) -> ArtifactCollection:
        """Compile every category into a fresh, uncompressed collection."""
        self.check_transforms(mode)
        skipped = self.skipped_transforms(mode)
        for slot in skipped:
            logger.warning("No %s transform registered; building without it", slot)
        logger.info("Compiling assets from %s (%s)", self.reader.root, mode.value)

        categories = await gather_map({
            Category.RES: self.compile_res(mode),
            Category.THEMES: self.compile_themes(mode),
            Category.MODES: self.compile_modes(mode),
            Category.LIB: self.compile_libs(mode),
        })
        collection = ArtifactCollection.from_categories(categories, skipped)
        logger.info(
            "Compiled %d artifacts (%d bytes)",
            collection.artifact_count,
            collection.total_bytes(),
        )
        return collection
