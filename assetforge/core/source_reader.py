"""Source reader — loads declared sources from disk.

All reads of one group run concurrently in worker threads; results are
always reassembled in declared order, never in completion order.  Any
unreadable mandatory file raises ``SourceReadError`` and aborts the group.
"""

from __future__ import annotations

import logging
from pathlib import Path

from assetforge.core.errors import SourceReadError
from assetforge.core.fanout import gather_all, gather_map, run_blocking
from assetforge.core.modeinfo import parse_mode_names
from assetforge.core.templates import prepare_template, render_chunk, template_name
from assetforge.core.transforms import TransformRegistry
from assetforge.models.sources import SourceDefinition

logger = logging.getLogger(__name__)

# On-demand libraries are served as LIB_ACCESS_PREFIX + key.
LIB_ACCESS_PREFIX = "!/res/lib/"

JS_SEPARATOR = ";"
CSS_SEPARATOR = "\n"

TEXT_LIB_SUFFIXES = (".js", ".css")


def rewrite_lib_urls(css: str, prefix: str = LIB_ACCESS_PREFIX) -> str:
    """Route every ``url(`` reference through the library access prefix."""
    return css.replace("url(", f"url({prefix}")


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SourceReadError(path, exc.strerror or str(exc)) from exc


def _decode_utf8(path: Path, data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SourceReadError(path, f"not valid UTF-8 ({exc.reason})") from exc


def _list_dir(path: Path, suffix: str | None) -> list[Path]:
    try:
        entries = sorted(p for p in path.iterdir() if p.is_file())
    except OSError as exc:
        raise SourceReadError(path, exc.strerror or str(exc)) from exc
    if suffix is not None:
        entries = [p for p in entries if p.suffix == suffix]
    return entries


class SourceReader:
    """Reads the inputs named by a ``SourceDefinition``.

    Parameters
    ----------
    root:
        Directory all relative source paths are resolved against.
    sources:
        The source definition.
    transforms:
        Registry supplying the HTML minifier and template compiler used
        while reading templates.
    """

    def __init__(
        self,
        root: Path,
        sources: SourceDefinition,
        transforms: TransformRegistry,
    ) -> None:
        self.root = Path(root)
        self.sources = sources
        self.transforms = transforms

    def path(self, relative: str) -> Path:
        return self.root / relative

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    async def read_bytes(self, path: Path) -> bytes:
        data = await run_blocking(_read_bytes, path)
        logger.debug("Read %s (%d bytes)", path, len(data))
        return data

    async def read_text(self, path: Path) -> str:
        return _decode_utf8(path, await self.read_bytes(path))

    async def list_dir(self, path: Path, suffix: str | None = None) -> list[Path]:
        return await run_blocking(_list_dir, path, suffix)

    # ------------------------------------------------------------------
    # Main bundle
    # ------------------------------------------------------------------

    async def read_group(self, paths: list[str], separator: str) -> str:
        """Read an ordered group and join it with *separator* after each file."""
        texts = await gather_all(self.read_text(self.path(rel)) for rel in paths)
        return "".join(text + separator for text in texts)

    async def read_js(self) -> str:
        return await self.read_group(self.sources.js, JS_SEPARATOR)

    async def read_css(self) -> str:
        return await self.read_group(self.sources.css, CSS_SEPARATOR)

    async def read_html_shell(self) -> str:
        return await self.read_text(self.path(self.sources.html_shell))

    async def read_other(self) -> dict[str, bytes]:
        """Read misc files keyed by basename."""
        return await gather_map({
            Path(rel).name: self.read_bytes(self.path(rel)) for rel in self.sources.other
        })

    async def read_templates(self) -> str:
        """Read, prepare and compile every template into one script chunk."""
        compiler = self.transforms.require("compile_template")
        files = await self.list_dir(self.path(self.sources.templates_dir))
        texts = await gather_all(self.read_text(path) for path in files)
        prepared = {
            template_name(path.name): prepare_template(text, self.transforms.minify_html)
            for path, text in zip(files, texts)
        }
        logger.debug("Compiled %d templates", len(prepared))
        return render_chunk(prepared, compiler)

    # ------------------------------------------------------------------
    # Editor modes and themes
    # ------------------------------------------------------------------

    async def read_mode_names(self) -> list[str]:
        meta = await self.read_text(self.path(self.sources.mode_meta))
        return parse_mode_names(meta)

    async def read_modes(self) -> dict[str, str]:
        """Read ``<modes_dir>/<mode>/<mode>.js`` for every supported mode."""
        modes_dir = self.path(self.sources.modes_dir)
        names = await self.read_mode_names()
        return await gather_map({
            name: self.read_text(modes_dir / name / f"{name}.js") for name in names
        })

    async def read_themes(self) -> dict[str, str]:
        """Read every theme stylesheet keyed by stem, plus the custom theme."""
        files = await self.list_dir(self.path(self.sources.themes_dir), ".css")
        themes = await gather_map({path.stem: self.read_text(path) for path in files})
        if self.sources.custom_theme:
            name = self.sources.custom_theme_name
            themes[name] = await self.read_text(self.path(self.sources.custom_theme))
        return themes

    # ------------------------------------------------------------------
    # On-demand libraries
    # ------------------------------------------------------------------

    async def _read_lib(self, key: str) -> bytes:
        paths = [self.path(rel) for rel in self.sources.lib_paths(key)]
        parts = await gather_all(self.read_bytes(path) for path in paths)

        # Text libraries are minified or rewritten later and must decode.
        rewrite = key in self.sources.url_rewrite_libs
        if rewrite or key.endswith(TEXT_LIB_SUFFIXES):
            for path, part in zip(paths, parts):
                _decode_utf8(path, part)

        data = b"".join(parts)
        if rewrite:
            data = rewrite_lib_urls(data.decode("utf-8")).encode("utf-8")
        return data

    async def read_libs(self) -> dict[str, bytes]:
        """Read every on-demand library, concatenating multi-file entries."""
        return await gather_map({key: self._read_lib(key) for key in self.sources.libs})
