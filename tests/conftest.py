"""Shared test fixtures for assetforge."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import brotli
import pytest

from assetforge.config import AssetSettings
from assetforge.core.cache_store import CacheStore
from assetforge.core.source_reader import SourceReader
from assetforge.core.transforms import TransformRegistry, stdlib_gzip
from assetforge.models.sources import SourceDefinition

# Old enough that any manifest written during a test is newer.
OLD_MTIME = 1_000_000_000

META_JS = """\
(function(mod) { mod(CodeMirror); })(function(CodeMirror) {
  "use strict";
  CodeMirror.modeInfo = [
    {name: "CSS", mime: "text/css", mode: "css", ext: ["css"]},
    {name: "JavaScript", mimes: ["text/javascript"], mode: "javascript", ext: ["js"]},
    {name: "JSON", mime: "application/json", mode: "javascript", ext: ["json"]},
    {name: "Plain Text", mime: "text/plain", mode: "null", ext: ["txt", "text"]}
  ];
});
"""

SOURCE_FILES: dict[str, str | bytes] = {
    "client/a.js": "1;",
    "client/b.js": "2;",
    "client/client.js": "var app = { ready: true };\n/* {{ templates }} */\n",
    "client/style.css": "body {\n  color: red;\n}\n",
    "client/extra.css": ".box {\n  display: flex;\n}\n",
    "client/index.html": (
        "<!DOCTYPE html>\n<html>\n  <head>\n    <title>app</title>\n  </head>\n"
        '  <body data-type="{{type}}">\n    <!-- {{svg}} -->\n    <p>  hello  </p>\n'
        "  </body>\n</html>\n"
    ),
    "client/templates/list.hbs": (
        "<ul>\n  {{#each items}}\n    <li>{{   name   }}</li>\n  {{/each}}\n</ul>\n"
    ),
    "client/templates/empty.hbs": "{{!-- nothing here --}}<p>none</p>\n",
    "client/cmtheme.css": ".cm-s-custom {\n  background: #fff;\n}\n",
    "client/logo.png": b"\x89PNG\r\n\x1a\nfake-png-bytes",
    "editor/theme/monokai.css": ".cm-s-monokai {\n  color: #f8f8f2;\n}\n",
    "editor/theme/neat.css": ".cm-s-neat {\n  color: blue;\n}\n",
    "editor/theme/README.md": "not a theme\n",
    "editor/mode/meta.js": META_JS,
    "editor/mode/css/css.js": "CodeMirror.defineMode('css', function () {\n  return {};\n});\n",
    "editor/mode/javascript/javascript.js": (
        "CodeMirror.defineMode('javascript', function () {\n  return {};\n});\n"
    ),
    "lib/lib.js": "function lib () {\n  return 1;\n}\n",
    "lib/m1.js": "var first = 1;\n",
    "lib/m2.js": "var second = 2;\n",
    "lib/ps.css": ".pswp { background: url(default-skin.png) }\n",
    "lib/ps-skin.css": ".pswp__button { background: url(default-skin.svg) }\n",
    "lib/blank.mp4": b"\x00\x00\x00\x18ftypmp42",
}

TEST_SOURCES = SourceDefinition(
    js=["client/a.js", "client/b.js", "client/client.js"],
    css=["client/style.css", "client/extra.css"],
    other=["client/logo.png"],
    libs={
        "lib.js": "lib/lib.js",
        "multi.js": ["lib/m1.js", "lib/m2.js"],
        "ps.css": ["lib/ps.css", "lib/ps-skin.css"],
        "blank.mp4": "lib/blank.mp4",
    },
    html_shell="client/index.html",
    templates_dir="client/templates",
    themes_dir="editor/theme",
    modes_dir="editor/mode",
    mode_meta="editor/mode/meta.js",
    custom_theme="client/cmtheme.css",
    custom_theme_name="custom",
)

SPRITE = '<svg style="display:none"><symbol id="x"></symbol></svg>'


def squeeze(text: str) -> str:
    """Deterministic stand-in minifier: drop all whitespace."""
    return "".join(text.split())


def fast_brotli(data: bytes) -> bytes:
    return brotli.compress(data, quality=4)


def write_tree(root: Path, files: dict[str, str | bytes], mtime: int | None = OLD_MTIME) -> None:
    """Write *files* under *root*, optionally back-dating their mtimes."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Provide a miniature application source tree."""
    root = tmp_path / "app"
    write_tree(root, SOURCE_FILES)
    return root


@pytest.fixture
def sources() -> SourceDefinition:
    return TEST_SOURCES


@pytest.fixture
def transforms() -> TransformRegistry:
    """Provide a deterministic registry with stand-in minifiers."""
    return TransformRegistry(
        minify_js=squeeze,
        minify_css=squeeze,
        minify_html=squeeze,
        gzip_fast=stdlib_gzip,
        brotli=fast_brotli,
    )


@pytest.fixture
def settings(source_root: Path) -> AssetSettings:
    return AssetSettings(root=source_root, cache_path=Path("dist/cache.json"))


@pytest.fixture
def reader(source_root: Path, sources: SourceDefinition, transforms: TransformRegistry) -> SourceReader:
    return SourceReader(source_root, sources, transforms)


@pytest.fixture
def make_store(
    settings: AssetSettings,
    sources: SourceDefinition,
    transforms: TransformRegistry,
) -> Callable[..., CacheStore]:
    """Factory fixture: build a CacheStore over the test tree."""

    def _factory(**overrides) -> CacheStore:
        kwargs = {
            "settings": settings,
            "sources": sources,
            "transforms": transforms,
            "sprite_provider": lambda: SPRITE,
        }
        kwargs.update(overrides)
        return CacheStore(**kwargs)

    return _factory


@pytest.fixture
def store(make_store: Callable[..., CacheStore]) -> CacheStore:
    """Convenience: a ready-made CacheStore with test defaults."""
    return make_store()
