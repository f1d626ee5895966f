"""Source definition — which files feed which artifacts.

The definition is static configuration: ordered source groups for the main
bundle, the misc file list, the on-demand library map, and the locations of
templates and editor themes/modes.  All paths are relative to the source
root.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class SourceDefinition(BaseModel):
    """Declared inputs of the asset cache.

    Parameters
    ----------
    js, css:
        Ordered source groups concatenated into ``client.js`` and
        ``style.css``.
    other:
        Misc static files copied byte-for-byte, keyed by basename.
    libs:
        On-demand library key -> one path, or an ordered list of paths
        concatenated without separator.
    url_rewrite_libs:
        Library keys whose ``url(`` references are routed through the
        library access prefix.
    """

    model_config = ConfigDict(frozen=True)

    js: list[str] = Field(default_factory=list)
    css: list[str] = Field(default_factory=list)
    other: list[str] = Field(default_factory=list)
    libs: dict[str, str | list[str]] = Field(default_factory=dict)
    url_rewrite_libs: list[str] = Field(default_factory=lambda: ["ps.css"])

    html_shell: str = "client/index.html"
    templates_dir: str = "client/templates"
    themes_dir: str = "node_modules/codemirror/theme"
    modes_dir: str = "node_modules/codemirror/mode"
    mode_meta: str = "node_modules/codemirror/mode/meta.js"
    custom_theme: str | None = "client/cmtheme.css"
    custom_theme_name: str = "droppy"

    @classmethod
    def from_file(cls, path: Path) -> SourceDefinition:
        """Load a definition from a ``.json`` or ``.toml`` file."""
        path = Path(path)
        raw = path.read_bytes()
        if path.suffix == ".toml":
            return cls.model_validate(tomllib.loads(raw.decode("utf-8")))
        return cls.model_validate(json.loads(raw))

    def lib_paths(self, key: str) -> list[str]:
        """Return the ordered source paths behind one library key."""
        entry = self.libs[key]
        return [entry] if isinstance(entry, str) else list(entry)

    def input_paths(self, root: Path) -> list[Path]:
        """Flatten every declared input file into absolute paths.

        Directory-based inputs (templates, themes, individual modes) are
        not enumerated here; the mode metadata file and custom theme are.
        """
        root = Path(root)
        relative: list[str] = [*self.js, *self.css, *self.other]
        for key in self.libs:
            relative.extend(self.lib_paths(key))
        relative.extend([self.html_shell, self.mode_meta])
        if self.custom_theme:
            relative.append(self.custom_theme)
        return [root / rel for rel in relative]


DEFAULT_SOURCES = SourceDefinition(
    css=[
        "client/style.css",
        "client/sprites.css",
        "client/tooltips.css",
    ],
    js=[
        # Full build: the default template compiler emits Handlebars.compile().
        "node_modules/handlebars/dist/handlebars.min.js",
        "node_modules/file-extension/file-extension.js",
        "node_modules/screenfull/dist/screenfull.js",
        "node_modules/mousetrap/mousetrap.min.js",
        "node_modules/whatwg-fetch/fetch.js",
        "node_modules/uppie/uppie.js",
        "client/jquery-custom.min.js",
        "client/client.js",
    ],
    other=[
        "client/font.woff",
        "client/images/logo.svg",
        "client/images/logo32.png",
        "client/images/logo120.png",
        "client/images/logo128.png",
        "client/images/logo152.png",
        "client/images/logo180.png",
        "client/images/logo192.png",
        "client/images/sprites.png",
    ],
    libs={
        # plyr
        "plyr.js": "node_modules/plyr/src/js/plyr.js",
        "plyr.css": "node_modules/plyr/dist/plyr.css",
        "plyr.svg": "node_modules/plyr/dist/plyr.svg",
        "blank.mp4": "client/blank.mp4",
        # codemirror
        "cm.js": [
            "node_modules/codemirror/lib/codemirror.js",
            "node_modules/codemirror/mode/meta.js",
            "node_modules/codemirror/addon/mode/overlay.js",
            "node_modules/codemirror/addon/dialog/dialog.js",
            "node_modules/codemirror/addon/selection/active-line.js",
            "node_modules/codemirror/addon/selection/mark-selection.js",
            "node_modules/codemirror/addon/search/searchcursor.js",
            "node_modules/codemirror/addon/edit/matchbrackets.js",
            "node_modules/codemirror/addon/search/search.js",
            "node_modules/codemirror/keymap/sublime.js",
        ],
        "cm.css": "node_modules/codemirror/lib/codemirror.css",
        # photoswipe
        "ps.js": [
            "node_modules/photoswipe/dist/photoswipe.min.js",
            "node_modules/photoswipe/dist/photoswipe-ui-default.min.js",
        ],
        "ps.css": [
            "node_modules/photoswipe/dist/photoswipe.css",
            "node_modules/photoswipe/dist/default-skin/default-skin.css",
        ],
        # photoswipe skin files referenced by ps.css
        "default-skin.png": "node_modules/photoswipe/dist/default-skin/default-skin.png",
        "default-skin.svg": "node_modules/photoswipe/dist/default-skin/default-skin.svg",
    },
)
