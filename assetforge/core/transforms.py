"""Transform registry — pluggable minifiers, template compiler and encoders.

Bridge boundary
---------------
Every transform is a pure function.  Availability is detected once, at
import time, and frozen into a ``TransformRegistry`` that is injected into
the pipeline.  A slot holding ``None`` is *unavailable*; asking for it
through ``require()`` raises ``TransformUnavailableError`` rather than
silently passing data through.

Backends:

1. **rjsmin** / **rcssmin**: JavaScript and CSS minification.  Both only
   strip whitespace and comments; there is no identifier mangling,
   dead-code elimination or ``@media`` merging.
2. **minify-html**: HTML shells and templates (inline CSS minified too).
3. **zopfli**: high-ratio gzip, preferred over stdlib ``gzip`` for
   minified builds.
4. **brotli**: second encoding, always run for non-dev builds.

The stdlib ``gzip`` encoder is always available.  The CSS vendor prefixer
slot has no bundled backend; callers may plug one in.
"""

from __future__ import annotations

import gzip
import json
import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from assetforge.core.errors import TransformUnavailableError

logger = logging.getLogger(__name__)

TextTransform = Callable[[str], str]
ByteTransform = Callable[[bytes], bytes]
TemplateCompiler = Callable[[str, str], str]

# ---------------------------------------------------------------------------
# Try-import optional backends
# ---------------------------------------------------------------------------

_rjsmin: Any = None
_rcssmin: Any = None
_minify_html: Any = None
_zopfli_gzip: Any = None
_brotli: Any = None

try:
    import rjsmin as _rjsmin  # type: ignore[import-untyped]
except ImportError:
    logger.warning("rjsmin not found — JavaScript minification unavailable.")

try:
    import rcssmin as _rcssmin  # type: ignore[import-untyped]
except ImportError:
    logger.warning("rcssmin not found — CSS minification unavailable.")

try:
    import minify_html as _minify_html  # type: ignore[import-untyped]
except ImportError:
    logger.warning("minify-html not found — HTML minification unavailable.")

try:
    import zopfli.gzip as _zopfli_gzip  # type: ignore[import-untyped]
except ImportError:
    logger.info("zopfli not found — gzip pass will use the stdlib encoder.")

try:
    import brotli as _brotli  # type: ignore[import-untyped]
except ImportError:
    logger.warning("brotli not found — brotli encoding unavailable.")


# Package that provides each slot, used in error messages.
SLOT_PACKAGES: dict[str, str | None] = {
    "minify_js": "rjsmin",
    "minify_css": "rcssmin",
    "prefix_css": None,
    "minify_html": "minify-html",
    "compile_template": None,
    "gzip_fast": None,
    "gzip_best": "zopfli",
    "brotli": "brotli",
}


# ---------------------------------------------------------------------------
# Backend adapters
# ---------------------------------------------------------------------------


def _rjsmin_minify(js: str) -> str:
    return _rjsmin.jsmin(js, keep_bang_comments=False)


def _rcssmin_minify(css: str) -> str:
    return _rcssmin.cssmin(css, keep_bang_comments=False)


def _minify_html_minify(html: str) -> str:
    return _minify_html.minify(
        html,
        minify_css=True,
        minify_js=False,
        keep_comments=False,
        preserve_brace_template_syntax=True,
    )


def stdlib_gzip(data: bytes, *, level: int = 9) -> bytes:
    """Gzip with a zeroed header timestamp so output is reproducible."""
    return gzip.compress(data, compresslevel=level, mtime=0)


def _zopfli_compress(data: bytes) -> bytes:
    return _zopfli_gzip.compress(data)


def _brotli_compress(data: bytes, *, quality: int = 11, lgwin: int = 22) -> bytes:
    return _brotli.compress(
        data, mode=_brotli.MODE_TEXT, quality=quality, lgwin=lgwin, lgblock=0
    )


def handlebars_source_compiler(name: str, html: str) -> str:
    """Compile a template to a runtime-compiled handlebars expression.

    The template source is embedded as a JS string literal and compiled by
    the client's handlebars runtime on first use.
    """
    return f"Handlebars.compile({json.dumps(html)})"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TransformRegistry(BaseModel):
    """Frozen capability set of transform functions.

    Each slot is a callable or ``None`` (unavailable).  Build with
    ``detect()`` for the installed backends, or construct directly to
    inject custom transforms (tests do this).

    Parameters
    ----------
    minify_js, minify_css, minify_html:
        ``str -> str`` minifiers.
    prefix_css:
        Optional ``str -> str`` vendor prefixer, applied before CSS
        minification when present.
    compile_template:
        ``(name, html) -> str`` returning a JS expression that evaluates to
        the compiled template.
    gzip_fast, gzip_best, brotli:
        ``bytes -> bytes`` encoders.  ``gzip_fast`` is always present.
    backends:
        Human-readable backend name per available slot.
    """

    model_config = ConfigDict(frozen=True)

    minify_js: TextTransform | None = None
    minify_css: TextTransform | None = None
    prefix_css: TextTransform | None = None
    minify_html: TextTransform | None = None
    compile_template: TemplateCompiler | None = handlebars_source_compiler
    gzip_fast: ByteTransform = stdlib_gzip
    gzip_best: ByteTransform | None = None
    brotli: ByteTransform | None = None
    backends: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def detect(
        cls,
        *,
        gzip_level: int = 9,
        brotli_quality: int = 11,
        brotli_lgwin: int = 22,
    ) -> TransformRegistry:
        """Detect installed backends and return the resulting registry."""
        slots: dict[str, Any] = {
            "gzip_fast": partial(stdlib_gzip, level=gzip_level),
            "compile_template": handlebars_source_compiler,
        }
        backends = {"gzip_fast": "gzip (stdlib)", "compile_template": "handlebars (runtime compile)"}

        if _rjsmin is not None:
            slots["minify_js"] = _rjsmin_minify
            backends["minify_js"] = "rjsmin"
        if _rcssmin is not None:
            slots["minify_css"] = _rcssmin_minify
            backends["minify_css"] = "rcssmin"
        if _minify_html is not None:
            slots["minify_html"] = _minify_html_minify
            backends["minify_html"] = "minify-html"
        if _zopfli_gzip is not None:
            slots["gzip_best"] = _zopfli_compress
            backends["gzip_best"] = "zopfli"
        if _brotli is not None:
            slots["brotli"] = partial(_brotli_compress, quality=brotli_quality, lgwin=brotli_lgwin)
            backends["brotli"] = "brotli"

        registry = cls(**slots, backends=backends)
        logger.debug("Transform registry: %s", registry.describe())
        return registry

    def is_available(self, slot: str) -> bool:
        return getattr(self, slot) is not None

    def require(self, slot: str) -> Callable[..., Any]:
        """Return the transform in *slot* or raise if it is unavailable."""
        transform = getattr(self, slot)
        if transform is None:
            raise TransformUnavailableError(slot, SLOT_PACKAGES.get(slot))
        return transform

    def describe(self) -> dict[str, str | None]:
        """Slot -> backend name (``None`` when unavailable)."""
        return {
            slot: (self.backends.get(slot, "custom") if self.is_available(slot) else None)
            for slot in SLOT_PACKAGES
        }
