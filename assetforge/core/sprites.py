"""SVG sprite providers for the HTML shell.

The HTML shell carries a ``<!-- {{svg}} -->`` placeholder that is replaced
by inline sprite markup.  A provider is any zero-argument callable
returning that markup.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

SVG_PLACEHOLDER = "<!-- {{svg}} -->"

_SVG_OPEN = re.compile(r"<svg\b([^>]*)>", re.IGNORECASE)
_SVG_CLOSE = re.compile(r"</svg>\s*$", re.IGNORECASE)
_VIEWBOX = re.compile(r"""viewBox\s*=\s*(["'])(.*?)\1""", re.IGNORECASE)
_XML_PROLOG = re.compile(r"<\?xml[^>]*\?>\s*")


@runtime_checkable
class SpriteProvider(Protocol):
    """Protocol for sprite markup providers."""

    def __call__(self) -> str:
        ...


def empty_sprite() -> str:
    """Provider used when no sprite source is configured."""
    return ""


class DirectorySpriteProvider:
    """Build one hidden ``<svg>`` of ``<symbol>`` elements from a directory.

    Every ``*.svg`` file becomes a symbol whose id is the file stem, keeping
    the source's ``viewBox``.  Files are read in sorted order.

    Parameters
    ----------
    directory:
        Directory holding the individual SVG icons.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def __call__(self) -> str:
        symbols: list[str] = []
        for path in sorted(self._directory.glob("*.svg")):
            symbols.append(self._symbol(path.stem, path.read_text(encoding="utf-8")))
        logger.debug("Built SVG sprite with %d symbols from %s", len(symbols), self._directory)
        if not symbols:
            return ""
        return '<svg style="display:none">' + "".join(symbols) + "</svg>"

    @staticmethod
    def _symbol(name: str, svg: str) -> str:
        svg = _XML_PROLOG.sub("", svg).strip()
        opening = _SVG_OPEN.search(svg)
        if opening is None:
            return f'<symbol id="{name}">{svg}</symbol>'
        viewbox = _VIEWBOX.search(opening.group(1))
        body = _SVG_CLOSE.sub("", svg[opening.end():])
        attrs = f' viewBox="{viewbox.group(2)}"' if viewbox else ""
        return f'<symbol id="{name}"{attrs}>{body.strip()}</symbol>'
