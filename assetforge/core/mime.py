"""Content-type resolution by file extension."""

from __future__ import annotations

import mimetypes

DEFAULT_TYPE = "application/octet-stream"

# Types the platform mimetypes table gets wrong or lacks on some systems.
_OVERRIDES: dict[str, str] = {
    "js": "application/javascript",
    "mjs": "application/javascript",
    "css": "text/css",
    "html": "text/html",
    "svg": "image/svg+xml",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "mp4": "video/mp4",
    "png": "image/png",
    "json": "application/json",
}

_CHARSET_TYPES = ("text/", "application/javascript", "application/json", "image/svg+xml")


def extension_of(name: str) -> str:
    """Return the lowercase extension of *name*, or *name* itself if it has none.

    Bare extensions (``"js"``) are accepted so callers can pass either a
    filename or a type hint.
    """
    base = name.rsplit("/", 1)[-1]
    if "." not in base:
        return base.lower()
    return base.rsplit(".", 1)[-1].lower()


def content_type(name: str) -> str:
    """Resolve the Content-Type for a filename or bare extension.

    Text-like types carry ``; charset=utf-8``.
    """
    ext = extension_of(name)
    mime = _OVERRIDES.get(ext)
    if mime is None:
        mime = mimetypes.types_map.get(f".{ext}", DEFAULT_TYPE)
    if mime.startswith(_CHARSET_TYPES):
        return f"{mime}; charset=utf-8"
    return mime
