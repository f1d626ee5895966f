"""Content fingerprints for artifacts and manifests.

``etag`` follows the strong entity-tag format commonly served by HTTP
static file servers: ``"<byte-length-hex>-<base64(sha1)[:27]>"``.  It is a
pure function of the bytes, so identical data always yields an identical
tag.
"""

from __future__ import annotations

import base64
import hashlib

EMPTY_ETAG = '"0-2jmj7l5rSw0yVb/vlWAYkK/YBwk"'


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def etag(data: bytes | str) -> str:
    """Compute the quoted entity tag for *data*.

    Strings are encoded as UTF-8 first, so ``etag("x") == etag(b"x")``.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data:
        return EMPTY_ETAG
    digest = base64.b64encode(hashlib.sha1(data).digest()).decode("ascii")[:27]
    return f'"{len(data):x}-{digest}"'
