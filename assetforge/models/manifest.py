"""Persisted form of the artifact collection.

The manifest is a single JSON document holding exactly one collection.
Bytes are base64 encoded.  A format marker, a version number and per
artifact etag checks make corruption detectable at parse time.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from assetforge.core.errors import ManifestCorruptError
from assetforge.core.hasher import etag
from assetforge.models.artifacts import ArtifactCollection

MANIFEST_FORMAT = "assetforge-cache"
MANIFEST_VERSION = 1


class CacheManifest(BaseModel):
    """Envelope around one ``ArtifactCollection``."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    format: Literal["assetforge-cache"] = MANIFEST_FORMAT
    version: Literal[1] = MANIFEST_VERSION
    collection: ArtifactCollection


def serialize(collection: ArtifactCollection) -> bytes:
    """Serialize a collection to manifest bytes."""
    return CacheManifest(collection=collection).model_dump_json().encode("utf-8")


def deserialize(raw: bytes | str) -> ArtifactCollection:
    """Parse manifest bytes back into a collection.

    Raises
    ------
    ManifestCorruptError
        If the document is not valid JSON, fails validation, or any
        artifact's etag does not match its data.
    """
    try:
        manifest = CacheManifest.model_validate_json(raw)
    except ValidationError as exc:
        raise ManifestCorruptError(f"Invalid cache manifest: {exc.error_count()} error(s)") from exc

    for category, name, artifact in manifest.collection.iter_artifacts():
        if etag(artifact.data) != artifact.etag:
            raise ManifestCorruptError(
                f"Cache manifest entry {category.value}/{name} does not match its etag"
            )
    return manifest.collection
