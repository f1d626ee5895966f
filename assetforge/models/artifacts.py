"""Artifact and artifact collection models.

An ``Artifact`` is one named, fully processed static resource.  Its
``etag`` is derived from ``data`` at creation time and the two compressed
variants are filled in exactly once by the compression stage.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from assetforge.core.hasher import etag as compute_etag
from assetforge.core.mime import content_type


class Category(str, Enum):
    """Fixed top-level groups of the artifact collection."""

    RES = "res"        # client.js, style.css, HTML shells, misc files
    THEMES = "themes"  # editor colour schemes
    MODES = "modes"    # editor syntax modes
    LIB = "lib"        # on-demand libraries


class BuildMode(str, Enum):
    """How a build treats its sources.

    ``DEV`` passes sources through untouched and skips compression and
    persistence; ``MINIFY`` runs every transform.
    """

    DEV = "dev"
    MINIFY = "minify"

    @property
    def minify(self) -> bool:
        return self is BuildMode.MINIFY


class Artifact(BaseModel):
    """A named resource with its fingerprint, content type and encodings.

    ``gzip`` and ``brotli`` are ``None`` until compression has run.  Once
    present they must decompress to exactly ``data``.
    """

    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    name: str
    data: bytes
    etag: str
    mime: str
    gzip: bytes | None = None
    brotli: bytes | None = None

    @classmethod
    def create(cls, name: str, data: bytes | str, mime: str | None = None) -> Artifact:
        """Build an artifact from its final bytes.

        *mime* may be a full content type or a bare extension hint such as
        ``"js"``; when omitted it is resolved from *name*.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        if mime is None:
            mime = content_type(name)
        elif "/" not in mime:
            mime = content_type(mime)
        return cls(name=name, data=data, etag=compute_etag(data), mime=mime)

    def with_encodings(
        self, *, gzip: bytes | None = None, brotli: bytes | None = None
    ) -> Artifact:
        """Return a copy with the given compressed variants set.

        Variants not passed keep their current value.
        """
        update: dict[str, bytes] = {}
        if gzip is not None:
            update["gzip"] = gzip
        if brotli is not None:
            update["brotli"] = brotli
        return self.model_copy(update=update)

    @property
    def size(self) -> int:
        return len(self.data)


class ArtifactCollection(BaseModel):
    """Category -> name -> Artifact mapping handed to the serving process.

    Consumers must treat a collection as read-only; the compression stage
    returns new collections instead of mutating its input.
    """

    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    res: dict[str, Artifact] = Field(default_factory=dict)
    themes: dict[str, Artifact] = Field(default_factory=dict)
    modes: dict[str, Artifact] = Field(default_factory=dict)
    lib: dict[str, Artifact] = Field(default_factory=dict)

    # Optional transform slots the build ran without (e.g. "prefix_css").
    skipped_transforms: list[str] = Field(default_factory=list)

    @classmethod
    def from_categories(
        cls,
        categories: dict[Category, dict[str, Artifact]],
        skipped_transforms: list[str] | None = None,
    ) -> ArtifactCollection:
        return cls(
            **{category.value: dict(items) for category, items in categories.items()},
            skipped_transforms=list(skipped_transforms or []),
        )

    def category(self, category: Category | str) -> dict[str, Artifact]:
        """Return the name -> artifact mapping of one category."""
        return getattr(self, Category(category).value)

    def get(self, category: Category | str, name: str) -> Artifact | None:
        return self.category(category).get(name)

    def categories(self) -> dict[Category, dict[str, Artifact]]:
        return {category: self.category(category) for category in Category}

    def iter_artifacts(self) -> Iterator[tuple[Category, str, Artifact]]:
        for category in Category:
            for name, artifact in self.category(category).items():
                yield category, name, artifact

    @property
    def artifact_count(self) -> int:
        return sum(len(self.category(category)) for category in Category)

    @property
    def is_compressed(self) -> bool:
        """True when every artifact carries both encodings."""
        return all(
            artifact.gzip is not None and artifact.brotli is not None
            for _, _, artifact in self.iter_artifacts()
        )

    def total_bytes(self) -> int:
        return sum(artifact.size for _, _, artifact in self.iter_artifacts())
