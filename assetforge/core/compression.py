"""Compression stage — gzip and brotli variants for every artifact.

Two independent passes run over the whole collection.  Each pass fans out
per category and then per artifact, joins, and only then produces a new
collection; a single failure aborts the stage with ``CompressionError``
and nothing partial is returned.

Pass 1 (gzip):  zopfli for minified builds when installed, else stdlib.
Pass 2 (brotli): required; raises ``TransformUnavailableError`` if the
encoder is missing.

Dev builds skip both passes unless ``compress_in_dev`` is set, in which
case only the fast stdlib gzip pass runs.
"""

from __future__ import annotations

import gzip
import logging
import zlib
from collections.abc import Callable

import brotli

from assetforge.core.errors import AssetCacheError, CompressionError
from assetforge.core.fanout import gather_map, run_blocking
from assetforge.core.transforms import TransformRegistry
from assetforge.models.artifacts import Artifact, ArtifactCollection, BuildMode, Category

logger = logging.getLogger(__name__)

Encoder = Callable[[bytes], bytes]


class Compressor:
    """Adds ``gzip`` and ``brotli`` variants to a collection.

    Parameters
    ----------
    transforms:
        Registry supplying the encoders.
    compress_in_dev:
        Run the fast gzip pass for dev builds too.
    """

    def __init__(self, transforms: TransformRegistry, *, compress_in_dev: bool = False) -> None:
        self.transforms = transforms
        self.compress_in_dev = compress_in_dev

    def check_transforms(self, mode: BuildMode) -> None:
        """Fail early if *mode* needs an encoder that is missing."""
        if mode.minify:
            self.transforms.require("brotli")

    def gzip_encoder(self, mode: BuildMode) -> Encoder:
        if mode.minify and self.transforms.gzip_best is not None:
            return self.transforms.gzip_best
        return self.transforms.gzip_fast

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    @staticmethod
    async def _encode(encoder: Encoder, category: Category, artifact: Artifact) -> bytes:
        try:
            return await run_blocking(encoder, artifact.data)
        except AssetCacheError:
            raise
        except Exception as exc:
            raise CompressionError(
                f"Failed to compress {category.value}/{artifact.name}: {exc}"
            ) from exc

    async def _encode_category(
        self, encoder: Encoder, category: Category, artifacts: dict[str, Artifact]
    ) -> dict[str, bytes]:
        return await gather_map({
            name: self._encode(encoder, category, artifact) for name, artifact in artifacts.items()
        })

    async def run_pass(
        self, collection: ArtifactCollection, encoder: Encoder
    ) -> dict[Category, dict[str, bytes]]:
        """Encode every artifact; returns category -> name -> encoded bytes."""
        return await gather_map({
            category: self._encode_category(encoder, category, artifacts)
            for category, artifacts in collection.categories().items()
        })

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def compress(self, collection: ArtifactCollection, mode: BuildMode) -> ArtifactCollection:
        """Return a new collection with encodings populated for *mode*."""
        if not mode.minify and not self.compress_in_dev:
            logger.debug("Dev build: skipping compression")
            return collection

        brotli_encoder = self.transforms.require("brotli") if mode.minify else None

        gzipped = await self.run_pass(collection, self.gzip_encoder(mode))
        brotlied: dict[Category, dict[str, bytes]] = {}
        if brotli_encoder is not None:
            brotlied = await self.run_pass(collection, brotli_encoder)

        categories: dict[Category, dict[str, Artifact]] = {}
        for category, artifacts in collection.categories().items():
            categories[category] = {
                name: artifact.with_encodings(
                    gzip=gzipped[category][name],
                    brotli=brotlied.get(category, {}).get(name),
                )
                for name, artifact in artifacts.items()
            }
        result = ArtifactCollection.from_categories(categories, collection.skipped_transforms)
        logger.info("Compressed %d artifacts (%s)", result.artifact_count, mode.value)
        return result


def _decodes_to(decode: Callable[[bytes], bytes], encoded: bytes | None, data: bytes) -> bool:
    if encoded is None:
        return True
    try:
        return decode(encoded) == data
    except (OSError, EOFError, zlib.error, brotli.error):
        return False


def verify_encodings(collection: ArtifactCollection) -> list[str]:
    """Return ``category/name`` of every artifact whose encodings do not round-trip.

    Missing encodings are skipped; undecodable ones count as mismatches.
    """
    mismatches: list[str] = []
    for category, name, artifact in collection.iter_artifacts():
        if not (
            _decodes_to(gzip.decompress, artifact.gzip, artifact.data)
            and _decodes_to(brotli.decompress, artifact.brotli, artifact.data)
        ):
            mismatches.append(f"{category.value}/{name}")
    return mismatches
