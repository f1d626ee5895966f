"""assetforge data models — all Pydantic v2, all frozen (immutable)."""

from assetforge.models.artifacts import Artifact, ArtifactCollection, BuildMode, Category
from assetforge.models.manifest import CacheManifest
from assetforge.models.sources import DEFAULT_SOURCES, SourceDefinition

__all__ = [
    # artifacts
    "Artifact",
    "ArtifactCollection",
    "BuildMode",
    "Category",
    # manifest
    "CacheManifest",
    # sources
    "DEFAULT_SOURCES",
    "SourceDefinition",
]
