"""assetforge: precomputed, multi-encoding static asset cache.

Builds a web application's scripts, stylesheets, HTML shells, editor
themes/modes and on-demand libraries into one manifest of artifacts, each
carrying its etag, content type, and gzip and brotli encodings, so a
server can serve precomputed bytes without per-request work.
"""

__version__ = "0.1.0"
__description__ = "Precomputed, multi-encoding static asset cache"

from assetforge.core.cache_store import CacheStore
from assetforge.models.artifacts import Artifact, ArtifactCollection, BuildMode, Category

__all__ = ["Artifact", "ArtifactCollection", "BuildMode", "CacheStore", "Category", "__version__"]
