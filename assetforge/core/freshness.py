"""Freshness checker — is the manifest newer than every source input?

The manifest is fresh iff its mtime is at least the newest mtime among
all declared inputs.  Inputs are stat-ed concurrently; a stat that fails
counts as time zero, so a missing optional input can never make the
cache look fresher and never aborts the check.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from assetforge.core.fanout import gather_all, run_blocking

logger = logging.getLogger(__name__)


class FreshnessReport(BaseModel):
    """Outcome of one freshness check."""

    model_config = ConfigDict(frozen=True)

    fresh: bool
    cache_mtime_ns: int | None = None  # None when the manifest is absent
    newest_input_mtime_ns: int = 0
    newest_input: Path | None = None
    missing: list[Path] = Field(default_factory=list)
    input_count: int = 0


def _mtime_ns(path: Path) -> int | None:
    try:
        return os.stat(path).st_mtime_ns
    except OSError:
        return None


class FreshnessChecker:
    """Compares the manifest's mtime against its declared inputs.

    Parameters
    ----------
    cache_path:
        The on-disk manifest.
    input_paths:
        Every resolved source input.
    """

    def __init__(self, cache_path: Path, input_paths: Iterable[Path]) -> None:
        self.cache_path = Path(cache_path)
        self.input_paths = [Path(p) for p in input_paths]

    async def _input_mtime(self, path: Path) -> int | None:
        mtime = await run_blocking(_mtime_ns, path)
        if mtime is None:
            logger.debug("Cannot stat input %s; treating as oldest", path)
        return mtime

    async def check(self) -> FreshnessReport:
        cache_mtime = await run_blocking(_mtime_ns, self.cache_path)
        if cache_mtime is None:
            logger.info("No cache at %s", self.cache_path)
            return FreshnessReport(fresh=False, input_count=len(self.input_paths))

        mtimes = await gather_all(self._input_mtime(path) for path in self.input_paths)

        newest = 0
        newest_path: Path | None = None
        missing: list[Path] = []
        for path, mtime in zip(self.input_paths, mtimes):
            if mtime is None:
                missing.append(path)
                continue
            if mtime > newest:
                newest, newest_path = mtime, path

        fresh = cache_mtime >= newest
        logger.info(
            "Cache %s is %s (%d inputs, %d missing)",
            self.cache_path,
            "fresh" if fresh else "stale",
            len(self.input_paths),
            len(missing),
        )
        return FreshnessReport(
            fresh=fresh,
            cache_mtime_ns=cache_mtime,
            newest_input_mtime_ns=newest,
            newest_input=newest_path,
            missing=missing,
            input_count=len(self.input_paths),
        )

    async def is_fresh(self) -> bool:
        return (await self.check()).fresh
