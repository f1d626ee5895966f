"""Tests for the structured fan-out helpers."""

from __future__ import annotations

import asyncio
import time

import pytest

from assetforge.core.fanout import gather_all, gather_map, run_blocking


async def _after(delay: float, value):
    await asyncio.sleep(delay)
    return value


async def _fail_after(delay: float, exc: Exception):
    await asyncio.sleep(delay)
    raise exc


class TestGatherAll:
    def test_results_in_input_order(self):
        results = asyncio.run(gather_all([_after(0.05, "slow"), _after(0.0, "fast")]))
        assert results == ["slow", "fast"]

    def test_empty(self):
        assert asyncio.run(gather_all([])) == []

    def test_first_failure_is_raised_unwrapped(self):
        with pytest.raises(KeyError):
            asyncio.run(gather_all([_after(0.01, 1), _fail_after(0.0, KeyError("boom"))]))

    def test_failure_cancels_siblings(self):
        finished = []

        async def slow():
            await asyncio.sleep(2)
            finished.append(True)

        start = time.monotonic()
        with pytest.raises(ValueError):
            asyncio.run(gather_all([slow(), _fail_after(0.01, ValueError("x"))]))
        assert finished == []
        assert time.monotonic() - start < 1.5

    def test_nested_groups_unwrap(self):
        async def inner():
            return await gather_all([_fail_after(0.0, OSError("deep"))])

        with pytest.raises(OSError, match="deep"):
            asyncio.run(gather_all([inner(), _after(0.01, 2)]))


class TestGatherMap:
    def test_keys_preserved(self):
        result = asyncio.run(gather_map({"b": _after(0.02, 2), "a": _after(0.0, 1)}))
        assert result == {"b": 2, "a": 1}
        assert list(result) == ["b", "a"]


class TestRunBlocking:
    def test_runs_in_thread(self):
        assert asyncio.run(run_blocking(sum, [1, 2, 3])) == 6

    def test_kwargs(self):
        assert asyncio.run(run_blocking(int, "ff", base=16)) == 255
