"""Structured fan-out / fan-in helpers.

Every parallel group in the pipeline (input stats, file reads, per-category
and per-artifact compression) goes through ``gather_all``: members run in
one ``asyncio.TaskGroup``, the first failure cancels the rest, and the
caller sees that single exception rather than an ``ExceptionGroup``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, TypeVar

K = TypeVar("K")
T = TypeVar("T")


def _first_error(group: BaseExceptionGroup) -> BaseException:
    exc: BaseException = group
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc


async def gather_all(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run awaitables concurrently and return results in input order.

    Raises the first member failure; no partial result list is returned.
    """
    tasks: list[asyncio.Task[T]] = []
    try:
        async with asyncio.TaskGroup() as tg:
            for aw in aws:
                tasks.append(tg.create_task(_as_coroutine(aw)))
    except BaseExceptionGroup as group:
        raise _first_error(group) from None
    return [task.result() for task in tasks]


async def gather_map(items: Mapping[K, Awaitable[T]]) -> dict[K, T]:
    """Like ``gather_all`` for a mapping of key -> awaitable."""
    keys = list(items)
    results = await gather_all(items[key] for key in keys)
    return dict(zip(keys, results))


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run blocking I/O or CPU work in a worker thread."""
    return await asyncio.to_thread(func, *args, **kwargs)


async def _as_coroutine(aw: Awaitable[T]) -> T:
    return await aw
