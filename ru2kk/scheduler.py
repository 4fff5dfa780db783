"""Bounded-concurrency task launcher for the translation pipeline."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List

TaskFactory = Callable[[], Awaitable[None]]


class TaskScheduler:
    """Runs at most ``limit`` submitted tasks at once, admitting them in order.

    Tasks waiting for a slot queue on a semaphore, which wakes waiters in
    first-come order. The scheduler lives for one pipeline run only.
    """

    def __init__(self, limit: int = 4) -> None:
        if limit < 1:
            raise ValueError("Concurrency limit must be at least 1.")
        self.limit = limit
        self.active = 0
        self.pending = 0
        self._semaphore = asyncio.Semaphore(limit)
        self._tasks: List[asyncio.Task[None]] = []

    def submit(self, factory: TaskFactory) -> asyncio.Task[None]:
        """Queue a zero-argument coroutine factory and return its completion task."""

        self.pending += 1
        task = asyncio.ensure_future(self._run(factory))
        self._tasks.append(task)
        return task

    async def _run(self, factory: TaskFactory) -> None:
        async with self._semaphore:
            self.pending -= 1
            self.active += 1
            try:
                await factory()
            finally:
                self.active -= 1

    async def join(self) -> None:
        """Wait until every submitted task has finished."""

        if self._tasks:
            await asyncio.gather(*self._tasks)

    @property
    def submitted(self) -> int:
        return len(self._tasks)
