"""
Abstract base class for periodic exporter tasks.

Provides the shared execute/wait loop used by every endpoint prober and the
host sampler.
"""

from __future__ import annotations

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Any, Callable


class BackgroundTask(ABC):
    """Base class for all periodic tasks.

    Subclasses implement ``execute()`` with their single-iteration logic.
    The shared ``run()`` method handles the loop, error logging and the
    interruptible wait between iterations.
    """

    def __init__(
        self,
        *,
        name: str,
        interval: float,
        stop_event: asyncio.Event,
        executor: Executor | None = None,
        jitter: float = 0.0,
    ) -> None:
        self.name = name
        self.interval = interval
        self.stop_event = stop_event
        self.executor = executor
        self.jitter = jitter
        self.cycles = 0

    # ── helpers available to subclasses ──────────────────────────────────

    async def run_blocking(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a blocking function in the thread-pool executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self.executor,
            lambda: func(*args, **kwargs),
        )

    def next_delay(self) -> float:
        if self.jitter > 0:
            return self.interval + random.uniform(0, self.jitter)
        return self.interval

    async def _wait_for_stop(self, delay: float) -> bool:
        """Sleep up to ``delay`` seconds; True if the stop event fired."""
        try:
            await asyncio.wait_for(self.stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    # ── lifecycle ────────────────────────────────────────────────────────

    @abstractmethod
    async def execute(self) -> None:
        """Single iteration of the task, implemented by subclasses."""

    async def run(self) -> None:
        """Main loop: execute → wait, until stopped."""
        while not self.stop_event.is_set():
            try:
                await self.execute()
            except Exception as exc:
                logging.error(f"{self.name} failed: {exc}")
            self.cycles += 1
            if await self._wait_for_stop(self.next_delay()):
                break
