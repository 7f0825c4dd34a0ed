"""
Task orchestrator: registry for the exporter's periodic tasks.

Provides register/start_all/wait/stop_all lifecycle management.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.background_task import BackgroundTask


class TaskOrchestrator:
    """Manages registration and lifecycle of background tasks."""

    def __init__(self) -> None:
        self._tasks: list[BackgroundTask] = []
        self._running: list[asyncio.Task] = []

    def register(self, task: BackgroundTask) -> None:
        """Register a background task."""
        self._tasks.append(task)

    def register_all(self, tasks: list[BackgroundTask]) -> None:
        """Register multiple tasks at once."""
        self._tasks.extend(tasks)

    @property
    def tasks(self) -> list[BackgroundTask]:
        return list(self._tasks)

    @property
    def registered_names(self) -> list[str]:
        """Names of all registered tasks."""
        return [t.name for t in self._tasks]

    def start_all(self) -> list[asyncio.Task]:
        """Create asyncio.Tasks for all registered background tasks.

        Returns list of asyncio.Task objects for external tracking.
        """
        self._running = [
            asyncio.create_task(task.run(), name=task.name)
            for task in self._tasks
        ]
        names = [t.name for t in self._tasks]
        logging.info(f"Started {len(names)} background tasks: {', '.join(names)}")
        return list(self._running)

    async def wait(self) -> None:
        """Block until every running task has finished.

        Cancelling the caller leaves the tasks themselves running.
        """
        if self._running:
            await asyncio.wait(self._running)

    async def stop_all(self, timeout: float = 5.0) -> None:
        """Wait up to ``timeout`` for tasks to exit, then cancel the rest.

        Callers set the shared stop event first so loops can leave at their
        next wait; cancellation only covers tasks stuck inside a probe.
        """
        if not self._running:
            return

        _, pending = await asyncio.wait(self._running, timeout=timeout)
        if pending:
            logging.warning(f"{len(pending)} background tasks did not stop in {timeout}s, cancelling")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        self._running.clear()
