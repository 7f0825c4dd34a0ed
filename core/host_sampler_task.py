"""Host sampler: refreshes CPU, load and memory gauges."""

from __future__ import annotations

import asyncio
from concurrent.futures import Executor
from typing import TYPE_CHECKING

from core.background_task import BackgroundTask

if TYPE_CHECKING:
    from infrastructure.metrics import ExporterMetrics
    from services import HostInfoService


class HostSamplerTask(BackgroundTask):
    """Periodic host statistics sampler.

    Each gauge is updated only when its own read succeeded; the previous
    value stays exposed otherwise.
    """

    def __init__(
        self,
        *,
        host_info: HostInfoService,
        metrics: ExporterMetrics,
        interval: float,
        stop_event: asyncio.Event,
        executor: Executor | None = None,
    ) -> None:
        super().__init__(
            name="host_sampler",
            interval=interval,
            stop_event=stop_event,
            executor=executor,
        )
        self.host_info = host_info
        self.metrics = metrics

    async def execute(self) -> None:
        stats = await self.run_blocking(self.host_info.sample)

        if stats.cpu_cores is not None:
            self.metrics.cpu_cores.set(stats.cpu_cores)
        if stats.load_average is not None:
            self.metrics.load_average.set(stats.load_average)
        if stats.memory_total is not None:
            self.metrics.memory_total.set(stats.memory_total)
