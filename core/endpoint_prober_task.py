"""Endpoint prober: probes one configured endpoint on a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from typing import TYPE_CHECKING

from core.background_task import BackgroundTask
from core.metrics_handler import MetricsHandler
from core.ping_handler import PingHandler, Probe
from infrastructure.metrics import endpoint_series

if TYPE_CHECKING:
    from config.endpoints import Endpoint
    from infrastructure.metrics import ExporterMetrics


class EndpointProberTask(BackgroundTask):
    """Probe → record → wait, forever, for a single endpoint."""

    def __init__(
        self,
        *,
        endpoint: Endpoint,
        probe: Probe,
        metrics: ExporterMetrics,
        interval: float,
        stop_event: asyncio.Event,
        executor: Executor | None = None,
        jitter: float = 0.0,
    ) -> None:
        super().__init__(
            name=f"prober:{endpoint.name}@{endpoint.address}",
            interval=interval,
            stop_event=stop_event,
            executor=executor,
            jitter=jitter,
        )
        self.endpoint = endpoint
        self.ping_handler = PingHandler(probe, endpoint, executor)
        # Series handles are cached after their first write.
        self.metrics_handler = MetricsHandler(endpoint_series(metrics, endpoint.name, endpoint.address))

    async def execute(self) -> None:
        result = await self.ping_handler.execute_async()
        self.metrics_handler.record(result)
        if not result.success:
            logging.debug(f"{self.endpoint.name} ({self.endpoint.address}) unreachable")
