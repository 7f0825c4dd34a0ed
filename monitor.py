from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from config import SETTINGS, Endpoint, Settings
from core import EndpointProberTask, HostSamplerTask, Probe, TaskOrchestrator
from errors import ProbeUnavailableError
from infrastructure import (
    MetricsRegistry,
    MetricsServer,
    ProcessManager,
    register_exporter_metrics,
    start_metrics_server,
)
from services import HostInfoService, PingService


class Monitor:
    """
    Exporter orchestrator.

    Owns the metrics registry and wires one EndpointProberTask per endpoint,
    the HostSamplerTask and the metrics server around it. The registry is
    the only state shared between those pieces.
    """

    def __init__(
        self,
        endpoints: Iterable[Endpoint],
        settings: Settings | None = None,
        probe: Probe | None = None,
        host_info: HostInfoService | None = None,
    ) -> None:
        self.settings = settings or SETTINGS
        self.endpoints = list(endpoints)

        self.executor = ThreadPoolExecutor(
            max_workers=self.settings.MAX_WORKER_THREADS,
            thread_name_prefix="exporter_",
        )
        self.stop_event = asyncio.Event()

        # Registry and metric definitions live for the whole process
        self.registry = MetricsRegistry()
        self.metrics = register_exporter_metrics(self.registry)

        # Services
        self.process_manager = ProcessManager(max_concurrent=self.settings.MAX_CONCURRENT_PINGS)
        self.ping_service = PingService(
            self.process_manager,
            timeout=self.settings.PING_TIMEOUT_SECONDS,
            executor=self.executor,
        )
        self.host_info = host_info or HostInfoService()
        self._uses_ping_service = probe is None
        self.probe: Probe = probe or self.ping_service.ping_host_async

        self.metrics_server: MetricsServer | None = None

        # ── Background Task Orchestrator ────────────────────────────────
        self._orchestrator = TaskOrchestrator()
        for endpoint in self.endpoints:
            self._orchestrator.register(EndpointProberTask(
                endpoint=endpoint,
                probe=self.probe,
                metrics=self.metrics,
                interval=self.settings.PROBE_INTERVAL,
                jitter=self.settings.PROBE_JITTER_SECONDS,
                stop_event=self.stop_event,
                executor=self.executor,
            ))
        self._orchestrator.register(HostSamplerTask(
            host_info=self.host_info,
            metrics=self.metrics,
            interval=self.settings.HOST_SAMPLE_INTERVAL,
            stop_event=self.stop_event,
            executor=self.executor,
        ))

    @property
    def task_names(self) -> list[str]:
        return self._orchestrator.registered_names

    @property
    def metrics_url(self) -> str:
        if self.metrics_server is not None:
            return self.metrics_server.url
        return f"http://{self.settings.METRICS_ADDR}:{self.settings.METRICS_PORT}/metrics"

    def check_probe_available(self) -> None:
        """Fail fast when no ping mechanism exists on this host.

        Raises:
            ProbeUnavailableError: endpoints are configured but cannot be probed.
        """
        if self.endpoints and self._uses_ping_service and not self.ping_service.is_available():
            raise ProbeUnavailableError(
                "No 'ping' command found and raw ICMP sockets are not permitted; "
                "install iputils-ping (or equivalent) or grant CAP_NET_RAW to probe endpoints"
            )

    def start(self) -> list[asyncio.Task]:
        """Start the metrics server and every probe/sample loop.

        Raises:
            ProbeUnavailableError: see ``check_probe_available``.
            OSError: the metrics address could not be bound.
        """
        self.check_probe_available()
        self.metrics_server = start_metrics_server(
            self.registry,
            addr=self.settings.METRICS_ADDR,
            port=self.settings.METRICS_PORT,
        )
        logging.info(f"Probing {len(self.endpoints)} endpoints every {self.settings.PROBE_INTERVAL}s")
        return self._orchestrator.start_all()

    async def wait(self) -> None:
        """Block until stop is requested or every task has ended."""
        stop_waiter = asyncio.create_task(self.stop_event.wait())
        tasks_waiter = asyncio.create_task(self._orchestrator.wait())
        try:
            await asyncio.wait({stop_waiter, tasks_waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in (stop_waiter, tasks_waiter):
                waiter.cancel()
            await asyncio.gather(stop_waiter, tasks_waiter, return_exceptions=True)

    async def stop(self) -> None:
        """Stop loops, the metrics server, child processes and the executor."""
        logging.info("Monitor shutdown initiated...")
        self.stop_event.set()

        await self._orchestrator.stop_all(self.settings.SHUTDOWN_TIMEOUT_SECONDS)
        await self.process_manager.cleanup()

        if self.metrics_server:
            try:
                self.metrics_server.stop()
                logging.info("Metrics server stopped")
            except OSError as exc:
                logging.warning(f"Metrics server shutdown error: {exc}")

        self.executor.shutdown(wait=False, cancel_futures=True)
        logging.info("Monitor shutdown complete")
