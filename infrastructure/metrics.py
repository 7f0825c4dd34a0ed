from __future__ import annotations

"""Exporter metric definitions and the /metrics HTTP server."""

import logging
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from .exposition import CONTENT_TYPE, generate_text
from .registry import CounterSeries, GaugeSeries, HistogramSeries, MetricsRegistry, SeriesFamily

ENDPOINT_LABELS = ("name", "address")


@dataclass(frozen=True)
class ExporterMetrics:
    """Every family the exporter writes, plus the resolved host gauges."""
    cpu_cores: GaugeSeries
    load_average: GaugeSeries
    memory_total: GaugeSeries
    ping_success: SeriesFamily
    ping_fail: SeriesFamily
    ping_latency: SeriesFamily


def register_exporter_metrics(registry: MetricsRegistry) -> ExporterMetrics:
    """Define the exporter's metrics on ``registry``.

    Host gauges are registered before the ping families so they lead the
    exposition output.
    """
    cpu = registry.gauge("system_cpu_cores", "Number of CPU cores")
    load = registry.gauge("system_load_average", "System load average")
    mem = registry.gauge("system_memory_total", "Total system memory")

    return ExporterMetrics(
        cpu_cores=cpu.with_labels(),  # type: ignore[arg-type]
        load_average=load.with_labels(),  # type: ignore[arg-type]
        memory_total=mem.with_labels(),  # type: ignore[arg-type]
        ping_success=registry.counter("ping_success", "Count of successful pings", ENDPOINT_LABELS),
        ping_fail=registry.counter("ping_fail", "Count of failed pings", ENDPOINT_LABELS),
        ping_latency=registry.histogram("ping_latency", "Ping latency in seconds", ENDPOINT_LABELS),
    )


class EndpointSeries:
    """Series handles for one ``(name, address)`` label set.

    Each handle is resolved on its first write and cached, so an endpoint
    that never succeeds never exposes success or latency series.
    """

    def __init__(self, metrics: ExporterMetrics, name: str, address: str) -> None:
        self.metrics = metrics
        self.labels = (name, address)
        self._success: CounterSeries | None = None
        self._fail: CounterSeries | None = None
        self._latency: HistogramSeries | None = None

    @property
    def success(self) -> CounterSeries:
        if self._success is None:
            self._success = self.metrics.ping_success.with_labels(*self.labels)  # type: ignore[assignment]
        return self._success  # type: ignore[return-value]

    @property
    def fail(self) -> CounterSeries:
        if self._fail is None:
            self._fail = self.metrics.ping_fail.with_labels(*self.labels)  # type: ignore[assignment]
        return self._fail  # type: ignore[return-value]

    @property
    def latency(self) -> HistogramSeries:
        if self._latency is None:
            self._latency = self.metrics.ping_latency.with_labels(*self.labels)  # type: ignore[assignment]
        return self._latency  # type: ignore[return-value]


def endpoint_series(metrics: ExporterMetrics, name: str, address: str) -> EndpointSeries:
    return EndpointSeries(metrics, name, address)


class _RegistryHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, server_address: tuple[str, int], registry: MetricsRegistry) -> None:
        self.registry = registry
        super().__init__(server_address, MetricsHandler)


class MetricsHandler(BaseHTTPRequestHandler):
    """Serves a registry snapshot on GET /metrics."""

    server: _RegistryHTTPServer

    def do_GET(self) -> None:
        """Handle GET requests for metrics."""
        if self.path.split("?", 1)[0] != "/metrics":
            self.send_error(404)
            return

        try:
            data = generate_text(self.server.registry.snapshot())
        except Exception as exc:
            logging.error(f"Metrics rendering error: {exc}")
            self.send_error(500, "Internal Server Error")
            return

        self.send_response(200)
        self.send_header("Content-Type", CONTENT_TYPE)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format: str, *args) -> None:
        """Route access logs to the application logger."""
        logging.debug(f"Metrics server: {format % args}")


class MetricsServer:
    """Prometheus pull endpoint running in a background thread."""

    def __init__(self, registry: MetricsRegistry, addr: str = "127.0.0.1", port: int = 9898) -> None:
        self.registry = registry
        self.addr = addr
        self.port = port
        self.server: _RegistryHTTPServer | None = None
        self.thread: threading.Thread | None = None
        self._running = False

    @property
    def url(self) -> str:
        return f"http://{self.addr}:{self.port}/metrics"

    def start(self) -> None:
        """Bind and start serving.

        Raises:
            OSError: the address could not be bound.
        """
        if self._running:
            return

        try:
            self.server = _RegistryHTTPServer((self.addr, self.port), self.registry)
        except OSError as exc:
            logging.error(f"Failed to start metrics server on {self.addr}:{self.port}: {exc}")
            raise

        # Port 0 binds an ephemeral port; report the real one.
        self.port = self.server.server_address[1]
        self.thread = threading.Thread(target=self.server.serve_forever, name="metrics_server", daemon=True)
        self.thread.start()
        self._running = True
        logging.info(f"Metrics server started on {self.url}")

    def stop(self) -> None:
        """Stop metrics server."""
        if not self._running or self.server is None:
            return
        self._running = False
        self.server.shutdown()
        self.server.server_close()
        if self.thread is not None:
            self.thread.join(timeout=5.0)


def start_metrics_server(registry: MetricsRegistry, addr: str = "127.0.0.1", port: int = 9898) -> MetricsServer:
    """Start the /metrics HTTP server for ``registry``.

    Args:
        registry: Registry whose snapshot every request renders
        addr: Network address to bind to (127.0.0.1 for localhost-only)
        port: Port to listen on (0 picks a free port)

    Returns:
        The running MetricsServer
    """
    server = MetricsServer(registry, addr=addr, port=port)
    server.start()
    return server
