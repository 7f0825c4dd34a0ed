from __future__ import annotations

"""Infrastructure layer: metrics registry, exposition and subprocess management."""

from .registry import (
    CounterSeries,
    GaugeSeries,
    HistogramSeries,
    MetricKind,
    MetricsRegistry,
    SeriesFamily,
)
from .exposition import CONTENT_TYPE, generate_text
from .metrics import (
    EndpointSeries,
    ExporterMetrics,
    MetricsServer,
    endpoint_series,
    register_exporter_metrics,
    start_metrics_server,
)
from .process_manager import ProcessManager

__all__ = [
    # Registry
    "CounterSeries",
    "GaugeSeries",
    "HistogramSeries",
    "MetricKind",
    "MetricsRegistry",
    "SeriesFamily",
    # Exposition
    "CONTENT_TYPE",
    "generate_text",
    "EndpointSeries",
    "ExporterMetrics",
    "MetricsServer",
    "endpoint_series",
    "register_exporter_metrics",
    "start_metrics_server",
    # Processes
    "ProcessManager",
]
