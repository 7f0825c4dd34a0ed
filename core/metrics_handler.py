"""
Metrics handler - records probe results into the registry.

Single Responsibility: Update one endpoint's series based on probe results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.metrics import EndpointSeries
    from .ping_handler import ProbeResult


class MetricsHandler:
    """
    Writes probe outcomes into an endpoint's success/fail counters and
    latency histogram.
    """

    def __init__(self, series: EndpointSeries) -> None:
        self.series = series

    def record(self, result: ProbeResult) -> None:
        """Record a single probe outcome.

        Latency is observed only for successful probes; a failed probe's
        timing never reaches the histogram.
        """
        if result.success:
            self.series.success.increment()
            if result.latency is not None:
                self.series.latency.observe(result.latency)
        else:
            self.series.fail.increment()
