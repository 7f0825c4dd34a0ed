"""
Core probing and sampling loops.

- PingHandler: Runs one probe against an endpoint and times it
- MetricsHandler: Records probe results into the endpoint's series

Background Task System:
- BackgroundTask: ABC for all periodic tasks
- EndpointProberTask: One per configured endpoint
- HostSamplerTask: Host CPU/load/memory gauges
- TaskOrchestrator: Registry and lifecycle manager for background tasks
"""

from .ping_handler import PingHandler, Probe, ProbeResult
from .metrics_handler import MetricsHandler

from .background_task import BackgroundTask
from .endpoint_prober_task import EndpointProberTask
from .host_sampler_task import HostSamplerTask
from .task_orchestrator import TaskOrchestrator

__all__ = [
    "PingHandler",
    "Probe",
    "ProbeResult",
    "MetricsHandler",
    "BackgroundTask",
    "EndpointProberTask",
    "HostSamplerTask",
    "TaskOrchestrator",
]
