"""Exporter configuration: environment settings and the endpoint file."""

from .settings_model import Settings
from .settings import (
    CONFIG_FILE,
    HOST_SAMPLE_INTERVAL,
    LOG_FILE,
    LOG_LEVEL,
    MAX_CONCURRENT_PINGS,
    MAX_WORKER_THREADS,
    METRICS_ADDR,
    METRICS_PORT,
    PING_TIMEOUT_SECONDS,
    PROBE_INTERVAL,
    PROBE_JITTER_SECONDS,
    SHUTDOWN_TIMEOUT_SECONDS,
    VERSION,
    SETTINGS,
)
from .endpoints import Endpoint, EndpointsFile, load_endpoints

__all__ = [
    "Settings",
    "SETTINGS",
    "CONFIG_FILE",
    "HOST_SAMPLE_INTERVAL",
    "LOG_FILE",
    "LOG_LEVEL",
    "MAX_CONCURRENT_PINGS",
    "MAX_WORKER_THREADS",
    "METRICS_ADDR",
    "METRICS_PORT",
    "PING_TIMEOUT_SECONDS",
    "PROBE_INTERVAL",
    "PROBE_JITTER_SECONDS",
    "SHUTDOWN_TIMEOUT_SECONDS",
    "VERSION",
    "Endpoint",
    "EndpointsFile",
    "load_endpoints",
]
