"""
Exporter error hierarchy.

All of these are startup-fatal: they describe an inconsistent configuration or
host, never a condition the probe loops should retry.

    ConfigError              -- endpoint file missing, unreadable or malformed
    MetricRegistrationError  -- conflicting or invalid metric definition
    ProbeUnavailableError    -- no reachability facility on this host
"""

from __future__ import annotations


class ExporterError(RuntimeError):
    """Base for all ping-exporter errors."""


class ConfigError(ExporterError):
    """The endpoint configuration could not be loaded."""


class MetricRegistrationError(ExporterError):
    """A metric name is invalid or already registered with another definition."""


class ProbeUnavailableError(ExporterError):
    """Neither the system ping command nor pythonping can be used."""
