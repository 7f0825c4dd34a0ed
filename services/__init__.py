"""Probe and host-information services package."""

from .ping_service import PingService
from .host_info_service import HostInfoService, HostStats

__all__ = [
    "PingService",
    "HostInfoService",
    "HostStats",
]
