"""Host resource readings backed by psutil."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import psutil


@dataclass(frozen=True)
class HostStats:
    """One sampling pass. A field is None when its read failed."""
    cpu_cores: int | None
    load_average: float | None
    memory_total: int | None


class HostInfoService:
    """Reads CPU core count, 1-minute load average and total memory.

    Each statistic is read independently so restricted environments
    (containers without /proc/loadavg, sandboxed hosts) still report
    whatever is available.
    """

    def read_cpu_cores(self) -> int | None:
        return psutil.cpu_count()

    def read_load_average(self) -> float | None:
        return psutil.getloadavg()[0]

    def read_memory_total(self) -> int | None:
        # Bytes
        return psutil.virtual_memory().total

    def sample(self) -> HostStats:
        return HostStats(
            cpu_cores=self._safe_read("cpu_cores", self.read_cpu_cores),
            load_average=self._safe_read("load_average", self.read_load_average),
            memory_total=self._safe_read("memory_total", self.read_memory_total),
        )

    @staticmethod
    def _safe_read(stat: str, reader: Callable[[], float | int | None]) -> float | int | None:
        try:
            return reader()
        except Exception as exc:
            logging.debug(f"Host stat {stat} unavailable: {exc}")
            return None
