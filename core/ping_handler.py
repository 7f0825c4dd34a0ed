"""
Ping handler - runs one probe against an endpoint and times it.

Single Responsibility: Execute the probe and return a structured result.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Union

if TYPE_CHECKING:
    from config.endpoints import Endpoint

# A probe answers "is this address reachable?". Coroutine functions are
# awaited; plain callables are assumed to block and run on the executor, and
# an awaitable they return is awaited on the loop.
Probe = Callable[[str], Union[bool, Awaitable[bool]]]


@dataclass(frozen=True)
class ProbeResult:
    """Result of one probe. ``latency`` is seconds, None for failures."""
    success: bool
    latency: float | None
    endpoint: Endpoint


class PingHandler:
    """
    Handles probe execution for a single endpoint.

    Failures of the probe mechanism itself (exceptions) are reported as an
    unsuccessful result so one bad cycle never ends the prober loop.
    """

    def __init__(self, probe: Probe, endpoint: Endpoint, executor: Executor | None = None) -> None:
        self.probe = probe
        self.endpoint = endpoint
        self.executor = executor
        self._is_async = inspect.iscoroutinefunction(probe) or inspect.iscoroutinefunction(
            getattr(probe, "__call__", None)
        )

    async def _call_probe(self) -> bool:
        if self._is_async:
            return bool(await self.probe(self.endpoint.address))  # type: ignore[misc]
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(self.executor, self.probe, self.endpoint.address)
        # Plain callables may still hand back an awaitable (lambdas, partials)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    async def execute_async(self) -> ProbeResult:
        """Run the probe once, measuring wall-clock time around the call."""
        start = time.perf_counter()
        try:
            success = await self._call_probe()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logging.debug(f"Probe error for {self.endpoint.name} ({self.endpoint.address}): {exc}")
            success = False
        elapsed = time.perf_counter() - start

        return ProbeResult(
            success=success,
            latency=elapsed if success else None,
            endpoint=self.endpoint,
        )
