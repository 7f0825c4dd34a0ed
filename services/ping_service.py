from __future__ import annotations

import asyncio
import ipaddress
import logging
import shutil
import socket
import sys
from concurrent.futures import Executor

from infrastructure.process_manager import ProcessManager

try:
    from pythonping import ping as pythonping_ping  # type: ignore[import]
    PYTHONPING_AVAILABLE = True
except Exception:
    pythonping_ping = None
    PYTHONPING_AVAILABLE = False


class PingService:
    """Single-shot reachability probe.

    Uses the system ``ping`` binary through the ProcessManager. On hosts
    without one, falls back to pythonping on a worker thread.
    """

    def __init__(
        self,
        process_manager: ProcessManager,
        timeout: float = 2.0,
        executor: Executor | None = None,
    ) -> None:
        self.process_manager = process_manager
        self.timeout = timeout
        self.executor = executor
        self._ping_cmd: str | None = None
        self._ping_checked = False

    def _system_ping(self) -> str | None:
        """Path of the ping command, looked up once."""
        if not self._ping_checked:
            self._ping_cmd = shutil.which("ping")
            self._ping_checked = True
        return self._ping_cmd

    def is_available(self) -> bool:
        """Check if any ping mechanism can be used on this host.

        pythonping sends ICMP over a raw socket, so without a system ping it
        only counts when this process may open one.
        """
        if self._system_ping() is not None:
            return True
        return PYTHONPING_AVAILABLE and self._raw_icmp_permitted()

    @staticmethod
    def _raw_icmp_permitted() -> bool:
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
        except OSError as exc:
            logging.debug(f"Raw ICMP socket unavailable: {exc}")
            return False
        sock.close()
        return True

    def build_ping_command(self, host: str) -> list[str] | None:
        """Build a one-packet ping command for ``host``, or None if it can't be pinged.

        Only IPv6 literals select the IPv6 form: ``ping -6`` with iputils,
        ``ping6`` on macOS/BSD. Hostnames are passed through and the ping
        binary decides the address family, so a name with only AAAA
        records needs a ping that falls back to IPv6 on its own.
        """
        ping_cmd = self._system_ping()
        if not ping_cmd:
            return None

        # Security check: prevent argument injection
        if not host.strip() or host.strip().startswith("-"):
            logging.error(f"Security: Invalid host '{host}'")
            return None

        if sys.platform == "win32":
            return [ping_cmd, "-n", "1", host]

        try:
            is_ipv6 = ipaddress.ip_address(host).version == 6
        except ValueError:
            is_ipv6 = False
        if not is_ipv6:
            return [ping_cmd, "-c", "1", host]

        if sys.platform == "darwin" or "bsd" in sys.platform:
            ping6_cmd = shutil.which("ping6")
            if ping6_cmd:
                return [ping6_cmd, "-c", "1", host]
            logging.warning(f"No ping6 command found, cannot probe {host}")
            return None
        return [ping_cmd, "-6", "-c", "1", host]

    async def ping_host_async(self, host: str) -> bool:
        """Probe ``host`` once; True if it answered.

        Timeouts and non-zero exit codes are reported as False. Only a
        failure to launch the probe at all propagates.
        """
        if self._system_ping() is None:
            if not PYTHONPING_AVAILABLE:
                return False
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(self.executor, self._ping_with_pythonping, host)

        cmd = self.build_ping_command(host)
        if cmd is None:
            return False

        try:
            _, returncode = await self.process_manager.run_command(cmd, timeout=self.timeout)
        except asyncio.TimeoutError:
            return False
        return returncode == 0

    def _ping_with_pythonping(self, host: str) -> bool:
        """Fallback ping using pythonping library (blocking)."""
        if pythonping_ping is None:
            return False
        try:
            resp = pythonping_ping(host, count=1, timeout=self.timeout)
        except (OSError, RuntimeError) as exc:
            logging.debug(f"pythonping failed for {host}: {exc}")
            return False
        return bool(resp.success())
