from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import Iterable

from rich.console import Console

from config import Endpoint, Settings
from monitor import Monitor


class ExporterApp:
    def __init__(self, monitor: Monitor, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)
        self.monitor = monitor

    def _request_stop(self, sig_name: str) -> None:
        if self.monitor.stop_event.is_set():
            return
        logging.info(f"Received {sig_name}, stopping...")
        self.monitor.stop_event.set()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        signals = [signal.SIGINT, signal.SIGTERM]
        if hasattr(signal, "SIGHUP"):
            signals.append(signal.SIGHUP)  # type: ignore[attr-defined]

        for sig in signals:
            try:
                loop.add_signal_handler(sig, self._request_stop, sig.name)
            except (NotImplementedError, RuntimeError):
                # Windows event loops have no add_signal_handler
                signal.signal(
                    sig,
                    lambda signum, frame: loop.call_soon_threadsafe(
                        self._request_stop, signal.Signals(signum).name
                    ),
                )

    async def run(self) -> None:
        """Start everything and block until a signal or all tasks end."""
        self._install_signal_handlers()

        self.monitor.start()
        url = self.monitor.metrics_url
        logging.info(f"Prometheus metrics are being exposed at {url}")
        self.console.print(f"\n[bold green]>>> Exposing metrics at {url} <<<[/bold green]")
        self.console.print(
            f"[dim]{len(self.monitor.endpoints)} endpoints, press Ctrl+C to stop.[/dim]\n"
        )

        try:
            await self.monitor.wait()
        finally:
            await self.monitor.stop()
            self.console.print("[dim]All probers stopped.[/dim]")


async def run_async_main(endpoints: Iterable[Endpoint], settings: Settings) -> None:
    app = ExporterApp(Monitor(endpoints, settings=settings))
    await app.run()


def main(endpoints: Iterable[Endpoint], settings: Settings) -> None:
    try:
        asyncio.run(run_async_main(endpoints, settings))
    except KeyboardInterrupt:  # pragma: no cover - signal races on Windows
        sys.exit(130)


__all__ = ["ExporterApp", "main", "run_async_main"]
