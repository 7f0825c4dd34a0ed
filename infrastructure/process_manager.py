import asyncio
import logging
from typing import List, Set, Tuple


class ProcessManager:
    """
    Bounded runner for short-lived probe subprocesses.

    Limits how many children run at once and tracks them so shutdown can
    terminate anything still in flight. Create one per event loop.
    """
    def __init__(self, max_concurrent: int = 50) -> None:
        self._active: Set[asyncio.subprocess.Process] = set()
        self._semaphore = asyncio.Semaphore(max_concurrent)

    @property
    def active_count(self) -> int:
        return len(self._active)

    async def run_command(self, cmd: List[str], timeout: float | None = None) -> Tuple[bytes, int]:
        """
        Run ``cmd`` and return (stdout, returncode).

        Waits for a free slot when ``max_concurrent`` children are running.

        Raises:
            asyncio.TimeoutError: If timeout is exceeded (the child is killed and reaped)
            OSError: If the executable cannot be started
        """
        async with self._semaphore:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                stdin=asyncio.subprocess.DEVNULL,
            )
            self._active.add(process)
            try:
                stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
                returncode = process.returncode if process.returncode is not None else -1
                return stdout or b"", returncode
            except asyncio.TimeoutError:
                logging.debug(f"Command timed out: {' '.join(cmd)}")
                await self._kill(process)
                raise
            except asyncio.CancelledError:
                await self._kill(process)
                raise
            finally:
                self._active.discard(process)

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        # Reap to avoid zombies
        try:
            await asyncio.wait_for(process.wait(), timeout=5.0)
        except asyncio.TimeoutError:
            logging.error(f"Failed to reap timed-out process: {process.pid}")

    async def cleanup(self) -> None:
        """Terminate all tracked processes."""
        processes = list(self._active)
        self._active.clear()
        if not processes:
            return

        logging.info(f"Cleaning up {len(processes)} active subprocesses...")
        for proc in processes:
            if proc.returncode is None:
                try:
                    proc.terminate()
                except ProcessLookupError:
                    pass

        # Give them a chance to terminate gracefully
        await asyncio.sleep(0.1)

        for proc in processes:
            if proc.returncode is None:
                logging.warning(f"Process {proc.pid} did not terminate, killing...")
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
