import asyncio
import unittest
from unittest.mock import patch

from core import HostSamplerTask
from infrastructure import MetricsRegistry, register_exporter_metrics
from services import HostInfoService


class FakeHostInfo(HostInfoService):
    def __init__(self, cpu=8, load=0.5, mem=16 * 1024 ** 3, load_error=None):
        self.cpu = cpu
        self.load = load
        self.mem = mem
        self.load_error = load_error

    def read_cpu_cores(self):
        return self.cpu

    def read_load_average(self):
        if self.load_error:
            raise self.load_error
        return self.load

    def read_memory_total(self):
        return self.mem


class TestHostInfoService(unittest.TestCase):
    def test_sample_reads_psutil(self):
        with patch("services.host_info_service.psutil") as psutil_mock:
            psutil_mock.cpu_count.return_value = 4
            psutil_mock.getloadavg.return_value = (1.5, 1.0, 0.5)
            psutil_mock.virtual_memory.return_value.total = 2048

            stats = HostInfoService().sample()

        self.assertEqual(stats.cpu_cores, 4)
        self.assertEqual(stats.load_average, 1.5)
        self.assertEqual(stats.memory_total, 2048)

    def test_failed_read_is_none(self):
        stats = FakeHostInfo(load_error=OSError("no /proc/loadavg")).sample()

        self.assertEqual(stats.cpu_cores, 8)
        self.assertIsNone(stats.load_average)
        self.assertEqual(stats.memory_total, 16 * 1024 ** 3)


class TestHostSamplerTask(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.registry = MetricsRegistry()
        self.metrics = register_exporter_metrics(self.registry)
        self.stop = asyncio.Event()

    def _task(self, host_info):
        return HostSamplerTask(host_info=host_info, metrics=self.metrics, interval=60, stop_event=self.stop)

    async def test_sets_all_gauges(self):
        await self._task(FakeHostInfo()).execute()

        self.assertEqual(self.registry.get_sample_value("system_cpu_cores"), 8)
        self.assertEqual(self.registry.get_sample_value("system_load_average"), 0.5)
        self.assertEqual(self.registry.get_sample_value("system_memory_total"), 16 * 1024 ** 3)

    async def test_partial_failure_updates_remaining_gauges(self):
        await self._task(FakeHostInfo(load_error=OSError("unavailable"))).execute()

        self.assertEqual(self.registry.get_sample_value("system_cpu_cores"), 8)
        self.assertEqual(self.registry.get_sample_value("system_load_average"), 0)
        self.assertEqual(self.registry.get_sample_value("system_memory_total"), 16 * 1024 ** 3)

    async def test_failed_read_keeps_previous_value(self):
        host_info = FakeHostInfo(load=2.0)
        task = self._task(host_info)
        await task.execute()

        host_info.load_error = OSError("gone")
        host_info.cpu = 16
        await task.execute()

        self.assertEqual(self.registry.get_sample_value("system_load_average"), 2.0)
        self.assertEqual(self.registry.get_sample_value("system_cpu_cores"), 16)

    async def test_cpu_count_none_is_skipped(self):
        await self._task(FakeHostInfo(cpu=None)).execute()

        self.assertEqual(self.registry.get_sample_value("system_cpu_cores"), 0)
        self.assertEqual(self.registry.get_sample_value("system_load_average"), 0.5)

    async def test_run_samples_immediately_then_stops(self):
        task = self._task(FakeHostInfo())
        runner = asyncio.create_task(task.run())
        await asyncio.sleep(0.05)
        self.stop.set()
        await asyncio.wait_for(runner, timeout=1)

        self.assertEqual(task.cycles, 1)
        self.assertEqual(self.registry.get_sample_value("system_cpu_cores"), 8)


if __name__ == "__main__":
    unittest.main()
