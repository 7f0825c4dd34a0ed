import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from infrastructure.process_manager import ProcessManager
from services import PingService
from services import ping_service as ping_module


def _service(process_manager=None, ping_path="/bin/ping"):
    service = PingService(process_manager or MagicMock(spec=ProcessManager), timeout=1.0)
    service._ping_cmd = ping_path
    service._ping_checked = True
    return service


class TestBuildPingCommand(unittest.TestCase):
    def setUp(self):
        patcher = patch.object(ping_module.sys, "platform", "linux")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_ipv4(self):
        self.assertEqual(_service().build_ping_command("10.0.0.1"), ["/bin/ping", "-c", "1", "10.0.0.1"])

    def test_hostname(self):
        self.assertEqual(_service().build_ping_command("example.com"), ["/bin/ping", "-c", "1", "example.com"])

    def test_ipv6_literal(self):
        self.assertEqual(
            _service().build_ping_command("2001:db8::1"),
            ["/bin/ping", "-6", "-c", "1", "2001:db8::1"],
        )

    def test_rejects_option_injection(self):
        self.assertIsNone(_service().build_ping_command("-f"))
        self.assertIsNone(_service().build_ping_command("  "))

    def test_windows_uses_count_flag(self):
        with patch.object(ping_module.sys, "platform", "win32"):
            self.assertEqual(_service().build_ping_command("10.0.0.1"), ["/bin/ping", "-n", "1", "10.0.0.1"])

    def test_no_system_ping(self):
        self.assertIsNone(_service(ping_path=None).build_ping_command("10.0.0.1"))

    def test_macos_ipv6_uses_ping6(self):
        with patch.object(ping_module.sys, "platform", "darwin"), \
                patch.object(ping_module.shutil, "which", return_value="/sbin/ping6"):
            self.assertEqual(
                _service(ping_path="/sbin/ping").build_ping_command("2001:db8::1"),
                ["/sbin/ping6", "-c", "1", "2001:db8::1"],
            )

    def test_bsd_ipv6_without_ping6(self):
        with patch.object(ping_module.sys, "platform", "freebsd14"), \
                patch.object(ping_module.shutil, "which", return_value=None):
            self.assertIsNone(_service(ping_path="/sbin/ping").build_ping_command("2001:db8::1"))

    def test_macos_ipv4_keeps_ping(self):
        with patch.object(ping_module.sys, "platform", "darwin"):
            self.assertEqual(
                _service(ping_path="/sbin/ping").build_ping_command("10.0.0.1"),
                ["/sbin/ping", "-c", "1", "10.0.0.1"],
            )


class TestAvailability(unittest.TestCase):
    def test_system_ping_lookup_is_cached(self):
        with patch.object(ping_module.shutil, "which", return_value="/usr/bin/ping") as which:
            service = PingService(MagicMock())
            self.assertTrue(service.is_available())
            self.assertTrue(service.is_available())
        which.assert_called_once_with("ping")

    def test_unavailable_without_ping_or_pythonping(self):
        with patch.object(ping_module.shutil, "which", return_value=None), \
                patch.object(ping_module, "PYTHONPING_AVAILABLE", False):
            self.assertFalse(PingService(MagicMock()).is_available())

    def test_pythonping_without_raw_socket_permission_is_unavailable(self):
        with patch.object(ping_module.shutil, "which", return_value=None), \
                patch.object(ping_module, "PYTHONPING_AVAILABLE", True), \
                patch.object(ping_module.socket, "socket",
                             side_effect=PermissionError(1, "Operation not permitted")):
            self.assertFalse(PingService(MagicMock()).is_available())

    def test_pythonping_with_raw_socket_permission_is_available(self):
        with patch.object(ping_module.shutil, "which", return_value=None), \
                patch.object(ping_module, "PYTHONPING_AVAILABLE", True), \
                patch.object(ping_module.socket, "socket") as socket_mock:
            self.assertTrue(PingService(MagicMock()).is_available())
        socket_mock.return_value.close.assert_called_once()

    def test_system_ping_skips_raw_socket_check(self):
        with patch.object(ping_module.shutil, "which", return_value="/usr/bin/ping"), \
                patch.object(ping_module.socket, "socket") as socket_mock:
            self.assertTrue(PingService(MagicMock()).is_available())
        socket_mock.assert_not_called()


class TestPingHostAsync(unittest.IsolatedAsyncioTestCase):
    async def test_exit_code_zero_is_success(self):
        pm = MagicMock(spec=ProcessManager)
        pm.run_command = AsyncMock(return_value=(b"1 received", 0))

        self.assertTrue(await _service(pm).ping_host_async("10.0.0.1"))
        pm.run_command.assert_awaited_once()
        self.assertEqual(pm.run_command.await_args.kwargs["timeout"], 1.0)

    async def test_nonzero_exit_is_failure(self):
        pm = MagicMock(spec=ProcessManager)
        pm.run_command = AsyncMock(return_value=(b"", 1))

        self.assertFalse(await _service(pm).ping_host_async("10.0.0.1"))

    async def test_timeout_is_failure(self):
        pm = MagicMock(spec=ProcessManager)
        pm.run_command = AsyncMock(side_effect=asyncio.TimeoutError)

        self.assertFalse(await _service(pm).ping_host_async("10.0.0.1"))

    async def test_invalid_host_never_spawns(self):
        pm = MagicMock(spec=ProcessManager)
        pm.run_command = AsyncMock()

        self.assertFalse(await _service(pm).ping_host_async("--help"))
        pm.run_command.assert_not_awaited()

    async def test_pythonping_fallback(self):
        service = _service(ping_path=None)
        with patch.object(ping_module, "PYTHONPING_AVAILABLE", True), \
                patch.object(service, "_ping_with_pythonping", return_value=True) as fallback:
            self.assertTrue(await service.ping_host_async("10.0.0.1"))
        fallback.assert_called_once_with("10.0.0.1")

    async def test_no_mechanism_is_failure(self):
        service = _service(ping_path=None)
        with patch.object(ping_module, "PYTHONPING_AVAILABLE", False):
            self.assertFalse(await service.ping_host_async("10.0.0.1"))


class TestPythonpingFallback(unittest.TestCase):
    def test_uses_response_success(self):
        response = MagicMock()
        response.success.return_value = True
        with patch.object(ping_module, "pythonping_ping", return_value=response) as pp:
            self.assertTrue(_service()._ping_with_pythonping("10.0.0.1"))
        pp.assert_called_once_with("10.0.0.1", count=1, timeout=1.0)

    def test_permission_error_is_failure(self):
        with patch.object(ping_module, "pythonping_ping", side_effect=PermissionError("raw socket")):
            self.assertFalse(_service()._ping_with_pythonping("10.0.0.1"))


if __name__ == "__main__":
    unittest.main()
