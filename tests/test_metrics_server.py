from __future__ import annotations

import socket
import threading
import urllib.error
import urllib.request

import pytest

from infrastructure import CONTENT_TYPE, MetricsServer, start_metrics_server


@pytest.fixture
def server(registry, exporter_metrics):
    srv = start_metrics_server(registry, addr="127.0.0.1", port=0)
    try:
        yield srv
    finally:
        srv.stop()


def _get(url: str) -> tuple[int, str, bytes]:
    with urllib.request.urlopen(url, timeout=5) as response:
        return response.status, response.headers["Content-Type"], response.read()


def test_server_reports_ephemeral_port(server) -> None:
    assert server.port != 0
    assert server.url == f"http://127.0.0.1:{server.port}/metrics"


def test_scrape_returns_current_snapshot(server, exporter_metrics) -> None:
    exporter_metrics.cpu_cores.set(8)
    exporter_metrics.ping_fail.with_labels("B", "10.0.0.2").increment()

    status, content_type, body = _get(server.url)

    assert status == 200
    assert content_type == CONTENT_TYPE
    text = body.decode("utf-8")
    assert "system_cpu_cores 8\n" in text
    assert 'ping_fail{name="B",address="10.0.0.2"} 1\n' in text


def test_back_to_back_scrapes_are_identical(server, exporter_metrics) -> None:
    exporter_metrics.ping_success.with_labels("A", "10.0.0.1").increment()
    exporter_metrics.ping_latency.with_labels("A", "10.0.0.1").observe(0.012)

    assert _get(server.url)[2] == _get(server.url)[2]


def test_unknown_path_is_404(server) -> None:
    with pytest.raises(urllib.error.HTTPError) as excinfo:
        _get(server.url.replace("/metrics", "/health"))
    assert excinfo.value.code == 404


def test_render_failure_is_500(server, registry, monkeypatch) -> None:
    def broken_snapshot():
        raise RuntimeError("boom")

    monkeypatch.setattr(registry, "snapshot", broken_snapshot)

    with pytest.raises(urllib.error.HTTPError) as excinfo:
        _get(server.url)
    assert excinfo.value.code == 500


def test_scrapes_during_concurrent_writes(server, exporter_metrics) -> None:
    series = exporter_metrics.ping_success.with_labels("A", "10.0.0.1")
    stop = threading.Event()

    def writer() -> None:
        while not stop.is_set():
            series.increment()

    writers = [threading.Thread(target=writer) for _ in range(2)]
    for t in writers:
        t.start()
    try:
        seen = []
        for _ in range(5):
            status, _, body = _get(server.url)
            assert status == 200
            line = next(
                line for line in body.decode("utf-8").splitlines()
                if line.startswith('ping_success{name="A"')
            )
            seen.append(int(line.rsplit(" ", 1)[1]))
        assert seen == sorted(seen)
    finally:
        stop.set()
        for t in writers:
            t.join()


def test_bind_failure_raises(registry) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
        taken.bind(("127.0.0.1", 0))
        taken.listen(1)
        port = taken.getsockname()[1]

        srv = MetricsServer(registry, addr="127.0.0.1", port=port)
        with pytest.raises(OSError):
            srv.start()


def test_stop_is_idempotent(registry) -> None:
    srv = start_metrics_server(registry, addr="127.0.0.1", port=0)
    srv.stop()
    srv.stop()
