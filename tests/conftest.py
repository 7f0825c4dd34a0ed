from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Allow running tests from a source checkout without installing
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import Endpoint  # noqa: E402
from infrastructure import MetricsRegistry, register_exporter_metrics  # noqa: E402


@pytest.fixture
def registry() -> MetricsRegistry:
    return MetricsRegistry()


@pytest.fixture
def exporter_metrics(registry):
    return register_exporter_metrics(registry)


@pytest.fixture
def endpoint_a() -> Endpoint:
    return Endpoint(name="A", address="10.0.0.1")
