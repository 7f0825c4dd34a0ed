from __future__ import annotations

"""In-process metrics registry with per-series locking.

Writers (probe loops, host sampler) and readers (the exposition server) only
ever contend on the lock of the single series they touch. Families take their
own lock only while creating a new label set, and the registry lock is held
only while registering or enumerating families.
"""

import bisect
import re
import threading
from enum import Enum
from typing import Callable, Iterable, Sequence

from prometheus_client import Histogram
from prometheus_client.core import Metric
from prometheus_client.utils import floatToGoString

from errors import MetricRegistrationError

METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

DEFAULT_BUCKETS: tuple[float, ...] = tuple(Histogram.DEFAULT_BUCKETS)
INF = float("inf")


class MetricKind(str, Enum):
    """Metric family type as written on the ``# TYPE`` line."""
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


class Series:
    """A single time series. Every read and write goes through ``_lock``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def samples(self, name: str, labels: dict[str, str]) -> list[tuple[str, dict[str, str], float]]:
        raise NotImplementedError


class CounterSeries(Series):
    """Monotonically non-decreasing integer count."""

    def __init__(self) -> None:
        super().__init__()
        self._value = 0

    def increment(self, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError("Counters can only be incremented by non-negative amounts.")
        with self._lock:
            self._value += amount

    def get(self) -> int:
        with self._lock:
            return self._value

    def samples(self, name: str, labels: dict[str, str]) -> list[tuple[str, dict[str, str], float]]:
        return [(name, labels, self.get())]


class GaugeSeries(Series):
    """Single current value, overwritten on every set."""

    def __init__(self) -> None:
        super().__init__()
        self._value = 0.0

    def set(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    def get(self) -> float:
        with self._lock:
            return self._value

    def samples(self, name: str, labels: dict[str, str]) -> list[tuple[str, dict[str, str], float]]:
        return [(name, labels, self.get())]


class HistogramSeries(Series):
    """Bucketed observations with running sum and count.

    Per-bucket counts are stored non-cumulatively and accumulated on read, so
    ``observe`` touches exactly one bucket.
    """

    def __init__(self, buckets: Sequence[float] = DEFAULT_BUCKETS) -> None:
        super().__init__()
        self._upper_bounds = list(buckets)
        self._bucket_counts = [0] * len(self._upper_bounds)
        self._sum = 0.0
        self._count = 0

    def observe(self, value: float) -> None:
        index = bisect.bisect_left(self._upper_bounds, value)
        with self._lock:
            self._bucket_counts[index] += 1
            self._sum += value
            self._count += 1

    def read(self) -> tuple[list[tuple[float, int]], float, int]:
        """Return ``(cumulative_buckets, sum, count)`` from one consistent view."""
        with self._lock:
            counts = list(self._bucket_counts)
            total = self._sum
            count = self._count
        cumulative: list[tuple[float, int]] = []
        running = 0
        for bound, bucket_count in zip(self._upper_bounds, counts):
            running += bucket_count
            cumulative.append((bound, running))
        return cumulative, total, count

    def samples(self, name: str, labels: dict[str, str]) -> list[tuple[str, dict[str, str], float]]:
        buckets, total, count = self.read()
        out: list[tuple[str, dict[str, str], float]] = [
            (f"{name}_bucket", {**labels, "le": _format_bound(bound)}, cumulative)
            for bound, cumulative in buckets
        ]
        out.append((f"{name}_sum", labels, total))
        out.append((f"{name}_count", labels, count))
        return out


def _format_bound(bound: float) -> str:
    if bound != INF and bound.is_integer():
        return str(int(bound))
    return floatToGoString(bound)


class SeriesFamily:
    """All series sharing one metric name, keyed by label-value tuple."""

    def __init__(
        self,
        name: str,
        documentation: str,
        kind: MetricKind,
        label_names: tuple[str, ...],
        series_factory: Callable[[], Series],
    ) -> None:
        self.name = name
        self.documentation = documentation
        self.kind = kind
        self.label_names = label_names
        self._series_factory = series_factory
        self._series: dict[tuple[str, ...], Series] = {}
        self._lock = threading.Lock()
        if not label_names:
            self._series[()] = series_factory()

    def with_labels(self, *label_values: str) -> Series:
        """Return the series for ``label_values``, creating it on first use."""
        if len(label_values) != len(self.label_names):
            raise ValueError(
                f"{self.name} expects {len(self.label_names)} label values "
                f"{self.label_names}, got {len(label_values)}"
            )
        key = tuple(str(v) for v in label_values)
        series = self._series.get(key)
        if series is None:
            with self._lock:
                series = self._series.get(key)
                if series is None:
                    series = self._series_factory()
                    self._series[key] = series
        return series

    def collect(self) -> Metric | None:
        """Build a Prometheus ``Metric`` from the current series, or None if empty."""
        with self._lock:
            items = list(self._series.items())
        if not items:
            return None
        metric = Metric(self.name, self.documentation, self.kind.value)
        for key, series in items:
            labels = dict(zip(self.label_names, key))
            for sample_name, sample_labels, value in series.samples(self.name, labels):
                metric.add_sample(sample_name, sample_labels, value)
        return metric


class MetricsRegistry:
    """Process-wide set of metric families."""

    def __init__(self) -> None:
        self._families: dict[str, SeriesFamily] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str,
        documentation: str,
        kind: MetricKind,
        label_names: Iterable[str] = (),
        buckets: Sequence[float] | None = None,
    ) -> SeriesFamily:
        """Define a metric family.

        Registering the same definition twice returns the existing family;
        reusing a name with another kind or label set is an error.

        Raises:
            MetricRegistrationError: invalid or conflicting definition.
        """
        kind = MetricKind(kind)
        labels = tuple(label_names)
        _validate_definition(name, kind, labels)

        with self._lock:
            existing = self._families.get(name)
            if existing is not None:
                if existing.kind is not kind or existing.label_names != labels:
                    raise MetricRegistrationError(
                        f"Metric {name!r} already registered as {existing.kind.value} "
                        f"with labels {existing.label_names}"
                    )
                return existing

            family = SeriesFamily(name, documentation, kind, labels, _series_factory(kind, buckets))
            self._families[name] = family
            return family

    def counter(self, name: str, documentation: str, label_names: Iterable[str] = ()) -> SeriesFamily:
        return self.register(name, documentation, MetricKind.COUNTER, label_names)

    def gauge(self, name: str, documentation: str, label_names: Iterable[str] = ()) -> SeriesFamily:
        return self.register(name, documentation, MetricKind.GAUGE, label_names)

    def histogram(
        self,
        name: str,
        documentation: str,
        label_names: Iterable[str] = (),
        buckets: Sequence[float] | None = None,
    ) -> SeriesFamily:
        return self.register(name, documentation, MetricKind.HISTOGRAM, label_names, buckets)

    def snapshot(self) -> list[Metric]:
        """Read every non-empty family.

        Each series is read under its own lock; no lock spans more than one
        series, so a scrape never stalls writers of unrelated series.
        """
        with self._lock:
            families = list(self._families.values())
        metrics: list[Metric] = []
        for family in families:
            metric = family.collect()
            if metric is not None:
                metrics.append(metric)
        return metrics

    def get_sample_value(self, name: str, labels: dict[str, str] | None = None) -> float | None:
        """Return a single sample value from a fresh snapshot, or None."""
        labels = labels or {}
        for metric in self.snapshot():
            for sample in metric.samples:
                if sample.name == name and sample.labels == labels:
                    return sample.value
        return None


def _series_factory(kind: MetricKind, buckets: Sequence[float] | None) -> Callable[[], Series]:
    if kind is MetricKind.COUNTER:
        return CounterSeries
    if kind is MetricKind.GAUGE:
        return GaugeSeries
    bounds = _normalize_buckets(buckets or DEFAULT_BUCKETS)
    return lambda: HistogramSeries(bounds)


def _normalize_buckets(buckets: Sequence[float]) -> tuple[float, ...]:
    bounds = [float(b) for b in buckets]
    if bounds != sorted(bounds):
        raise MetricRegistrationError("Histogram buckets must be sorted")
    if not bounds or bounds[-1] != INF:
        bounds.append(INF)
    return tuple(bounds)


def _validate_definition(name: str, kind: MetricKind, label_names: tuple[str, ...]) -> None:
    if not METRIC_NAME_RE.match(name):
        raise MetricRegistrationError(f"Invalid metric name: {name!r}")
    if len(set(label_names)) != len(label_names):
        raise MetricRegistrationError(f"Duplicate label names for {name!r}: {label_names}")
    for label in label_names:
        if not LABEL_NAME_RE.match(label) or label.startswith("__"):
            raise MetricRegistrationError(f"Invalid label name for {name!r}: {label!r}")
        if kind is MetricKind.HISTOGRAM and label == "le":
            raise MetricRegistrationError(f"Histogram {name!r} cannot use reserved label 'le'")
