from __future__ import annotations

"""Prometheus text exposition format (version 0.0.4)."""

import math
from typing import Iterable

from prometheus_client.core import Metric
from prometheus_client.utils import floatToGoString

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def _escape_help(text: str) -> str:
    return text.replace("\\", r"\\").replace("\n", r"\n")


def _escape_label_value(value: str) -> str:
    return value.replace("\\", r"\\").replace("\n", r"\n").replace('"', r"\"")


def format_value(value: float) -> str:
    """Render a sample value the way Go clients do: ``1`` not ``1.0``."""
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return floatToGoString(value)


def format_labels(labels: dict[str, str]) -> str:
    if not labels:
        return ""
    pairs = ",".join(f'{key}="{_escape_label_value(str(val))}"' for key, val in labels.items())
    return "{" + pairs + "}"


def generate_text(metrics: Iterable[Metric]) -> bytes:
    """Render metric families as a text exposition body.

    Family names are written as registered; unlike ``prometheus_client``'s
    ``generate_latest`` no ``_total`` suffix is appended to counters.
    """
    lines: list[str] = []
    for metric in metrics:
        lines.append(f"# HELP {metric.name} {_escape_help(metric.documentation)}")
        lines.append(f"# TYPE {metric.name} {metric.type}")
        for sample in metric.samples:
            lines.append(f"{sample.name}{format_labels(sample.labels)} {format_value(sample.value)}")
    if not lines:
        return b""
    return ("\n".join(lines) + "\n").encode("utf-8")
