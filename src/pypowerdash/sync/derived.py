"""Derived views over synchronized collections.

Pure functions, recomputed on every read.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pypowerdash.ingestion.normalize import safe_float
from pypowerdash.models.readings import DailyUsage, LatestReading


def latest_by_metric(readings: Iterable[LatestReading]) -> dict[str, LatestReading]:
    """Map metric name to its reading; later entries overwrite earlier ones."""
    by_metric: dict[str, LatestReading] = {}
    for reading in readings:
        by_metric[reading.metric] = reading
    return by_metric


def total_usage(daily: Iterable[DailyUsage | Mapping[str, Any]]) -> float:
    """Sum ``usage_kwh``; missing or non-numeric values count as zero."""
    total = 0.0
    for entry in daily:
        raw_value = entry.get("usage_kwh") if isinstance(entry, Mapping) else entry.usage_kwh
        value = safe_float(raw_value)
        if value is not None:
            total += value
    return total
