"""Data models for power API responses and dashboard filters."""

from pypowerdash.models._base import PowerBaseModel, parse_day, parse_timestamp
from pypowerdash.models.filters import FilterState, Metric, TimeWindows, format_timestamp
from pypowerdash.models.readings import (
    DailyUsage,
    LatestReading,
    SeriesPoint,
    parse_daily,
    parse_items,
    parse_latest,
    parse_series,
)

__all__ = [
    "DailyUsage",
    "FilterState",
    "LatestReading",
    "Metric",
    "PowerBaseModel",
    "SeriesPoint",
    "TimeWindows",
    "format_timestamp",
    "parse_daily",
    "parse_day",
    "parse_items",
    "parse_latest",
    "parse_series",
    "parse_timestamp",
]
