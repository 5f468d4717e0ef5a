"""User-selected filters and the time windows derived from them."""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from pypowerdash._constants import DAILY_WINDOW, DEFAULT_DEVICE_ID, SERIES_WINDOW


class Metric(StrEnum):
    VOLTS = "volts"
    CURRENT = "current"
    ACTIVE_POWER = "active_power"
    TOTAL_IMPORT_KWH = "total_import_kwh"


def format_timestamp(value: datetime) -> str:
    """Render *value* as ISO-8601 UTC with millisecond precision and ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


class FilterState(BaseModel):
    """Current device and metric selection.

    Instances are immutable; use :meth:`with_device` / :meth:`with_metric`
    to derive a new selection.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    device_id: str = DEFAULT_DEVICE_ID
    metric: Metric = Metric.VOLTS

    @field_validator("device_id")
    @classmethod
    def _require_device(cls, value: str) -> str:
        if not value:
            raise ValueError("device_id must be non-empty")
        return value

    def with_device(self, device_id: str) -> FilterState:
        return FilterState(device_id=device_id, metric=self.metric)

    def with_metric(self, metric: Metric | str) -> FilterState:
        return FilterState(device_id=self.device_id, metric=metric)


class TimeWindows(BaseModel):
    """Trailing windows anchored to a single instant.

    Parameters
    ----------
    anchor : datetime
        The cycle's "now" (UTC).
    series_from, series_to : datetime
        Trailing 24 hour window ending at ``anchor``.
    daily_from, daily_to : date
        Trailing 30 day window of calendar dates ending at the UTC date
        of ``anchor``.
    """

    model_config = ConfigDict(frozen=True)

    anchor: datetime
    series_from: datetime
    series_to: datetime
    daily_from: date
    daily_to: date

    @classmethod
    def anchored(cls, now: datetime) -> TimeWindows:
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        now = now.astimezone(UTC)
        today = now.date()
        return cls(
            anchor=now,
            series_from=now - SERIES_WINDOW,
            series_to=now,
            daily_from=today - DAILY_WINDOW,
            daily_to=today,
        )
