from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest
from pydantic import ValidationError

from pypowerdash.models import (
    DailyUsage,
    FilterState,
    LatestReading,
    Metric,
    SeriesPoint,
    TimeWindows,
    format_timestamp,
    parse_daily,
    parse_latest,
    parse_series,
)
from pypowerdash.models._base import PowerBaseModel
from pypowerdash.models.readings import parse_items


def test_latest_reading_parses_iso_timestamp_and_number() -> None:
    reading = LatestReading.model_validate({"metric": "volts", "time": "2026-10-16T12:30:00Z", "value": "229.8"})

    assert reading.metric == "volts"
    assert reading.time == datetime(2026, 10, 16, 12, 30, tzinfo=UTC)
    assert reading.value == 229.8
    assert reading.raw["value"] == "229.8"


def test_bad_fields_become_none_instead_of_failing() -> None:
    reading = LatestReading.model_validate({"metric": 5, "time": "yesterday", "value": "n/a"})

    assert reading.metric == "5"
    assert reading.time is None
    assert reading.value is None


def test_naive_timestamp_assumed_utc() -> None:
    point = SeriesPoint.model_validate({"time": "2026-10-16T08:00:00", "value": 1})
    assert point.time is not None
    assert point.time.tzinfo is not None
    assert point.time.utcoffset() == timedelta(0)


def test_daily_usage_day_keeps_calendar_date_only() -> None:
    from_string = DailyUsage.model_validate({"day": "2026-10-01T00:00:00Z", "usage_kwh": 3})
    from_date = DailyUsage.model_validate({"day": "2026-10-01", "usage_kwh": 3})

    assert from_string.day == date(2026, 10, 1)
    assert from_date.day == date(2026, 10, 1)
    assert DailyUsage.model_validate({"day": "not a day"}).day is None


def test_parse_series_preserves_order_and_drops_non_objects() -> None:
    points = parse_series(
        [
            {"time": "2026-10-16T12:00:00Z", "value": 3},
            "garbage",
            {"time": "2026-10-16T11:00:00Z", "value": 1},
            None,
            {"time": "2026-10-16T11:30:00Z", "value": 2},
        ]
    )

    assert [p.value for p in points] == [3.0, 1.0, 2.0]


def test_parse_daily_keeps_duplicates() -> None:
    rows = [{"day": "2026-10-01", "usage_kwh": 1}, {"day": "2026-10-01", "usage_kwh": 1}]
    assert len(parse_daily(rows)) == 2


def test_parse_latest_ignores_unknown_keys() -> None:
    (reading,) = parse_latest([{"metric": "current", "value": 4, "unit": "A"}])
    assert reading.value == 4.0
    assert reading.time is None


def test_item_raw_key_is_replaced_by_the_stash() -> None:
    (reading,) = parse_latest([{"metric": "volts", "value": 1, "raw": "x"}])

    assert reading.value == 1.0
    assert reading.raw == {"metric": "volts", "value": 1, "raw": "x"}


def test_parse_items_drops_items_pydantic_rejects() -> None:
    class Counter(PowerBaseModel):
        count: int

    kept = parse_items(Counter, [{"count": "many"}, {"count": 3}, {}])

    assert [item.count for item in kept] == [3]


def test_filter_state_defaults_and_immutability() -> None:
    filters = FilterState()

    assert filters.device_id == "iot"
    assert filters.metric == Metric.VOLTS
    with pytest.raises(ValidationError):
        filters.device_id = "other"  # type: ignore[misc]


def test_filter_state_with_returns_new_value() -> None:
    original = FilterState()

    changed = original.with_metric("current").with_device("  meter-7 ")

    assert original == FilterState()
    assert changed.metric == Metric.CURRENT
    assert changed.device_id == "meter-7"


def test_filter_state_rejects_unknown_metric_and_blank_device() -> None:
    with pytest.raises(ValidationError):
        FilterState(metric="watts")
    with pytest.raises(ValidationError):
        FilterState(device_id="   ")


def test_time_windows_anchor_once() -> None:
    now = datetime(2026, 10, 16, 0, 5, tzinfo=UTC)

    windows = TimeWindows.anchored(now)

    assert windows.series_to == now
    assert windows.series_to - windows.series_from == timedelta(hours=24)
    assert windows.daily_to == date(2026, 10, 16)
    assert windows.daily_to - windows.daily_from == timedelta(days=30)


def test_daily_window_independent_of_time_of_day() -> None:
    early = TimeWindows.anchored(datetime(2026, 10, 16, 0, 0, 1, tzinfo=UTC))
    late = TimeWindows.anchored(datetime(2026, 10, 16, 23, 59, 59, tzinfo=UTC))

    assert (early.daily_from, early.daily_to) == (late.daily_from, late.daily_to)


def test_format_timestamp_uses_z_suffix_and_milliseconds() -> None:
    value = datetime(2026, 10, 16, 12, 0, 0, 123456, tzinfo=UTC)
    assert format_timestamp(value) == "2026-10-16T12:00:00.123Z"
