from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from pypowerdash.models.filters import FilterState, Metric
from pypowerdash.sync.requests import (
    RequestDescriptor,
    derive_daily_request,
    derive_latest_request,
    derive_series_request,
)

_NOW = datetime(2026, 10, 16, 12, 0, tzinfo=UTC)


def test_latest_request_uses_device_only() -> None:
    request = derive_latest_request(FilterState(device_id="meter 1", metric=Metric.CURRENT), _NOW)

    assert request.endpoint == "/v1/api/power/latest"
    assert request.query == {"device_id": "meter 1"}
    assert request.url("http://api.local/") == "http://api.local/v1/api/power/latest?device_id=meter+1"


def test_series_request_has_24h_window_ending_at_anchor() -> None:
    request = derive_series_request(FilterState(device_id="iot", metric=Metric.ACTIVE_POWER), _NOW)

    assert request.endpoint == "/v1/api/power/time-series"
    assert request.query == {
        "device_id": "iot",
        "metric": "active_power",
        "from": "2026-10-15T12:00:00.000Z",
        "to": "2026-10-16T12:00:00.000Z",
    }


def test_daily_request_is_30_day_calendar_window() -> None:
    morning = derive_daily_request(FilterState(), datetime(2026, 10, 16, 0, 1, tzinfo=UTC))
    evening = derive_daily_request(FilterState(), datetime(2026, 10, 16, 23, 59, tzinfo=UTC))

    assert morning == evening
    assert morning.endpoint == "/v1/api/power/daily-usage"
    assert morning.query == {"device_id": "iot", "from": "2026-09-16", "to": "2026-10-16"}


def test_daily_request_uses_utc_calendar_date() -> None:
    # 01:00 at UTC+2 is still the previous day in UTC.
    local = datetime(2026, 10, 16, 1, 0, tzinfo=timezone(timedelta(hours=2)))

    request = derive_daily_request(FilterState(), local)

    assert request.query["to"] == "2026-10-15"


def test_derivation_is_pure() -> None:
    filters = FilterState()
    assert derive_series_request(filters, _NOW) == derive_series_request(filters, _NOW)


def test_descriptor_without_params_has_no_query_string() -> None:
    assert RequestDescriptor(endpoint="/x").url("http://h") == "http://h/x"
