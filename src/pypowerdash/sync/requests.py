"""Request derivation for the three power endpoints.

Each ``derive_*`` function is a pure mapping from the current filters and
the cycle's anchor time to a :class:`RequestDescriptor`.
"""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from pypowerdash._constants import DAILY_ENDPOINT, LATEST_ENDPOINT, SERIES_ENDPOINT
from pypowerdash.models.filters import FilterState, TimeWindows, format_timestamp


class RequestDescriptor(BaseModel):
    """Endpoint path plus ordered query parameters."""

    model_config = ConfigDict(frozen=True)

    endpoint: str
    params: tuple[tuple[str, str], ...] = ()

    @property
    def query(self) -> dict[str, str]:
        return dict(self.params)

    def url(self, base_url: str) -> str:
        url = f"{base_url.rstrip('/')}{self.endpoint}"
        if self.params:
            url = f"{url}?{urlencode(self.params)}"
        return url


def derive_latest_request(filters: FilterState, now: datetime) -> RequestDescriptor:
    return RequestDescriptor(
        endpoint=LATEST_ENDPOINT,
        params=(("device_id", filters.device_id),),
    )


def derive_series_request(filters: FilterState, now: datetime) -> RequestDescriptor:
    windows = TimeWindows.anchored(now)
    return RequestDescriptor(
        endpoint=SERIES_ENDPOINT,
        params=(
            ("device_id", filters.device_id),
            ("metric", str(filters.metric)),
            ("from", format_timestamp(windows.series_from)),
            ("to", format_timestamp(windows.series_to)),
        ),
    )


def derive_daily_request(filters: FilterState, now: datetime) -> RequestDescriptor:
    windows = TimeWindows.anchored(now)
    return RequestDescriptor(
        endpoint=DAILY_ENDPOINT,
        params=(
            ("device_id", filters.device_id),
            ("from", windows.daily_from.isoformat()),
            ("to", windows.daily_to.isoformat()),
        ),
    )
