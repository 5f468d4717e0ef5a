"""High-level async facade keeping the three dashboard sources in sync."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, ValidationError

from pypowerdash._transport import HttpTransport, Transport
from pypowerdash.config import PowerDashConfig
from pypowerdash.exceptions import PowerDashError, PowerDashFilterError
from pypowerdash.models.filters import FilterState, Metric
from pypowerdash.models.readings import DailyUsage, LatestReading, SeriesPoint
from pypowerdash.sync import derived
from pypowerdash.sync.cycle import FetchCycle, FetchStatus
from pypowerdash.sync.synchronizer import (
    DataSource,
    SourceSynchronizer,
    UpdateCallback,
    daily_synchronizer,
    latest_synchronizer,
    series_synchronizer,
)

_logger = logging.getLogger(__name__)


class SourceView(BaseModel):
    """Plain-data view of one source for a renderer."""

    model_config = ConfigDict(frozen=True)

    status: FetchStatus
    loading: bool
    error: str | None = None
    count: int = 0


class DashboardSnapshot(BaseModel):
    """Everything a renderer needs, as plain data."""

    model_config = ConfigDict(frozen=True)

    filters: FilterState
    latest: tuple[LatestReading, ...] = ()
    latest_by_metric: dict[str, LatestReading] = {}
    series: tuple[SeriesPoint, ...] = ()
    daily: tuple[DailyUsage, ...] = ()
    total_usage_kwh: float = 0.0
    sources: dict[DataSource, SourceView] = {}


class PowerDashboard:
    """Async dashboard state for one API.

    Usage::

        async with PowerDashboard(PowerDashConfig.from_env()) as dashboard:
            dashboard.set_metric("current")
            await dashboard.wait_idle()
            print(dashboard.total_usage)

    Entering the context starts the first fetch of all three sources.
    Filter changes refresh only the sources whose request depends on the
    changed field; results of superseded requests are discarded.
    """

    def __init__(
        self,
        config: PowerDashConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        filters: FilterState | None = None,
        clock: Callable[[], datetime] | None = None,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self._config = config or PowerDashConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        self._filters = filters or FilterState()
        self._clock = clock
        self._on_update = on_update
        self._synchronizers: dict[DataSource, SourceSynchronizer] = {}
        self._closed = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PowerDashboard:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)

        sync_kwargs: dict[str, Any] = {"on_update": self._on_update}
        if self._clock is not None:
            sync_kwargs["clock"] = self._clock
        self._synchronizers = {
            DataSource.LATEST: latest_synchronizer(self._transport, **sync_kwargs),
            DataSource.SERIES: series_synchronizer(self._transport, **sync_kwargs),
            DataSource.DAILY: daily_synchronizer(self._transport, **sync_kwargs),
        }
        self._closed = False
        self.refresh_all()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        for synchronizer in self._synchronizers.values():
            synchronizer.close()
        self._closed = True
        if not self._external_transport:
            self._transport = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require(self, source: DataSource, *, active: bool = False) -> SourceSynchronizer:
        if active and self._closed:
            raise PowerDashError("Dashboard is closed; state is read-only after leaving 'async with'")
        synchronizer = self._synchronizers.get(source)
        if synchronizer is None:
            raise PowerDashError("Dashboard not started. Use 'async with PowerDashboard(...) as dashboard:'")
        return synchronizer

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    @property
    def filters(self) -> FilterState:
        return self._filters

    def set_filters(self, *, device_id: str | None = None, metric: Metric | str | None = None) -> FilterState:
        """Replace the current selection and refresh the affected sources.

        Affected sources enter ``loading`` before this method returns.
        """
        synchronizers = [self._require(source, active=True) for source in DataSource]
        new = self._filters
        try:
            if device_id is not None:
                new = new.with_device(device_id)
            if metric is not None:
                new = new.with_metric(metric)
        except ValidationError as exc:
            raise PowerDashFilterError(f"Invalid filter selection: {exc.errors()[0]['msg']}") from exc

        old, self._filters = self._filters, new
        for synchronizer in synchronizers:
            if synchronizer.affected_by(old, new):
                _logger.debug("Refreshing %s for %s", synchronizer.source.label, new)
                synchronizer.refresh(new)
        return new

    def set_device(self, device_id: str) -> FilterState:
        return self.set_filters(device_id=device_id)

    def set_metric(self, metric: Metric | str) -> FilterState:
        return self.set_filters(metric=metric)

    def refresh_all(self) -> None:
        """Start a new cycle for every source with the current filters."""
        for source in DataSource:
            self._require(source, active=True).refresh(self._filters)

    async def wait_idle(self) -> None:
        """Wait until no source has a fetch in flight."""
        await asyncio.gather(*(sync.wait() for sync in self._synchronizers.values()))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def cycle(self, source: DataSource) -> FetchCycle:
        return self._require(source).cycle

    @property
    def latest(self) -> FetchCycle:
        return self.cycle(DataSource.LATEST)

    @property
    def series(self) -> FetchCycle:
        return self.cycle(DataSource.SERIES)

    @property
    def daily(self) -> FetchCycle:
        return self.cycle(DataSource.DAILY)

    @property
    def latest_by_metric(self) -> dict[str, LatestReading]:
        return derived.latest_by_metric(self.latest.data)

    @property
    def total_usage(self) -> float:
        return derived.total_usage(self.daily.data)

    @property
    def errors(self) -> dict[DataSource, str]:
        """Current error message per failing source, prefixed with its label."""
        return {
            source: f"{source.label}: {sync.error_message}"
            for source, sync in self._synchronizers.items()
            if sync.error_message is not None
        }

    def snapshot(self) -> DashboardSnapshot:
        sources = {
            source: SourceView(
                status=sync.status,
                loading=sync.is_loading,
                error=sync.error_message,
                count=len(sync.data),
            )
            for source, sync in self._synchronizers.items()
        }
        return DashboardSnapshot(
            filters=self._filters,
            latest=self.latest.data,
            latest_by_metric=self.latest_by_metric,
            series=self.series.data,
            daily=self.daily.data,
            total_usage_kwh=self.total_usage,
            sources=sources,
        )
