"""Source synchronizers.

A :class:`SourceSynchronizer` keeps one endpoint's collection consistent
with the latest filter selection. Each refresh bumps the source's
generation synchronously and schedules the fetch on the running event
loop; when the fetch completes its result is applied only if no newer
refresh (or :meth:`SourceSynchronizer.close`) happened in between.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pypowerdash._transport import Transport
from pypowerdash.exceptions import PowerDashTransportError
from pypowerdash.ingestion.normalize import Unrecognized, as_items, recognize_collection, unwrap_envelope
from pypowerdash.models.filters import FilterState
from pypowerdash.models.readings import parse_daily, parse_latest, parse_series
from pypowerdash.sync.cycle import FetchCycle, FetchStatus
from pypowerdash.sync.requests import (
    RequestDescriptor,
    derive_daily_request,
    derive_latest_request,
    derive_series_request,
)

_logger = logging.getLogger(__name__)


class DataSource(StrEnum):
    LATEST = "latest"
    SERIES = "series"
    DAILY = "daily"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[DataSource, str] = {
    DataSource.LATEST: "Latest",
    DataSource.SERIES: "Time-series",
    DataSource.DAILY: "Daily usage",
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _device_changed(old: FilterState, new: FilterState) -> bool:
    return old.device_id != new.device_id


def _device_or_metric_changed(old: FilterState, new: FilterState) -> bool:
    return old.device_id != new.device_id or old.metric != new.metric


DeriveFn = Callable[[FilterState, datetime], RequestDescriptor]
ParseFn = Callable[[Iterable[Any]], tuple[Any, ...]]
DependsFn = Callable[[FilterState, FilterState], bool]
UpdateCallback = Callable[["DataSource", FetchCycle], None]


class SourceSynchronizer:
    """Owns the fetch lifecycle of one data source.

    Parameters
    ----------
    source : DataSource
        Which endpoint this instance serves.
    transport : Transport
        Anything with an async ``get_json(request)``.
    derive : callable
        ``(filters, now) -> RequestDescriptor``.
    parse : callable
        Turns recognized payload items into typed models.
    depends_on : callable
        ``(old, new) -> bool``; whether a filter change affects the request.
    clock : callable
        Returns the cycle anchor; called once per refresh.
    on_update : callable or None
        Invoked with ``(source, cycle)`` after every state transition.
    """

    def __init__(
        self,
        source: DataSource,
        transport: Transport,
        *,
        derive: DeriveFn,
        parse: ParseFn,
        depends_on: DependsFn,
        clock: Callable[[], datetime] = _utcnow,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self.source = source
        self._transport = transport
        self._derive = derive
        self._parse = parse
        self._depends_on = depends_on
        self._clock = clock
        self._on_update = on_update
        self._cycle = FetchCycle()
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def cycle(self) -> FetchCycle:
        return self._cycle

    @property
    def data(self) -> tuple[Any, ...]:
        return self._cycle.data

    @property
    def status(self) -> FetchStatus:
        return self._cycle.status

    @property
    def error_message(self) -> str | None:
        return self._cycle.error_message

    @property
    def generation(self) -> int:
        return self._cycle.generation

    @property
    def is_loading(self) -> bool:
        return self._cycle.is_loading

    def affected_by(self, old: FilterState, new: FilterState) -> bool:
        return self._depends_on(old, new)

    def _transition(self, cycle: FetchCycle) -> None:
        if cycle is self._cycle:
            return
        self._cycle = cycle
        if self._on_update is not None:
            self._on_update(self.source, cycle)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def begin(self, filters: FilterState) -> tuple[RequestDescriptor, int]:
        """Start a new cycle: derive the request and enter ``loading``."""
        descriptor = self._derive(filters, self._clock())
        self._transition(self._cycle.begin(descriptor))
        return descriptor, self._cycle.generation

    async def run(self, descriptor: RequestDescriptor, generation: int) -> None:
        """Fetch *descriptor* and apply the outcome if *generation* is current."""
        try:
            payload = await self._transport.get_json(descriptor)
        except PowerDashTransportError as exc:
            self._apply_error(generation, str(exc))
            return

        shape = recognize_collection(unwrap_envelope(payload))
        if isinstance(shape, Unrecognized):
            _logger.debug(
                "%s payload is %s, not a list; treating as empty",
                self.source.label,
                type(shape.payload).__name__,
            )
        self._apply_success(generation, self._parse(as_items(shape)))

    def refresh(self, filters: FilterState) -> asyncio.Task[None]:
        """Begin a new cycle and schedule its fetch on the running loop.

        Must be called from within a running event loop. The superseded
        in-flight fetch, if any, is cancelled.
        """
        descriptor, generation = self.begin(filters)
        self._cancel_task()
        task = asyncio.get_running_loop().create_task(
            self.run(descriptor, generation),
            name=f"pypowerdash-{self.source}-{generation}",
        )
        self._task = task
        return task

    async def wait(self) -> None:
        """Wait until the current in-flight fetch, if any, has finished."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    def close(self) -> None:
        """Discard any pending result and cancel the in-flight fetch."""
        self._transition(self._cycle.invalidate())
        self._cancel_task()

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _apply_success(self, generation: int, data: tuple[Any, ...]) -> None:
        if not self._cycle.accepts(generation):
            self._log_stale(generation)
            return
        self._transition(self._cycle.succeed(generation, data))

    def _apply_error(self, generation: int, message: str) -> None:
        if not self._cycle.accepts(generation):
            self._log_stale(generation)
            return
        _logger.warning("%s fetch failed: %s", self.source.label, message)
        self._transition(self._cycle.fail(generation, message))

    def _log_stale(self, generation: int) -> None:
        _logger.debug(
            "Discarding %s result for generation %d (current %d)",
            self.source.label,
            generation,
            self._cycle.generation,
        )


def latest_synchronizer(transport: Transport, **kwargs: Any) -> SourceSynchronizer:
    return SourceSynchronizer(
        DataSource.LATEST,
        transport,
        derive=derive_latest_request,
        parse=parse_latest,
        depends_on=_device_changed,
        **kwargs,
    )


def series_synchronizer(transport: Transport, **kwargs: Any) -> SourceSynchronizer:
    return SourceSynchronizer(
        DataSource.SERIES,
        transport,
        derive=derive_series_request,
        parse=parse_series,
        depends_on=_device_or_metric_changed,
        **kwargs,
    )


def daily_synchronizer(transport: Transport, **kwargs: Any) -> SourceSynchronizer:
    return SourceSynchronizer(
        DataSource.DAILY,
        transport,
        derive=derive_daily_request,
        parse=parse_daily,
        depends_on=_device_changed,
        **kwargs,
    )
