"""Telemetry reading models for the three power endpoints."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Annotated, Any, TypeVar

from pydantic import BeforeValidator, ValidationError

from pypowerdash.models._base import Day, Number, PowerBaseModel, Timestamp

_logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=PowerBaseModel)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


Text = Annotated[str, BeforeValidator(_as_text)]


class LatestReading(PowerBaseModel):
    """Most recent value of one metric for a device.

    Parameters
    ----------
    metric : str
        Metric name as reported by the backend (not restricted to
        :class:`~pypowerdash.models.filters.Metric`).
    time : datetime or None
        Reading timestamp.
    value : float or None
        Reading value; ``None`` when absent or not numeric.
    """

    metric: Text = ""
    time: Timestamp = None
    value: Number = None


class SeriesPoint(PowerBaseModel):
    """One sample of the time-windowed series."""

    time: Timestamp = None
    value: Number = None


class DailyUsage(PowerBaseModel):
    """Energy used on one calendar day.

    Parameters
    ----------
    day : date or None
        Calendar day, without time-of-day.
    usage_kwh : float or None
        Consumption in kWh; ``None`` when absent or not numeric.
    """

    day: Day = None
    usage_kwh: Number = None


def parse_items(model: type[TModel], items: Iterable[Any]) -> tuple[TModel, ...]:
    """Validate *items* into *model* instances, keeping their order.

    Non-object and invalid items are dropped. Duplicates are kept.
    """
    parsed: list[TModel] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            _logger.debug("Dropping %s item %d: expected object, got %s", model.__name__, index, type(item).__name__)
            continue
        try:
            parsed.append(model.model_validate(dict(item)))
        except ValidationError as exc:
            _logger.debug("Dropping %s item %d: %s", model.__name__, index, exc)
    return tuple(parsed)


def parse_latest(items: Iterable[Any]) -> tuple[LatestReading, ...]:
    return parse_items(LatestReading, items)


def parse_series(items: Iterable[Any]) -> tuple[SeriesPoint, ...]:
    return parse_items(SeriesPoint, items)


def parse_daily(items: Iterable[Any]) -> tuple[DailyUsage, ...]:
    return parse_items(DailyUsage, items)
