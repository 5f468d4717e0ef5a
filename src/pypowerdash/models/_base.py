"""Base model and shared coercions for power API responses.

Every response model inherits from :class:`PowerBaseModel` which
provides:

* A frozen, ``extra="ignore"`` configuration so unknown keys from the
  backend never break parsing.
* A ``model_validator(mode="before")`` that stashes the original item
  in ``raw``.

Field types use the ``Annotated`` coercions below so that a single bad
value becomes ``None`` instead of failing the whole collection.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from pypowerdash.ingestion.normalize import safe_float


def parse_timestamp(value: Any) -> datetime | None:
    """Convert an ISO-8601 string to an aware datetime.

    Naive values are assumed to be UTC. Returns ``None`` when the value
    is missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_day(value: Any) -> date | None:
    """Reduce a date, datetime or string to calendar-day granularity.

    Strings keep only their leading ``YYYY-MM-DD``, so both
    ``"2026-10-01"`` and ``"2026-10-01T00:00:00Z"`` map to the same day.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


Timestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
Day = Annotated[date | None, BeforeValidator(parse_day)]
Number = Annotated[float | None, BeforeValidator(safe_float)]


class PowerBaseModel(BaseModel):
    """Base for power API response items."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API item."""

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        # An API item may carry its own "raw" key; the stash always wins.
        merged["raw"] = dict(values)
        return merged
