"""Normalization helpers.

Centralizes envelope unwrapping, payload shape recognition and defensive
numeric parsing. Nothing here knows which endpoint a payload came from.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def unwrap_envelope(value: Any) -> Any:
    """Return the payload inside an optional ``{"data": ...}`` envelope.

    Bare arrays and objects without a ``data`` key pass through unchanged.
    """
    if isinstance(value, Mapping) and "data" in value:
        return value["data"]
    return value


@dataclass(frozen=True, slots=True)
class Recognized:
    """Payload had the expected collection shape."""

    items: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """Payload was something other than a collection."""

    payload: Any


ShapeResult = Recognized | Unrecognized


def recognize_collection(payload: Any) -> ShapeResult:
    if isinstance(payload, (list, tuple)):
        return Recognized(tuple(payload))
    return Unrecognized(payload)


def as_items(result: ShapeResult) -> tuple[Any, ...]:
    """Unrecognized shapes read as "no data" rather than an error."""
    if isinstance(result, Recognized):
        return result.items
    return ()


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result
