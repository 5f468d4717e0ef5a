"""Custom exception hierarchy for pypowerdash."""

from __future__ import annotations


class PowerDashError(Exception):
    """Base exception for all pypowerdash errors."""


class PowerDashConfigError(PowerDashError):
    """Invalid or missing configuration."""


class PowerDashTransportError(PowerDashError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON).

    The message is meant to be shown to a user as-is; the structured
    fields are kept for callers that want to branch on them.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class PowerDashFilterError(PowerDashError, ValueError):
    """Rejected filter selection (blank device id, unknown metric)."""
