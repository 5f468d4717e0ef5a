"""Client configuration for pypowerdash."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pypowerdash._constants import BASE_URL
from pypowerdash.exceptions import PowerDashConfigError


def _env_str(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclasses.dataclass(frozen=True)
class PowerDashConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        API base URL. Every request path is appended to it. Defaults to
        ``http://localhost:8080``.
    request_timeout : float or None
        Total time budget per request in seconds. ``None`` (the default)
        imposes no limit, so a hung request keeps its source loading until
        the next filter change supersedes it.
    """

    base_url: str = BASE_URL
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise PowerDashConfigError("base_url must be non-empty")
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise PowerDashConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> PowerDashConfig:
        """Create configuration from environment variables.

        Reads ``POWERDASH_API_BASE`` and ``POWERDASH_REQUEST_TIMEOUT``.
        Blank values are ignored. Explicit keyword arguments override
        environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = _env_str(env.get("POWERDASH_API_BASE"))
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        timeout_env = _env_str(env.get("POWERDASH_REQUEST_TIMEOUT"))
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise PowerDashConfigError(
                    f"POWERDASH_REQUEST_TIMEOUT must be a number, got {timeout_env!r}"
                ) from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
