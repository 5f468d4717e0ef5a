"""HTTP transport for the power API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from pypowerdash._constants import ERROR_BODY_LIMIT, USER_AGENT
from pypowerdash.config import PowerDashConfig
from pypowerdash.exceptions import PowerDashTransportError
from pypowerdash.sync.requests import RequestDescriptor

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the synchronizers.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, request: RequestDescriptor) -> Any:
        ...


def format_http_error(status: int, reason: str | None, body: str) -> str:
    """Build ``"<status> <reason>: <body>"``, dropping empty parts."""
    message = f"{status} {reason}" if reason else str(status)
    body = body.strip()
    if body:
        message = f"{message}: {body[:ERROR_BODY_LIMIT]}"
    return message


class HttpTransport:
    """GET JSON documents from the configured base URL."""

    def __init__(self, config: PowerDashConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = (
            aiohttp.ClientTimeout(total=config.request_timeout) if config.request_timeout is not None else None
        )

    async def get_json(self, request: RequestDescriptor) -> Any:
        """Issue *request* and return the decoded JSON body.

        Raises
        ------
        PowerDashTransportError
            On network failure, timeout, non-2xx status or a body that is
            not JSON.
        """
        endpoint = request.endpoint
        url = request.url(self._config.base_url)
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        kwargs: dict[str, Any] = {"headers": headers}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        try:
            async with self._http.get(url, **kwargs) as resp:
                if not 200 <= resp.status < 300:
                    try:
                        body = await resp.text()
                    except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError):
                        body = ""
                    raise PowerDashTransportError(
                        format_http_error(resp.status, resp.reason, body),
                        status_code=resp.status,
                        endpoint=endpoint,
                        body=body,
                    )
                text = await resp.text()
        except PowerDashTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise PowerDashTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except (aiohttp.ClientError, UnicodeDecodeError) as exc:
            raise PowerDashTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise PowerDashTransportError(
                f"Invalid JSON from {endpoint}: {text[:ERROR_BODY_LIMIT]}",
                endpoint=endpoint,
            ) from exc
