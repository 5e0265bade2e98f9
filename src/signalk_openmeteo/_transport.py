"""HTTP transport for the Open-Meteo JSON API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from signalk_openmeteo._constants import USER_AGENT
from signalk_openmeteo._redact import redact_for_log
from signalk_openmeteo.exceptions import OpenMeteoApiError, OpenMeteoTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, params: Mapping[str, Any]) -> dict[str, Any]:
        ...


class HttpTransport:
    """GET requests returning decoded JSON objects."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 30.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """GET *url* with query *params* and return the JSON object.

        Raises
        ------
        OpenMeteoTransportError
            Network failure, non-200 status or a body that is not a JSON
            object.
        OpenMeteoApiError
            The API answered ``{"error": true, "reason": ...}``.
        """
        headers = {"accept": "application/json", "user-agent": USER_AGENT}
        _logger.debug("GET %s params=%s", url, redact_for_log(dict(params)))

        try:
            async with self._http.get(url, params=dict(params), headers=headers, timeout=self._timeout) as resp:
                raw = await resp.read()
                status = resp.status
        except aiohttp.ClientError as exc:
            raise OpenMeteoTransportError(f"Request to {url} failed: {exc}", endpoint=url) from exc
        except TimeoutError as exc:
            raise OpenMeteoTransportError(f"Request to {url} timed out", endpoint=url) from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise OpenMeteoTransportError(
                f"Undecodable body from {url} (HTTP {status})",
                status_code=status,
                endpoint=url,
            ) from exc

        try:
            body: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            if status != 200:
                raise OpenMeteoTransportError(
                    f"HTTP {status} from {url}: {text[:200]}",
                    status_code=status,
                    endpoint=url,
                ) from exc
            raise OpenMeteoTransportError(f"Invalid JSON from {url}: {text[:200]}", endpoint=url) from exc

        if isinstance(body, dict) and body.get("error"):
            reason = str(body.get("reason") or "unknown error")
            raise OpenMeteoApiError(f"Open-Meteo error from {url}: {reason}", reason=reason, endpoint=url)

        if status != 200:
            raise OpenMeteoTransportError(
                f"HTTP {status} from {url}: {text[:200]}",
                status_code=status,
                endpoint=url,
            )

        if not isinstance(body, dict):
            raise OpenMeteoTransportError(f"Expected a JSON object from {url}", endpoint=url)

        return body
