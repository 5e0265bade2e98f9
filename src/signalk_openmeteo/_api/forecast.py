"""Forecast and marine endpoints.

Endpoints:
  - /v1/forecast (weather: hourly, daily, current conditions)
  - /v1/marine (waves, swell, currents, sea surface temperature)

Both are requested with ``timezone=UTC``. A configured API key switches
to the ``customer-`` hosts.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from pydantic import ValidationError

from signalk_openmeteo._constants import (
    CURRENT_WEATHER_VARIABLES,
    CUSTOMER_MARINE_URL,
    CUSTOMER_WEATHER_URL,
    DAILY_MARINE_VARIABLES,
    DAILY_WEATHER_VARIABLES,
    HOURLY_MARINE_VARIABLES,
    HOURLY_WEATHER_VARIABLES,
    MARINE_URL,
    MAX_MARINE_DAYS,
    MAX_WEATHER_DAYS,
    WEATHER_URL,
)
from signalk_openmeteo._redact import redact_url
from signalk_openmeteo._transport import Transport
from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.exceptions import OpenMeteoError
from signalk_openmeteo.models._base import DatasetKind
from signalk_openmeteo.models.position import Position
from signalk_openmeteo.models.response import OpenMeteoResponse

_logger = logging.getLogger(__name__)


def weather_url(config: ForecastConfig) -> str:
    return CUSTOMER_WEATHER_URL if config.api_key else WEATHER_URL


def marine_url(config: ForecastConfig) -> str:
    return CUSTOMER_MARINE_URL if config.api_key else MARINE_URL


def _base_params(position: Position, config: ForecastConfig, max_days: int) -> dict[str, Any]:
    params: dict[str, Any] = {
        "latitude": str(position.latitude),
        "longitude": str(position.longitude),
        "timezone": "UTC",
        "forecast_days": str(min(config.max_forecast_days, max_days)),
    }
    if config.api_key:
        params["apikey"] = config.api_key
    return params


def build_weather_params(position: Position, config: ForecastConfig) -> dict[str, Any]:
    """Query parameters for the weather endpoint."""
    params = _base_params(position, config, MAX_WEATHER_DAYS)
    if config.enable_hourly_weather:
        params["hourly"] = ",".join(HOURLY_WEATHER_VARIABLES)
    if config.enable_daily_weather:
        params["daily"] = ",".join(DAILY_WEATHER_VARIABLES)
    if config.enable_current_conditions:
        params["current"] = ",".join(CURRENT_WEATHER_VARIABLES)
    params["wind_speed_unit"] = "ms"
    return params


def build_marine_params(position: Position, config: ForecastConfig) -> dict[str, Any]:
    """Query parameters for the marine endpoint (at most 8 days)."""
    params = _base_params(position, config, MAX_MARINE_DAYS)
    if config.enable_marine_hourly:
        params["hourly"] = ",".join(HOURLY_MARINE_VARIABLES)
    if config.enable_marine_daily:
        params["daily"] = ",".join(DAILY_MARINE_VARIABLES)
    return params


async def _fetch(
    transport: Transport,
    url: str,
    params: dict[str, Any],
    dataset: DatasetKind,
) -> OpenMeteoResponse | None:
    _logger.debug("Fetching %s from: %s", dataset, redact_url(f"{url}?{urlencode(params)}"))
    try:
        body = await transport.get_json(url, params)
        return OpenMeteoResponse.model_validate(body)
    except OpenMeteoError as exc:
        _logger.error("Failed to fetch %s data: %s", dataset, exc)
    except ValidationError as exc:
        _logger.error("Unexpected %s response shape: %s", dataset, exc)
    return None


async def fetch_weather(
    transport: Transport,
    position: Position,
    config: ForecastConfig,
) -> OpenMeteoResponse | None:
    """Fetch the weather forecast for *position*.

    Returns ``None`` (after logging) when the request fails.
    """
    return await _fetch(transport, weather_url(config), build_weather_params(position, config), DatasetKind.WEATHER)


async def fetch_marine(
    transport: Transport,
    position: Position,
    config: ForecastConfig,
) -> OpenMeteoResponse | None:
    """Fetch the marine forecast for *position*.

    Returns ``None`` (after logging) when the request fails. Positions
    on land get an API error and therefore ``None``.
    """
    return await _fetch(transport, marine_url(config), build_marine_params(position, config), DatasetKind.MARINE)
