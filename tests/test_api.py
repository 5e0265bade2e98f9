from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from signalk_openmeteo._api.forecast import (
    build_marine_params,
    build_weather_params,
    fetch_marine,
    fetch_weather,
    marine_url,
    weather_url,
)
from signalk_openmeteo._constants import CUSTOMER_WEATHER_URL, MARINE_URL, WEATHER_URL
from signalk_openmeteo._transport import HttpTransport
from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.exceptions import OpenMeteoApiError, OpenMeteoTransportError
from signalk_openmeteo.models.position import Position

POSITION = Position(latitude=43.3, longitude=5.4)


class _FakeTransport:
    def __init__(self, body: Any = None, *, error: Exception | None = None) -> None:
        self.requests: list[tuple[str, dict[str, Any]]] = []
        self._body = body
        self._error = error

    async def get_json(self, url: str, params: Mapping[str, Any]) -> dict[str, Any]:
        self.requests.append((url, dict(params)))
        if self._error is not None:
            raise self._error
        return self._body


# ------------------------------------------------------------------
# Request building
# ------------------------------------------------------------------


def test_weather_params_without_key() -> None:
    config = ForecastConfig(max_forecast_days=16)

    params = build_weather_params(POSITION, config)

    assert weather_url(config) == WEATHER_URL
    assert params["latitude"] == "43.3"
    assert params["longitude"] == "5.4"
    assert params["timezone"] == "UTC"
    assert params["forecast_days"] == "16"
    assert params["wind_speed_unit"] == "ms"
    assert "temperature_2m" in params["hourly"].split(",")
    assert "sunrise" in params["daily"].split(",")
    assert "current" in params
    assert "apikey" not in params


def test_weather_params_with_key_use_customer_host() -> None:
    config = ForecastConfig(api_key="k-1")

    params = build_weather_params(POSITION, config)

    assert weather_url(config) == CUSTOMER_WEATHER_URL
    assert params["apikey"] == "k-1"


def test_disabled_products_are_not_requested() -> None:
    config = ForecastConfig(enable_hourly_weather=False, enable_current_conditions=False)

    params = build_weather_params(POSITION, config)

    assert "hourly" not in params
    assert "current" not in params
    assert "daily" in params


def test_marine_days_are_capped() -> None:
    config = ForecastConfig(max_forecast_days=14, enable_marine_daily=False)

    params = build_marine_params(POSITION, config)

    assert marine_url(config) == MARINE_URL
    assert params["forecast_days"] == "8"
    assert "wave_height" in params["hourly"].split(",")
    assert "daily" not in params


# ------------------------------------------------------------------
# Fetching
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_fetch_weather_returns_parsed_response() -> None:
    transport = _FakeTransport({"latitude": 43.3, "hourly": {"time": ["2024-01-01T00:00"], "temperature_2m": [9.0]}})

    response = await fetch_weather(transport, POSITION, ForecastConfig())

    assert response is not None
    assert response.hourly is not None
    assert response.hourly.values_at(0) == {"temperature_2m": 9.0}
    assert transport.requests[0][0] == WEATHER_URL


@pytest.mark.asyncio
async def test_fetch_marine_api_error_returns_none() -> None:
    transport = _FakeTransport(error=OpenMeteoApiError("no marine data", reason="No data is available"))

    assert await fetch_marine(transport, POSITION, ForecastConfig()) is None


@pytest.mark.asyncio
async def test_fetch_weather_transport_error_returns_none() -> None:
    transport = _FakeTransport(error=OpenMeteoTransportError("boom", status_code=502))

    assert await fetch_weather(transport, POSITION, ForecastConfig()) is None


@pytest.mark.asyncio
async def test_fetch_weather_bad_shape_returns_none() -> None:
    transport = _FakeTransport({"hourly": {"time": "not-a-list"}})

    assert await fetch_weather(transport, POSITION, ForecastConfig()) is None


@pytest.mark.asyncio
async def test_fetch_does_not_log_api_key(caplog: pytest.LogCaptureFixture) -> None:
    transport = _FakeTransport({"latitude": 1.0})

    with caplog.at_level("DEBUG", logger="signalk_openmeteo"):
        await fetch_weather(transport, POSITION, ForecastConfig(api_key="super-secret"))

    assert transport.requests[0][1]["apikey"] == "super-secret"
    assert "super-secret" not in caplog.text


# ------------------------------------------------------------------
# HttpTransport
# ------------------------------------------------------------------


async def _forecast(request: web.Request) -> web.Response:
    return web.json_response({"latitude": float(request.query["latitude"]), "timezone": request.query["timezone"]})


async def _api_error(_request: web.Request) -> web.Response:
    return web.json_response({"error": True, "reason": "Latitude must be in range"}, status=400)


async def _server_error(_request: web.Request) -> web.Response:
    return web.Response(status=500, text="Internal Server Error")


async def _list_body(_request: web.Request) -> web.Response:
    return web.json_response([1, 2, 3])


async def _undecodable_body(_request: web.Request) -> web.Response:
    return web.Response(body=b"\xff\xfe{\"latitude\": 1}", content_type="application/json")


def _app() -> web.Application:
    app = web.Application()
    app.router.add_get("/v1/forecast", _forecast)
    app.router.add_get("/v1/error", _api_error)
    app.router.add_get("/v1/broken", _server_error)
    app.router.add_get("/v1/list", _list_body)
    app.router.add_get("/v1/undecodable", _undecodable_body)
    return app


@pytest.mark.asyncio
async def test_http_transport_against_local_server() -> None:
    server = TestServer(_app())
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as session:
            transport = HttpTransport(session, timeout=5.0)

            body = await transport.get_json(str(server.make_url("/v1/forecast")), {"latitude": "1.5", "timezone": "UTC"})
            assert body == {"latitude": 1.5, "timezone": "UTC"}

            with pytest.raises(OpenMeteoApiError) as api_exc:
                await transport.get_json(str(server.make_url("/v1/error")), {})
            assert api_exc.value.reason == "Latitude must be in range"

            with pytest.raises(OpenMeteoTransportError) as http_exc:
                await transport.get_json(str(server.make_url("/v1/broken")), {})
            assert http_exc.value.status_code == 500

            with pytest.raises(OpenMeteoTransportError):
                await transport.get_json(str(server.make_url("/v1/list")), {})
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_http_transport_undecodable_body_is_a_transport_error() -> None:
    server = TestServer(_app())
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as session:
            transport = HttpTransport(session, timeout=5.0)

            with pytest.raises(OpenMeteoTransportError) as exc_info:
                await transport.get_json(str(server.make_url("/v1/undecodable")), {})
            assert exc_info.value.status_code == 200
            assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
    finally:
        await server.close()
