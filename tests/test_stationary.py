from __future__ import annotations

import dataclasses
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.models._base import DatasetKind
from signalk_openmeteo.models.position import Position
from signalk_openmeteo.models.response import OpenMeteoResponse
from signalk_openmeteo.stationary import StationaryForecaster
from signalk_openmeteo.state.store import STATUS_IDLE, STATUS_STATIONARY_UPDATED, ControllerState

NOW = datetime(2024, 1, 1, 6, 30, tzinfo=UTC)

MakeResponse = Callable[..., OpenMeteoResponse]


def _fetcher(response: OpenMeteoResponse | None, calls: list[Position]) -> Callable[[Position], Any]:
    async def fetch(position: Position) -> OpenMeteoResponse | None:
        calls.append(position)
        return response

    return fetch


def _state() -> ControllerState:
    state = ControllerState(clock=lambda: NOW)
    state.current_position = Position(latitude=43.3, longitude=5.4, timestamp=NOW)
    return state


@pytest.mark.asyncio
async def test_no_position_skips_fetch(config: ForecastConfig, publisher: Any) -> None:
    calls: list[Position] = []
    forecaster = StationaryForecaster(config, _fetcher(None, calls), _fetcher(None, calls), publisher, clock=lambda: NOW)

    await forecaster.run(ControllerState(clock=lambda: NOW))

    assert calls == []
    assert publisher.calls == []


@pytest.mark.asyncio
async def test_hourly_starts_at_first_bucket_not_in_the_past(
    config: ForecastConfig,
    publisher: Any,
    make_response: MakeResponse,
) -> None:
    calls: list[Position] = []
    forecaster = StationaryForecaster(
        config,
        _fetcher(make_response(days=5), calls),
        _fetcher(None, calls),
        publisher,
        clock=lambda: NOW,
    )
    state = _state()

    await forecaster.run(state)

    assert len(calls) == 1
    assert publisher.kinds() == [("hourly", "weather"), ("daily", "weather")]
    hourly = publisher.calls[0][1]
    assert len(hourly) == 12
    assert hourly[0].timestamp == "2024-01-01T07:00:00Z"
    assert [r.hour for r in hourly] == list(range(12))
    assert all(not r.vessel_moving and r.predicted_latitude is None for r in hourly)
    assert len(publisher.calls[1][1]) == 3
    assert state.status == STATUS_STATIONARY_UPDATED
    assert state.last_update == NOW


@pytest.mark.asyncio
async def test_both_fetches_failing_publishes_nothing(config: ForecastConfig, publisher: Any) -> None:
    marine_config = dataclasses.replace(config, enable_marine_hourly=True)
    calls: list[Position] = []
    forecaster = StationaryForecaster(
        marine_config, _fetcher(None, calls), _fetcher(None, calls), publisher, clock=lambda: NOW
    )
    state = _state()

    await forecaster.run(state)

    assert len(calls) == 2
    assert publisher.calls == []
    assert state.status == STATUS_IDLE
    assert state.last_update is None


@pytest.mark.asyncio
async def test_marine_only_is_still_published(
    config: ForecastConfig,
    publisher: Any,
    make_response: MakeResponse,
) -> None:
    marine_config = dataclasses.replace(config, enable_marine_hourly=True, enable_marine_daily=True)
    marine = make_response(hourly={"wave_height": lambda i: 0.8}, days=2, daily={"wave_height_max": lambda i: 1.2})
    forecaster = StationaryForecaster(
        marine_config, _fetcher(None, []), _fetcher(marine, []), publisher, clock=lambda: NOW
    )

    await forecaster.run(_state())

    assert publisher.kinds() == [("hourly", "marine"), ("daily", "marine")]


@pytest.mark.asyncio
async def test_disabled_products_are_not_published(
    config: ForecastConfig,
    publisher: Any,
    make_response: MakeResponse,
) -> None:
    daily_only = dataclasses.replace(config, enable_hourly_weather=False)
    forecaster = StationaryForecaster(
        daily_only, _fetcher(make_response(days=2), []), _fetcher(None, []), publisher, clock=lambda: NOW
    )

    await forecaster.run(_state())

    assert publisher.kinds() == [("daily", "weather")]


@pytest.mark.asyncio
async def test_published_lists_are_kept_on_state(
    config: ForecastConfig,
    publisher: Any,
    make_response: MakeResponse,
) -> None:
    forecaster = StationaryForecaster(
        config, _fetcher(make_response(days=3), []), _fetcher(None, []), publisher, clock=lambda: NOW
    )
    state = _state()

    await forecaster.run(state)

    assert state.published_hourly[DatasetKind.WEATHER] == publisher.calls[0][1]
    assert state.published_daily[DatasetKind.WEATHER] == publisher.calls[1][1]
    assert DatasetKind.MARINE not in state.published_hourly
