from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.models._base import DatasetKind
from signalk_openmeteo.models.forecast import DailyForecastRecord, MergedForecastRecord
from signalk_openmeteo.models.position import Position
from signalk_openmeteo.state.events import NavigationPath, NavigationUpdate, UpdateSource
from signalk_openmeteo.state.policy import should_auto_engage
from signalk_openmeteo.state.store import STATUS_IDLE, ControllerState


def _dt() -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC)


def _position_update(lat: float, lon: float) -> NavigationUpdate:
    return NavigationUpdate(
        path=NavigationPath.POSITION,
        position=Position(latitude=lat, longitude=lon, timestamp=_dt()),
        observed_at=_dt(),
    )


def _value_update(path: NavigationPath, value: float) -> NavigationUpdate:
    return NavigationUpdate(path=path, value=value, source=UpdateSource.MQTT, observed_at=_dt())


def test_first_position_is_flagged_once() -> None:
    state = ControllerState(clock=_dt)
    config = ForecastConfig()

    first = state.apply(_position_update(10.0, 20.0), config)
    second = state.apply(_position_update(10.1, 20.1), config)

    assert first.first_position is True
    assert second.first_position is False
    assert state.current_position is not None
    assert state.current_position.latitude == 10.1


def test_course_and_speed_are_stored() -> None:
    state = ControllerState(clock=_dt)
    config = ForecastConfig()

    state.apply(_value_update(NavigationPath.COURSE_OVER_GROUND_TRUE, 1.5), config)
    state.apply(_value_update(NavigationPath.SPEED_OVER_GROUND, 0.2), config)

    assert state.heading == 1.5
    assert state.speed_over_ground == 0.2


def test_speed_above_threshold_auto_engages_when_enabled() -> None:
    state = ControllerState(clock=_dt)
    config = ForecastConfig(enable_auto_moving_forecast=True, moving_speed_threshold=2.0)

    below = state.apply(_value_update(NavigationPath.SPEED_OVER_GROUND, 1.0), config)
    assert below.engaged is False
    assert state.moving_forecast_engaged is False

    above = state.apply(_value_update(NavigationPath.SPEED_OVER_GROUND, 1.1), config)
    assert above.engaged is True
    assert state.moving_forecast_engaged is True


def test_auto_engage_disabled_by_default() -> None:
    state = ControllerState(clock=_dt)

    state.apply(_value_update(NavigationPath.SPEED_OVER_GROUND, 8.0), ForecastConfig())

    assert state.moving_forecast_engaged is False


def test_slowing_down_never_disengages() -> None:
    state = ControllerState(clock=_dt)
    config = ForecastConfig(enable_auto_moving_forecast=True)

    state.apply(_value_update(NavigationPath.SPEED_OVER_GROUND, 5.0), config)
    state.apply(_value_update(NavigationPath.SPEED_OVER_GROUND, 0.0), config)

    assert state.moving_forecast_engaged is True


def test_snapshot_is_not_affected_by_later_updates() -> None:
    state = ControllerState(clock=_dt)
    config = ForecastConfig()
    state.apply(_position_update(1.0, 2.0), config)
    state.apply(_value_update(NavigationPath.COURSE_OVER_GROUND_TRUE, 0.5), config)

    snapshot = state.snapshot()
    state.apply(_position_update(5.0, 6.0), config)
    state.apply(_value_update(NavigationPath.COURSE_OVER_GROUND_TRUE, 2.5), config)

    assert snapshot.current_position is not None
    assert snapshot.current_position.latitude == 1.0
    assert snapshot.heading == 0.5


def test_mark_updated_and_reset() -> None:
    state = ControllerState(clock=_dt)
    state.apply(_position_update(1.0, 2.0), ForecastConfig())
    state.engage()

    state.mark_updated("Active - Forecasts updated")
    assert state.last_update == _dt()
    assert state.status == "Active - Forecasts updated"

    state.reset()
    assert state.current_position is None
    assert state.heading is None
    assert state.speed_over_ground is None
    assert state.moving_forecast_engaged is False
    assert state.last_update is None
    assert state.forecast_enabled is True


def test_initial_state() -> None:
    state = ControllerState()

    assert state.status == STATUS_IDLE
    assert state.snapshot().current_position is None


def test_position_update_requires_position() -> None:
    with pytest.raises(ValidationError):
        NavigationUpdate(path=NavigationPath.POSITION)


def test_value_update_requires_value() -> None:
    with pytest.raises(ValidationError):
        NavigationUpdate(path=NavigationPath.SPEED_OVER_GROUND)


def test_naive_observed_at_is_made_utc() -> None:
    update = NavigationUpdate(path=NavigationPath.SPEED_OVER_GROUND, value=1.0, observed_at=datetime(2026, 1, 1))

    assert update.observed_at.tzinfo is UTC


def test_auto_engage_policy_ignores_missing_speed() -> None:
    assert should_auto_engage(auto_enabled=True, engaged=False, speed_mps=None, threshold_knots=1.0) is False
    assert should_auto_engage(auto_enabled=True, engaged=True, speed_mps=9.0, threshold_knots=1.0) is False


def test_record_published_replaces_lists_and_reset_clears_them() -> None:
    state = ControllerState(clock=_dt)
    hourly = [MergedForecastRecord(hour=0, timestamp="2026-01-01T00:00:00Z", fields={"temperature_2m": 5.0})]
    daily = [DailyForecastRecord(date="2026-01-01", day_index=0, fields={"temperature_2m_max": 8.0})]

    state.record_published({DatasetKind.WEATHER: hourly, DatasetKind.MARINE: []}, {DatasetKind.WEATHER: daily})
    assert state.published_hourly == {DatasetKind.WEATHER: hourly}
    assert state.published_daily == {DatasetKind.WEATHER: daily}

    state.record_published({DatasetKind.MARINE: hourly}, {})
    assert state.published_hourly == {DatasetKind.MARINE: hourly}
    assert state.published_daily == {}

    state.reset()
    assert state.published_hourly == {}
    assert state.published_daily == {}
