from __future__ import annotations

import pytest

from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.exceptions import ForecastConfigError


def test_defaults() -> None:
    config = ForecastConfig()

    assert config.forecast_interval == 60
    assert config.max_forecast_hours == 72
    assert config.max_forecast_days == 7
    assert config.moving_speed_threshold == 1.0
    assert config.enable_auto_moving_forecast is False
    assert config.needs_marine is True
    assert config.api_key is None


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("forecast_interval", 10),
        ("forecast_interval", 2000),
        ("max_forecast_hours", 0),
        ("max_forecast_hours", 400),
        ("max_forecast_days", 17),
        ("moving_speed_threshold", 0.05),
        ("moving_speed_threshold", 11.0),
        ("batch_width", 0),
        ("inter_batch_delay", -1.0),
    ],
)
def test_out_of_range_values_are_rejected(field: str, value: float) -> None:
    with pytest.raises(ForecastConfigError, match=field):
        ForecastConfig(**{field: value})


def test_marine_not_needed_when_both_marine_products_disabled() -> None:
    config = ForecastConfig(enable_marine_hourly=False, enable_marine_daily=False)

    assert config.needs_marine is False


def test_from_options_reads_plugin_keys() -> None:
    config = ForecastConfig.from_options(
        {
            "apiKey": "k-123",
            "forecastInterval": 30,
            "maxForecastHours": 24,
            "maxForecastDays": 5,
            "enableMarineDaily": False,
            "enableAutoMovingForecast": True,
            "movingSpeedThreshold": 2.5,
        }
    )

    assert config.api_key == "k-123"
    assert config.forecast_interval == 30
    assert config.max_forecast_hours == 24
    assert config.max_forecast_days == 5
    assert config.enable_marine_daily is False
    assert config.enable_marine_hourly is True
    assert config.enable_auto_moving_forecast is True
    assert config.moving_speed_threshold == 2.5


def test_from_options_empty_uses_defaults() -> None:
    config = ForecastConfig.from_options({"apiKey": ""})

    assert config == ForecastConfig()


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENMETEO_API_KEY", "env-key")
    monkeypatch.setenv("OPENMETEO_MAX_FORECAST_HOURS", "48")
    monkeypatch.setenv("OPENMETEO_MOVING_SPEED_THRESHOLD", "3.5")
    monkeypatch.setenv("OPENMETEO_ENABLE_MARINE_HOURLY", "off")
    monkeypatch.setenv("OPENMETEO_MQTT_ENABLED", "yes")

    config = ForecastConfig.from_env(max_forecast_hours=6)

    assert config.api_key == "env-key"
    assert config.max_forecast_hours == 6
    assert config.moving_speed_threshold == 3.5
    assert config.enable_marine_hourly is False
    assert config.mqtt_enabled is True


def test_from_env_invalid_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENMETEO_FORECAST_INTERVAL", "hourly")

    with pytest.raises(ForecastConfigError):
        ForecastConfig.from_env()
