"""Forecast configuration for signalk_openmeteo."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from signalk_openmeteo._constants import DEFAULT_BATCH_WIDTH, DEFAULT_INTER_BATCH_DELAY
from signalk_openmeteo.exceptions import ForecastConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f">= {low}"
        raise ForecastConfigError(f"{name} must be {bound}, got {value}")


@dataclasses.dataclass(frozen=True)
class ForecastConfig:
    """Forecast configuration.

    Parameters
    ----------
    api_key : str or None
        Open-Meteo key for commercial use. When set, requests go to the
        ``customer-*`` hosts and carry an ``apikey`` parameter.
    forecast_interval : int
        Minutes between scheduled forecast runs (15-1440).
    max_forecast_hours : int
        Number of hourly forecasts, and the projection horizon for a
        moving vessel (1-384).
    max_forecast_days : int
        Number of daily forecasts (1-16). The marine API caps this at 8.
    enable_hourly_weather, enable_daily_weather : bool
        Fetch and publish hourly / daily weather.
    enable_marine_hourly, enable_marine_daily : bool
        Fetch and publish hourly / daily marine data (waves, currents,
        sea temperature).
    enable_current_conditions : bool
        Request current conditions alongside the weather forecast.
    enable_position_subscription : bool
        Subscribe to navigation values on the Signal K bus.
    enable_auto_moving_forecast : bool
        Engage moving-vessel forecasting automatically once the speed over
        ground exceeds ``moving_speed_threshold``.
    moving_speed_threshold : float
        Speed in knots above which the vessel counts as moving (0.1-10).
    batch_width : int
        Number of projected hours fetched concurrently.
    inter_batch_delay : float
        Seconds to wait between two batches of projected-hour fetches.
    request_timeout : float
        Total timeout in seconds for a single Open-Meteo request.
    mqtt_enabled : bool
        Start the Signal K MQTT bus adapter.
    mqtt_host, mqtt_port : str, int
        MQTT broker of the Signal K server.
    mqtt_username, mqtt_password : str or None
        Optional broker credentials.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    delta_topic : str
        Topic that Signal K deltas are published to.
    """

    api_key: str | None = None
    forecast_interval: int = 60
    max_forecast_hours: int = 72
    max_forecast_days: int = 7
    enable_hourly_weather: bool = True
    enable_daily_weather: bool = True
    enable_marine_hourly: bool = True
    enable_marine_daily: bool = True
    enable_current_conditions: bool = True
    enable_position_subscription: bool = True
    enable_auto_moving_forecast: bool = False
    moving_speed_threshold: float = 1.0
    batch_width: int = DEFAULT_BATCH_WIDTH
    inter_batch_delay: float = DEFAULT_INTER_BATCH_DELAY
    request_timeout: float = 30.0
    mqtt_enabled: bool = False
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_keepalive: int = 60
    delta_topic: str = "signalk/delta"

    def __post_init__(self) -> None:
        _check_range("forecast_interval", self.forecast_interval, 15, 1440)
        _check_range("max_forecast_hours", self.max_forecast_hours, 1, 384)
        _check_range("max_forecast_days", self.max_forecast_days, 1, 16)
        _check_range("moving_speed_threshold", self.moving_speed_threshold, 0.1, 10.0)
        _check_range("batch_width", self.batch_width, 1)
        _check_range("inter_batch_delay", self.inter_batch_delay, 0)
        _check_range("request_timeout", self.request_timeout, 0)

    @property
    def needs_marine(self) -> bool:
        """Whether any marine product is enabled."""
        return self.enable_marine_hourly or self.enable_marine_daily

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> ForecastConfig:
        """Create configuration from Signal K plugin options.

        Accepts the camelCase keys of the plugin configuration schema.
        Missing or falsy numbers fall back to their defaults, booleans
        default to enabled unless explicitly ``False`` (except
        ``enableAutoMovingForecast`` which is opt-in).
        """

        def _flag(key: str) -> bool:
            return options.get(key) is not False

        return cls(
            api_key=options.get("apiKey") or None,
            forecast_interval=int(options.get("forecastInterval") or 60),
            max_forecast_hours=int(options.get("maxForecastHours") or 72),
            max_forecast_days=int(options.get("maxForecastDays") or 7),
            enable_hourly_weather=_flag("enableHourlyWeather"),
            enable_daily_weather=_flag("enableDailyWeather"),
            enable_marine_hourly=_flag("enableMarineHourly"),
            enable_marine_daily=_flag("enableMarineDaily"),
            enable_current_conditions=_flag("enableCurrentConditions"),
            enable_position_subscription=_flag("enablePositionSubscription"),
            enable_auto_moving_forecast=bool(options.get("enableAutoMovingForecast", False)),
            moving_speed_threshold=float(options.get("movingSpeedThreshold") or 1.0),
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> ForecastConfig:
        """Create configuration from environment variables.

        Reads optional ``OPENMETEO_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ForecastConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "OPENMETEO_API_KEY": "api_key",
            "OPENMETEO_MQTT_HOST": "mqtt_host",
            "OPENMETEO_MQTT_USERNAME": "mqtt_username",
            "OPENMETEO_MQTT_PASSWORD": "mqtt_password",
            "OPENMETEO_DELTA_TOPIC": "delta_topic",
        }
        _ENV_INT_MAP = {
            "OPENMETEO_FORECAST_INTERVAL": "forecast_interval",
            "OPENMETEO_MAX_FORECAST_HOURS": "max_forecast_hours",
            "OPENMETEO_MAX_FORECAST_DAYS": "max_forecast_days",
            "OPENMETEO_BATCH_WIDTH": "batch_width",
            "OPENMETEO_MQTT_PORT": "mqtt_port",
            "OPENMETEO_MQTT_KEEPALIVE": "mqtt_keepalive",
        }
        _ENV_FLOAT_MAP = {
            "OPENMETEO_MOVING_SPEED_THRESHOLD": "moving_speed_threshold",
            "OPENMETEO_INTER_BATCH_DELAY": "inter_batch_delay",
            "OPENMETEO_REQUEST_TIMEOUT": "request_timeout",
        }
        _ENV_BOOL_MAP = {
            "OPENMETEO_ENABLE_HOURLY_WEATHER": "enable_hourly_weather",
            "OPENMETEO_ENABLE_DAILY_WEATHER": "enable_daily_weather",
            "OPENMETEO_ENABLE_MARINE_HOURLY": "enable_marine_hourly",
            "OPENMETEO_ENABLE_MARINE_DAILY": "enable_marine_daily",
            "OPENMETEO_ENABLE_CURRENT_CONDITIONS": "enable_current_conditions",
            "OPENMETEO_ENABLE_POSITION_SUBSCRIPTION": "enable_position_subscription",
            "OPENMETEO_ENABLE_AUTO_MOVING_FORECAST": "enable_auto_moving_forecast",
            "OPENMETEO_MQTT_ENABLED": "mqtt_enabled",
        }

        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        try:
            for env_key, field_name in _ENV_INT_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = int(val)

            for env_key, field_name in _ENV_FLOAT_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = float(val)
        except ValueError as exc:
            raise ForecastConfigError(f"Invalid numeric environment value: {exc}") from exc

        defaults = {f.name: f.default for f in dataclasses.fields(cls)}
        for env_key, field_name in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), defaults[field_name])

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
