"""Stationary forecasting: one fetch for the vessel's current position."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.ingestion.forecast import process_daily, process_hourly
from signalk_openmeteo.models._base import DatasetKind
from signalk_openmeteo.models.forecast import DailyForecastRecord, MergedForecastRecord
from signalk_openmeteo.models.response import OpenMeteoResponse
from signalk_openmeteo.projection.controller import FetchForPosition
from signalk_openmeteo.signalk.delta import ForecastPublisher
from signalk_openmeteo.state.store import STATUS_STATIONARY_UPDATED, ControllerState

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


async def _none() -> None:
    return None


class StationaryForecaster:
    """Fetches and publishes forecasts for the current position only.

    Used directly when the vessel is not moving (or moving forecasts are
    not engaged) and as the fallback of the projection controller.
    """

    def __init__(
        self,
        config: ForecastConfig,
        fetch_weather: FetchForPosition,
        fetch_marine: FetchForPosition,
        publisher: ForecastPublisher,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._fetch_weather = fetch_weather
        self._fetch_marine = fetch_marine
        self._publisher = publisher
        self._clock = clock

    async def run(self, state: ControllerState) -> None:
        config = self._config
        position = state.current_position
        if position is None:
            _logger.debug("No position available, skipping forecast fetch")
            return

        _logger.debug("Fetching stationary forecasts for %.5f, %.5f", position.latitude, position.longitude)
        weather, marine = await asyncio.gather(
            self._fetch_weather(position),
            self._fetch_marine(position) if config.needs_marine else _none(),
        )
        if weather is None and marine is None:
            _logger.error("Failed to fetch any forecast data")
            return

        self._publish(weather, marine, state)
        state.mark_updated(STATUS_STATIONARY_UPDATED)
        _logger.info("Forecasts updated for %.5f, %.5f", position.latitude, position.longitude)

    def _publish(
        self,
        weather: OpenMeteoResponse | None,
        marine: OpenMeteoResponse | None,
        state: ControllerState,
    ) -> None:
        config = self._config
        now = self._clock()
        hourly: dict[DatasetKind, list[MergedForecastRecord]] = {}
        daily: dict[DatasetKind, list[DailyForecastRecord]] = {}

        if config.enable_hourly_weather and weather is not None:
            hourly[DatasetKind.WEATHER] = process_hourly(weather, config.max_forecast_hours, now=now)
        if config.enable_marine_hourly and marine is not None:
            hourly[DatasetKind.MARINE] = process_hourly(marine, config.max_forecast_hours, now=now)
        if config.enable_daily_weather and weather is not None:
            daily[DatasetKind.WEATHER] = process_daily(weather, config.max_forecast_days)
        if config.enable_marine_daily and marine is not None:
            daily[DatasetKind.MARINE] = process_daily(marine, config.max_forecast_days)

        for dataset, records in hourly.items():
            if records:
                self._publisher.publish(records, dataset)
        for dataset, records in daily.items():
            if records:
                self._publisher.publish_daily(records, dataset)
        state.record_published(hourly, daily)
