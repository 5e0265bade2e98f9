"""Moving-vessel forecast run orchestration.

A run walks ``IDLE -> VALIDATING -> PROJECTING -> MERGING -> PUBLISHING
-> IDLE``. When the motion gate says no, or anything in projecting,
merging or publishing raises, the run ends through ``FALLING_BACK``: the
stationary forecaster is dispatched for the current position instead.
A fetch raising for one projected hour only drops that hour; a run in
which every hour was dropped falls back as well. No exception leaves
:meth:`ProjectionController.run`.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from signalk_openmeteo._constants import KNOTS_PER_MPS
from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.models._base import DatasetKind, ensure_utc
from signalk_openmeteo.models.forecast import HourlyFetchResult, HourlyFetchTask
from signalk_openmeteo.models.position import MotionState, Position
from signalk_openmeteo.models.response import OpenMeteoResponse
from signalk_openmeteo.projection import merger
from signalk_openmeteo.projection.geodesic import project
from signalk_openmeteo.projection.motion import should_project
from signalk_openmeteo.projection.scheduler import run_batches
from signalk_openmeteo.signalk.delta import ForecastPublisher
from signalk_openmeteo.state.store import STATUS_MOVING_UPDATED, ControllerState

_logger = logging.getLogger(__name__)

FetchForPosition = Callable[[Position], Awaitable[OpenMeteoResponse | None]]
StationaryFallback = Callable[[ControllerState], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ControllerPhase(StrEnum):
    IDLE = "idle"
    VALIDATING = "validating"
    PROJECTING = "projecting"
    MERGING = "merging"
    PUBLISHING = "publishing"
    FALLING_BACK = "falling_back"


class RunOutcome(StrEnum):
    PUBLISHED = "published"
    FELL_BACK = "fell_back"


class ProjectionController:
    """Runs one moving-vessel forecast pass per :meth:`run` call.

    Parameters
    ----------
    config : ForecastConfig
        Horizon, threshold, dataset switches and batching policy.
    fetch_weather, fetch_marine : callable
        ``async (position) -> OpenMeteoResponse | None``. Expected to log
        and return ``None`` on request failures.
    publisher : ForecastPublisher
        Receives the merged hourly and daily sequences.
    fallback : callable
        ``async (state) -> None`` stationary forecaster.
    clock : callable
        Current UTC time; target hours are counted from its top of hour.
    sleep : callable
        Awaited between batches.
    """

    def __init__(
        self,
        config: ForecastConfig,
        fetch_weather: FetchForPosition,
        fetch_marine: FetchForPosition,
        publisher: ForecastPublisher,
        fallback: StationaryFallback,
        *,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._fetch_weather = fetch_weather
        self._fetch_marine = fetch_marine
        self._publisher = publisher
        self._fallback = fallback
        self._clock = clock
        self._sleep = sleep
        self.phase = ControllerPhase.IDLE

    async def run(self, state: ControllerState) -> RunOutcome:
        """Run one forecast pass against *state*."""
        self.phase = ControllerPhase.VALIDATING
        motion = state.snapshot()
        if not should_project(motion, state.moving_forecast_engaged, self._config.moving_speed_threshold):
            _logger.debug("Projection preconditions not met; using stationary forecast")
            return await self._fall_back(state)

        try:
            await self._project_and_publish(motion, state)
        except Exception:
            _logger.error("Failed to fetch position-specific forecasts", exc_info=True)
            _logger.debug("Falling back to stationary forecast")
            return await self._fall_back(state)

        self.phase = ControllerPhase.IDLE
        return RunOutcome.PUBLISHED

    async def _project_and_publish(self, motion: MotionState, state: ControllerState) -> None:
        config = self._config
        now = ensure_utc(self._clock())
        current_hour = now.replace(minute=0, second=0, microsecond=0)

        self.phase = ControllerPhase.PROJECTING
        _logger.info(
            "Fetching moving-vessel forecasts for %d hours (heading %.1f°, %.1f kn)",
            config.max_forecast_hours,
            math.degrees(motion.heading),  # type: ignore[arg-type]
            motion.speed_over_ground * KNOTS_PER_MPS,  # type: ignore[operator]
        )

        async def fetch_one_hour(hour: int) -> HourlyFetchResult | None:
            task = HourlyFetchTask(
                hour=hour,
                target_time=current_hour + timedelta(hours=hour),
                predicted_position=project(
                    motion.current_position,  # type: ignore[arg-type]
                    motion.heading,  # type: ignore[arg-type]
                    motion.speed_over_ground,  # type: ignore[arg-type]
                    hour,
                    now=now,
                ),
            )
            position = task.predicted_position
            _logger.debug("Hour %d: fetching for %.6f, %.6f", hour, position.latitude, position.longitude)
            try:
                weather = await self._fetch_weather(position)
                marine = await self._fetch_marine(position) if config.needs_marine else None
            except Exception:
                _logger.debug("Hour %d: fetch failed, skipping this hour", hour, exc_info=True)
                return None
            if weather is None and marine is None:
                return None
            return HourlyFetchResult.from_task(task, primary_response=weather, secondary_response=marine)

        results = await run_batches(
            config.max_forecast_hours,
            config.batch_width,
            config.inter_batch_delay,
            fetch_one_hour,
            sleep=self._sleep,
        )
        if all(result is None for result in results):
            raise RuntimeError("every projected hour failed to fetch")

        self.phase = ControllerPhase.MERGING
        hourly_weather = merger.merge(results, DatasetKind.WEATHER) if config.enable_hourly_weather else []
        hourly_marine = merger.merge(results, DatasetKind.MARINE) if config.enable_marine_hourly else []
        daily_weather = (
            merger.derive_daily(results, DatasetKind.WEATHER, config.max_forecast_days)
            if config.enable_daily_weather
            else []
        )
        daily_marine = (
            merger.derive_daily(results, DatasetKind.MARINE, config.max_forecast_days)
            if config.enable_marine_daily
            else []
        )

        self.phase = ControllerPhase.PUBLISHING
        if hourly_weather:
            self._publisher.publish(hourly_weather, DatasetKind.WEATHER)
        if hourly_marine:
            self._publisher.publish(hourly_marine, DatasetKind.MARINE)
        if daily_weather:
            self._publisher.publish_daily(daily_weather, DatasetKind.WEATHER)
        if daily_marine:
            self._publisher.publish_daily(daily_marine, DatasetKind.MARINE)

        state.record_published(
            {DatasetKind.WEATHER: hourly_weather, DatasetKind.MARINE: hourly_marine},
            {DatasetKind.WEATHER: daily_weather, DatasetKind.MARINE: daily_marine},
        )
        state.mark_updated(STATUS_MOVING_UPDATED)
        _logger.info(
            "Published %d weather and %d marine position-specific forecasts",
            len(hourly_weather),
            len(hourly_marine),
        )

    async def _fall_back(self, state: ControllerState) -> RunOutcome:
        self.phase = ControllerPhase.FALLING_BACK
        try:
            await self._fallback(state)
        except Exception:
            _logger.error("Stationary forecast failed", exc_info=True)
        finally:
            self.phase = ControllerPhase.IDLE
        return RunOutcome.FELL_BACK
