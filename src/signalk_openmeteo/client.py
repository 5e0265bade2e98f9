"""High-level async client: Open-Meteo forecasts published as Signal K deltas."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import aiohttp

from signalk_openmeteo._api import forecast as _forecast_api
from signalk_openmeteo._mqtt import MqttSettings, SignalKMqttRuntime
from signalk_openmeteo._transport import HttpTransport, Transport
from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.exceptions import OpenMeteoError, SignalKBusError
from signalk_openmeteo.ingestion.navigation import iter_delta_updates
from signalk_openmeteo.models.position import Position
from signalk_openmeteo.models.response import OpenMeteoResponse
from signalk_openmeteo.projection.controller import ProjectionController, RunOutcome
from signalk_openmeteo.signalk.delta import DeltaPublisher
from signalk_openmeteo.signalk.weather_data import (
    DEFAULT_DAILY_COUNT,
    DEFAULT_POINT_COUNT,
    WeatherData,
    WeatherForecastType,
    daily_forecasts,
    hourly_forecasts,
)
from signalk_openmeteo.stationary import StationaryForecaster
from signalk_openmeteo.state.events import NavigationUpdate
from signalk_openmeteo.state.store import STATUS_STOPPED, STATUS_WAITING, ControllerState

_logger = logging.getLogger(__name__)

INITIAL_RUN_DELAY = 1.0


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ForecastClient:
    """Async client that keeps Open-Meteo forecasts flowing to Signal K.

    Usage::

        async with ForecastClient(config, on_delta=print) as client:
            client.handle_delta(position_delta)
            await client.refresh()

    or, for the scheduled mode of the Signal K plugin::

        async with ForecastClient(config) as client:
            await client.start()
            ...
            await client.stop()
    """

    def __init__(
        self,
        config: ForecastConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        on_delta: Callable[[dict[str, Any]], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._on_delta = on_delta
        self._clock = clock
        self._sleep = sleep
        self._transport: Transport | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._mqtt_runtime: SignalKMqttRuntime | None = None
        self._ticker: asyncio.Task[None] | None = None
        self._pending_runs: set[asyncio.Task[RunOutcome]] = set()
        self._run_lock = asyncio.Lock()

        self._state = ControllerState(clock=clock)
        self._publisher = DeltaPublisher(self._emit_delta, clock=clock)
        self._stationary = StationaryForecaster(
            config,
            self._fetch_weather,
            self._fetch_marine,
            self._publisher,
            clock=clock,
        )
        self._controller = ProjectionController(
            config,
            self._fetch_weather,
            self._fetch_marine,
            self._publisher,
            self._stationary.run,
            clock=clock,
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ForecastClient:
        self._loop = asyncio.get_running_loop()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._cancel_background()
        self._stop_mqtt()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._loop = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def config(self) -> ForecastConfig:
        return self._config

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def status(self) -> str:
        return self._state.status

    @property
    def last_update(self) -> datetime | None:
        return self._state.last_update

    @property
    def is_running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise OpenMeteoError("Client not initialized. Use 'async with ForecastClient(...) as client:'")
        return self._transport

    async def _fetch_weather(self, position: Position) -> OpenMeteoResponse | None:
        return await _forecast_api.fetch_weather(self._require_transport(), position, self._config)

    async def _fetch_marine(self, position: Position) -> OpenMeteoResponse | None:
        return await _forecast_api.fetch_marine(self._require_transport(), position, self._config)

    def _emit_delta(self, delta: dict[str, Any]) -> None:
        """Fan a delta out to the MQTT bus and the ``on_delta`` callback."""
        runtime = self._mqtt_runtime
        if runtime is not None and runtime.is_running:
            try:
                runtime.publish_delta(delta)
            except SignalKBusError:
                _logger.debug("MQTT delta publish skipped", exc_info=True)
        if self._on_delta is not None:
            try:
                self._on_delta(delta)
            except Exception:
                _logger.debug("on_delta callback failed", exc_info=True)

    def _start_mqtt(self) -> None:
        """Best-effort MQTT startup (failures must not stop forecasting)."""
        if not self._config.mqtt_enabled:
            return
        if self._mqtt_runtime is not None and self._mqtt_runtime.is_running:
            return
        loop = self._loop or asyncio.get_running_loop()
        try:
            runtime = SignalKMqttRuntime(
                loop=loop,
                on_update=self.handle_navigation_update,
                keepalive=self._config.mqtt_keepalive,
                logger=_logger,
            )
            runtime.start(MqttSettings.from_config(self._config))
            self._mqtt_runtime = runtime
        except Exception:
            _logger.debug("MQTT startup failed", exc_info=True)

    def _stop_mqtt(self) -> None:
        runtime = self._mqtt_runtime
        self._mqtt_runtime = None
        if runtime is not None:
            runtime.stop()

    def _schedule_run(self) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._pending_runs.add(task)
        task.add_done_callback(self._pending_runs.discard)

    async def _cancel_background(self) -> None:
        tasks: list[asyncio.Task[Any]] = list(self._pending_runs)
        if self._ticker is not None:
            tasks.append(self._ticker)
        self._ticker = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._pending_runs.clear()

    async def _run_ticker(self) -> None:
        await self._sleep(INITIAL_RUN_DELAY)
        if self._state.current_position is not None:
            await self.refresh()
        else:
            _logger.debug("No position available yet, waiting for position updates")
            self._state.set_status(STATUS_WAITING)

        interval = self._config.forecast_interval * 60
        while True:
            await self._sleep(interval)
            if self._state.forecast_enabled and self._state.current_position is not None:
                await self.refresh()

    # ------------------------------------------------------------------
    # Forecast runs
    # ------------------------------------------------------------------

    async def refresh(self) -> RunOutcome:
        """Run one forecast pass now.

        Moving-vessel forecasting is used when the vessel is moving and
        the mode is engaged; otherwise (or when it fails) the stationary
        forecast for the current position is published. Runs never
        overlap.
        """
        async with self._run_lock:
            return await self._controller.run(self._state)

    async def start(self) -> None:
        """Start scheduled forecasting.

        The first run happens after one second (or as soon as the first
        position arrives), then every ``forecast_interval`` minutes.
        """
        self._require_transport()
        if self.is_running:
            return
        self._start_mqtt()
        self._ticker = asyncio.get_running_loop().create_task(self._run_ticker())
        _logger.debug("Forecast scheduling started (interval %d min)", self._config.forecast_interval)

    async def stop(self) -> None:
        """Stop scheduled forecasting and reset navigation state."""
        await self._cancel_background()
        self._stop_mqtt()
        self._state.reset()
        self._state.set_status(STATUS_STOPPED)
        _logger.debug("Forecast scheduling stopped")

    # ------------------------------------------------------------------
    # Navigation input
    # ------------------------------------------------------------------

    def handle_navigation_update(self, update: NavigationUpdate) -> None:
        """Apply a navigation update; the first position triggers a run."""
        outcome = self._state.apply(update, self._config)
        if outcome.first_position and self.is_running:
            self._schedule_run()

    def handle_delta(self, delta: Mapping[str, Any]) -> int:
        """Apply the navigation values of a Signal K delta.

        Returns the number of navigation updates applied.
        """
        if not self._config.enable_position_subscription:
            return 0
        count = 0
        for update in iter_delta_updates(delta):
            self.handle_navigation_update(update)
            count += 1
        return count

    def engage_moving_forecast(self) -> None:
        """Forecast along the projected track while the vessel is moving."""
        self._state.engage()

    def disengage_moving_forecast(self) -> None:
        self._state.disengage()

    # ------------------------------------------------------------------
    # Weather API provider
    # ------------------------------------------------------------------

    def get_observations(self) -> list[WeatherData]:
        """Current conditions: the first published hourly forecast."""
        forecasts = hourly_forecasts(self._state.published_hourly, 1)
        return [forecast.model_copy(update={"type": WeatherForecastType.OBSERVATION}) for forecast in forecasts]

    def get_forecasts(
        self,
        forecast_type: WeatherForecastType | str = WeatherForecastType.POINT,
        max_count: int | None = None,
    ) -> list[WeatherData]:
        """Published forecasts as Weather API entries.

        ``daily`` returns up to 7 days by default, anything else up to
        72 hourly point forecasts.
        """
        if forecast_type == WeatherForecastType.DAILY:
            return daily_forecasts(self._state.published_daily, max_count or DEFAULT_DAILY_COUNT)
        return hourly_forecasts(self._state.published_hourly, max_count or DEFAULT_POINT_COUNT)

    def get_warnings(self) -> list[WeatherData]:
        """Open-Meteo publishes no weather warnings."""
        return []
