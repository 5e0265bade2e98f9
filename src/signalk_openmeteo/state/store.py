"""In-memory controller state.

This is the only component allowed to merge navigation updates. It
holds the values the projection controller snapshots at the start of
every run, plus the run bookkeeping (last update, status string).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.models._base import DatasetKind
from signalk_openmeteo.models.forecast import DailyForecastRecord, MergedForecastRecord
from signalk_openmeteo.models.position import MotionState, Position
from signalk_openmeteo.state.events import NavigationPath, NavigationUpdate
from signalk_openmeteo.state.policy import is_first_position, should_auto_engage

_logger = logging.getLogger(__name__)

STATUS_IDLE = "Idle"
STATUS_WAITING = "Waiting for position..."
STATUS_STOPPED = "Stopped"
STATUS_STATIONARY_UPDATED = "Active - Forecasts updated"
STATUS_MOVING_UPDATED = "Active - Moving vessel forecasts updated"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class ApplyOutcome:
    """What an applied update changed."""

    first_position: bool = False
    engaged: bool = False


class ControllerState:
    """Navigation values and run bookkeeping shared by every forecast run.

    Mutated only from the event loop thread: navigation updates from the
    MQTT thread are handed over with ``call_soon_threadsafe`` before they
    reach :meth:`apply`.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self.current_position: Position | None = None
        self.heading: float | None = None
        self.speed_over_ground: float | None = None
        self.moving_forecast_engaged = False
        self.forecast_enabled = True
        self.last_update: datetime | None = None
        self.status = STATUS_IDLE
        self.published_hourly: dict[DatasetKind, list[MergedForecastRecord]] = {}
        self.published_daily: dict[DatasetKind, list[DailyForecastRecord]] = {}

    def snapshot(self) -> MotionState:
        """Immutable copy of the current navigation values."""
        return MotionState(
            heading=self.heading,
            speed_over_ground=self.speed_over_ground,
            current_position=self.current_position,
        )

    def apply(self, update: NavigationUpdate, config: ForecastConfig) -> ApplyOutcome:
        """Merge a normalized navigation update."""
        if update.path == NavigationPath.POSITION:
            first = is_first_position(self.current_position, update.position)
            self.current_position = update.position
            if first:
                _logger.info(
                    "First position received: %.5f, %.5f",
                    update.position.latitude,  # type: ignore[union-attr]
                    update.position.longitude,  # type: ignore[union-attr]
                )
            return ApplyOutcome(first_position=first)

        if update.path == NavigationPath.COURSE_OVER_GROUND_TRUE:
            self.heading = update.value
            return ApplyOutcome()

        self.speed_over_ground = update.value
        if should_auto_engage(
            auto_enabled=config.enable_auto_moving_forecast,
            engaged=self.moving_forecast_engaged,
            speed_mps=update.value,
            threshold_knots=config.moving_speed_threshold,
        ):
            self.engage()
            _logger.info("Vessel moving above %s knots; moving forecast engaged", config.moving_speed_threshold)
            return ApplyOutcome(engaged=True)
        return ApplyOutcome()

    def engage(self) -> None:
        self.moving_forecast_engaged = True

    def disengage(self) -> None:
        self.moving_forecast_engaged = False

    def set_status(self, status: str) -> None:
        self.status = status

    def record_published(
        self,
        hourly: Mapping[DatasetKind, Sequence[MergedForecastRecord]],
        daily: Mapping[DatasetKind, Sequence[DailyForecastRecord]],
    ) -> None:
        """Keep the lists last handed to the publisher, replacing earlier ones.

        Indexes match the published delta paths, so an empty record still
        holds its slot.
        """
        self.published_hourly = {kind: list(records) for kind, records in hourly.items() if records}
        self.published_daily = {kind: list(records) for kind, records in daily.items() if records}

    def mark_updated(self, status: str) -> None:
        """Record a completed forecast run."""
        self.last_update = self._clock()
        self.status = status

    def reset(self) -> None:
        """Forget navigation values and run bookkeeping."""
        self.current_position = None
        self.heading = None
        self.speed_over_ground = None
        self.moving_forecast_engaged = False
        self.last_update = None
        self.published_hourly = {}
        self.published_daily = {}
