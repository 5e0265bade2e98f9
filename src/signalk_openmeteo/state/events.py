"""Normalized navigation updates.

All ingestion paths (MQTT bus, Signal K deltas, direct calls) convert
their inputs into these updates. Only the state/store layer merges them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from signalk_openmeteo.models.position import Position


class UpdateSource(StrEnum):
    MQTT = "mqtt"
    DELTA = "delta"
    MANUAL = "manual"


class NavigationPath(StrEnum):
    POSITION = "navigation.position"
    COURSE_OVER_GROUND_TRUE = "navigation.courseOverGroundTrue"
    SPEED_OVER_GROUND = "navigation.speedOverGround"


class NavigationUpdate(BaseModel):
    """A normalized navigation value to apply to the controller state.

    Position updates carry ``position``; course and speed updates carry
    ``value`` (radians, m/s).
    """

    model_config = ConfigDict(frozen=True)

    path: NavigationPath
    source: UpdateSource = UpdateSource.DELTA
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    position: Position | None = None
    value: float | None = None
    raw: Any = None

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_payload(self) -> NavigationUpdate:
        if self.path == NavigationPath.POSITION:
            if self.position is None:
                raise ValueError("position update without position")
        elif self.value is None:
            raise ValueError(f"{self.path} update without value")
        return self
