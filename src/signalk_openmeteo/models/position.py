"""Vessel position and motion models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from signalk_openmeteo.models._base import OpenMeteoBaseModel, UtcTimestamp


class Position(OpenMeteoBaseModel):
    """A geographic position at an instant.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    timestamp : datetime
        Instant the position refers to (aware, UTC).
    """

    latitude: float
    longitude: float
    timestamp: UtcTimestamp = Field(default_factory=lambda: datetime.now(UTC))


class MotionState(OpenMeteoBaseModel):
    """Snapshot of the vessel's navigation state.

    Any member may be ``None`` when no value has been received yet.

    Parameters
    ----------
    heading : float or None
        Course over ground (true), radians.
    speed_over_ground : float or None
        Speed over ground, m/s.
    current_position : Position or None
        Last known position.
    """

    heading: float | None = None
    speed_over_ground: float | None = None
    current_position: Position | None = None
