"""Great-circle dead reckoning on a spherical Earth."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from signalk_openmeteo._constants import EARTH_RADIUS_M, SECONDS_PER_HOUR
from signalk_openmeteo.models.position import Position


def _normalize_longitude(lon_deg: float) -> float:
    return (lon_deg + 180.0) % 360.0 - 180.0


def project(
    current: Position,
    heading_rad: float,
    speed_mps: float,
    hours_ahead: float,
    *,
    now: datetime | None = None,
) -> Position:
    """Return the position reached after *hours_ahead* at constant course and speed.

    Uses the spherical forward geodesic with a mean Earth radius of
    6,371,000 m. *heading_rad* is the true course in radians and
    *speed_mps* the speed over ground in m/s. The returned timestamp is
    *now* (default: the current UTC time) plus *hours_ahead*.
    """
    distance = speed_mps * hours_ahead * SECONDS_PER_HOUR
    angular = distance / EARTH_RADIUS_M

    lat1 = math.radians(current.latitude)
    lon1 = math.radians(current.longitude)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(heading_rad)
    )
    lon2 = lon1 + math.atan2(
        math.sin(heading_rad) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )

    base = now if now is not None else datetime.now(UTC)
    return Position(
        latitude=math.degrees(lat2),
        longitude=_normalize_longitude(math.degrees(lon2)),
        timestamp=base + timedelta(hours=hours_ahead),
    )
