"""Projection run models: per-hour fetch tasks, results and merged records."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from signalk_openmeteo.models._base import DatasetKind, FieldValue, OpenMeteoBaseModel, UtcTimestamp, isoformat_utc
from signalk_openmeteo.models.position import Position
from signalk_openmeteo.models.response import OpenMeteoResponse


class HourlyFetchTask(OpenMeteoBaseModel):
    """One projected hour to fetch.

    Parameters
    ----------
    hour : int
        Offset from the current hour (0 = now).
    target_time : datetime
        Top of the UTC hour the forecast is wanted for.
    predicted_position : Position
        Where the vessel is expected to be at ``target_time``.
    """

    hour: int = Field(ge=0)
    target_time: UtcTimestamp
    predicted_position: Position


class HourlyFetchResult(OpenMeteoBaseModel):
    """Raw responses fetched for one projected hour.

    ``primary_response`` is the weather response, ``secondary_response``
    the marine one. Either is ``None`` when that fetch failed or was not
    requested.
    """

    hour: int = Field(ge=0)
    target_time: UtcTimestamp
    predicted_position: Position
    primary_response: OpenMeteoResponse | None = None
    secondary_response: OpenMeteoResponse | None = None

    @classmethod
    def from_task(
        cls,
        task: HourlyFetchTask,
        *,
        primary_response: OpenMeteoResponse | None,
        secondary_response: OpenMeteoResponse | None,
    ) -> HourlyFetchResult:
        return cls(
            hour=task.hour,
            target_time=task.target_time,
            predicted_position=task.predicted_position,
            primary_response=primary_response,
            secondary_response=secondary_response,
        )

    def response_for(self, dataset: DatasetKind) -> OpenMeteoResponse | None:
        """Return the response that carries *dataset*."""
        if dataset == DatasetKind.WEATHER:
            return self.primary_response
        return self.secondary_response


class MergedForecastRecord(OpenMeteoBaseModel):
    """One hour of forecast fields, ready to publish.

    Records built by the projection engine carry the position predicted
    for that hour and ``vessel_moving=True``. Records built from a single
    stationary fetch leave the predicted coordinates unset.

    ``fields`` holds raw Open-Meteo variable values keyed by Open-Meteo
    name. Null values are never stored.
    """

    hour: int = Field(ge=0)
    timestamp: str
    fields: dict[str, FieldValue]
    predicted_latitude: float | None = None
    predicted_longitude: float | None = None
    vessel_moving: bool = False


class DailyForecastRecord(OpenMeteoBaseModel):
    """One day of forecast fields."""

    date: str
    day_index: int = Field(ge=0)
    fields: dict[str, FieldValue]


def predicted_record(
    *,
    hour: int,
    timestamp: datetime | str,
    position: Position,
    fields: dict[str, FieldValue],
) -> MergedForecastRecord:
    """Build a moving-vessel record for *position*."""
    stamp = isoformat_utc(timestamp) if isinstance(timestamp, datetime) else timestamp
    return MergedForecastRecord(
        hour=hour,
        timestamp=stamp,
        fields=fields,
        predicted_latitude=position.latitude,
        predicted_longitude=position.longitude,
        vessel_moving=True,
    )
