"""Signal K delta construction and publishing.

Each forecast record becomes one delta. Values are addressed as
``environment.outside.openmeteo.forecast.{hourly|daily}.{name}.{index}``
where ``index`` is the record's position in the published sequence, and
every value is accompanied by its metadata.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

from signalk_openmeteo._constants import FORECAST_PATH_PREFIX, SELF_CONTEXT
from signalk_openmeteo.models._base import DatasetKind, FieldValue, isoformat_utc
from signalk_openmeteo.models.forecast import DailyForecastRecord, MergedForecastRecord
from signalk_openmeteo.signalk.fields import parameter_metadata, translate_field_name
from signalk_openmeteo.signalk.units import convert_value

_logger = logging.getLogger(__name__)

DeltaSink = Callable[[dict[str, Any]], None]
"""Receives one Signal K delta (``{"context": ..., "updates": [...]}``)."""


class ForecastPublisher(Protocol):
    """Anything that can publish forecast sequences."""

    def publish(self, records: Sequence[MergedForecastRecord], dataset: DatasetKind) -> int: ...

    def publish_daily(self, records: Sequence[DailyForecastRecord], dataset: DatasetKind) -> int: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def source_label(granularity: str, dataset: DatasetKind) -> str:
    """``$source`` label, e.g. ``openmeteo-hourly-weather-api``."""
    return f"openmeteo-{granularity}-{dataset}-api"


def forecast_path(granularity: str, name: str, index: int) -> str:
    return f"{FORECAST_PATH_PREFIX}.{granularity}.{name}.{index}"


def translate_fields(fields: dict[str, FieldValue]) -> dict[str, FieldValue]:
    """Signal K names and units for a record's raw Open-Meteo fields."""
    translated: dict[str, FieldValue] = {}
    for field, value in fields.items():
        if value is None:
            continue
        translated[translate_field_name(field)] = convert_value(field, value)
    return translated


def hourly_values(record: MergedForecastRecord) -> dict[str, FieldValue]:
    """Values published for one hourly record, including track annotations."""
    values = translate_fields(record.fields)
    if not values:
        return values
    if record.vessel_moving:
        values["predictedLatitude"] = record.predicted_latitude
        values["predictedLongitude"] = record.predicted_longitude
        values["vesselMoving"] = True
    return values


def build_delta(
    *,
    granularity: str,
    dataset: DatasetKind,
    index: int,
    values: dict[str, FieldValue],
    timestamp: str,
    context: str = SELF_CONTEXT,
) -> dict[str, Any]:
    """Assemble one Signal K delta with values and metadata."""
    entries: list[dict[str, Any]] = []
    meta: list[dict[str, Any]] = []
    for name, value in values.items():
        path = forecast_path(granularity, name, index)
        entries.append({"path": path, "value": value})
        meta.append({"path": path, "value": parameter_metadata(name)})
    return {
        "context": context,
        "updates": [
            {
                "$source": source_label(granularity, dataset),
                "timestamp": timestamp,
                "values": entries,
                "meta": meta,
            }
        ],
    }


class DeltaPublisher:
    """Publishes forecast records as Signal K deltas to a sink.

    Parameters
    ----------
    sink : DeltaSink
        Called once per delta. Exceptions raised by the sink propagate
        to the caller of :meth:`publish` / :meth:`publish_daily`.
    context : str
        Signal K context of every delta.
    clock : callable
        Returns the current UTC time, used to stamp daily deltas.
    """

    def __init__(
        self,
        sink: DeltaSink,
        *,
        context: str = SELF_CONTEXT,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sink = sink
        self._context = context
        self._clock = clock

    def publish(self, records: Sequence[MergedForecastRecord], dataset: DatasetKind) -> int:
        """Publish hourly records; returns the number of deltas sent."""
        sent = 0
        for index, record in enumerate(records):
            values = hourly_values(record)
            if not values:
                continue
            self._sink(
                build_delta(
                    granularity="hourly",
                    dataset=dataset,
                    index=index,
                    values=values,
                    timestamp=record.timestamp or isoformat_utc(self._clock()),
                    context=self._context,
                )
            )
            sent += 1
        _logger.debug("Published %d hourly %s forecasts", sent, dataset)
        return sent

    def publish_daily(self, records: Sequence[DailyForecastRecord], dataset: DatasetKind) -> int:
        """Publish daily records; returns the number of deltas sent."""
        sent = 0
        stamp = isoformat_utc(self._clock())
        for index, record in enumerate(records):
            values = translate_fields(record.fields)
            if not values:
                continue
            self._sink(
                build_delta(
                    granularity="daily",
                    dataset=dataset,
                    index=index,
                    values=values,
                    timestamp=stamp,
                    context=self._context,
                )
            )
            sent += 1
        _logger.debug("Published %d daily %s forecasts", sent, dataset)
        return sent
