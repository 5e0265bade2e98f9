"""Data models for positions, Open-Meteo responses and forecast records."""

from signalk_openmeteo.models._base import (
    DatasetKind,
    FieldValue,
    OpenMeteoBaseModel,
    UtcTimestamp,
    ensure_utc,
    isoformat_utc,
    parse_api_timestamp,
)
from signalk_openmeteo.models.forecast import (
    DailyForecastRecord,
    HourlyFetchResult,
    HourlyFetchTask,
    MergedForecastRecord,
    predicted_record,
)
from signalk_openmeteo.models.position import MotionState, Position
from signalk_openmeteo.models.response import CurrentConditions, OpenMeteoResponse, TimeSeries

__all__ = [
    "CurrentConditions",
    "DailyForecastRecord",
    "DatasetKind",
    "FieldValue",
    "HourlyFetchResult",
    "HourlyFetchTask",
    "MergedForecastRecord",
    "MotionState",
    "OpenMeteoBaseModel",
    "OpenMeteoResponse",
    "Position",
    "TimeSeries",
    "UtcTimestamp",
    "ensure_utc",
    "isoformat_utc",
    "parse_api_timestamp",
    "predicted_record",
]
