"""Open-Meteo forecast response models.

Both the forecast and the marine endpoint return the same envelope: the
requested location (snapped to the model grid) plus up to three
time-indexed tables, ``hourly``, ``daily`` and ``current``. The hourly
and daily tables hold a ``time`` array and one parallel array per
requested variable. Variable names are not fixed, so tables keep every
extra key they receive.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from signalk_openmeteo.models._base import FieldValue, is_present


class TimeSeries(BaseModel):
    """A time-indexed table: ``time`` plus one array per variable."""

    model_config = ConfigDict(frozen=True, extra="allow")

    time: list[str] = Field(default_factory=list)

    def columns(self) -> Iterator[tuple[str, list[Any]]]:
        """Yield ``(field, values)`` for every variable array (not ``time``)."""
        for name, values in (self.model_extra or {}).items():
            if isinstance(values, list):
                yield name, values

    def values_at(self, index: int) -> dict[str, FieldValue]:
        """Non-null values of every variable at *index*."""
        row: dict[str, FieldValue] = {}
        for name, values in self.columns():
            if index >= len(values):
                continue
            value = values[index]
            if is_present(value):
                row[name] = value
        return row


class CurrentConditions(BaseModel):
    """The ``current`` block: a single timestamp plus variable values."""

    model_config = ConfigDict(frozen=True, extra="allow")

    time: str | None = None
    interval: int | None = None


class OpenMeteoResponse(BaseModel):
    """Decoded response of the forecast or marine endpoint.

    Read-only input to the projection engine.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    latitude: float | None = None
    longitude: float | None = None
    generationtime_ms: float | None = None
    utc_offset_seconds: int = 0
    timezone: str | None = None
    elevation: float | None = None
    hourly_units: dict[str, str] = Field(default_factory=dict)
    hourly: TimeSeries | None = None
    daily_units: dict[str, str] = Field(default_factory=dict)
    daily: TimeSeries | None = None
    current: CurrentConditions | None = None
