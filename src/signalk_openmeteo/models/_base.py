"""Base model and shared types for forecast data.

Every forecast model inherits from :class:`OpenMeteoBaseModel`, which is
frozen: positions, fetch tasks and merged records are created once per
projection run and never mutated afterwards.

Open-Meteo reports times as ISO strings. Requests are always made with
``timezone=UTC``, so timestamps without an offset are read as UTC by
:func:`parse_api_timestamp`.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any, TypeAlias

from pydantic import BaseModel, BeforeValidator, ConfigDict

FieldValue: TypeAlias = float | int | str | bool | None
"""Value of a single forecast field (number, string, bool or null)."""


def ensure_utc(value: datetime) -> datetime:
    """Aware UTC copy of *value*; naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_api_timestamp(value: Any) -> datetime | None:
    """Convert an Open-Meteo timestamp to an aware UTC datetime.

    Accepts ISO strings with or without offset, datetimes and epoch
    seconds. Returns ``None`` for ``None`` and for unparseable strings.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=UTC)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    return ensure_utc(parsed)


def _require_timestamp(value: Any) -> datetime:
    parsed = parse_api_timestamp(value)
    if parsed is None:
        raise ValueError(f"invalid timestamp: {value!r}")
    return parsed


UtcTimestamp = Annotated[datetime, BeforeValidator(_require_timestamp)]
"""Annotated type that coerces ISO strings / datetimes to aware UTC datetimes."""


def is_present(value: Any) -> bool:
    """Return ``True`` when *value* is a usable field value (not null / NaN)."""
    if value is None:
        return False
    return not (isinstance(value, float) and math.isnan(value))


def isoformat_utc(value: datetime) -> str:
    """ISO-8601 string in UTC with a ``Z`` suffix."""
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


class DatasetKind(StrEnum):
    """Forecast product a response or record belongs to."""

    WEATHER = "weather"
    MARINE = "marine"


class OpenMeteoBaseModel(BaseModel):
    """Base for forecast models: frozen, unknown keys ignored."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
