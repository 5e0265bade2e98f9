"""Response processing for stationary (single-position) forecasts.

Turns one Open-Meteo response into ordered hourly and daily records.
Values stay in Open-Meteo names and units; translation to Signal K
happens when records are published.
"""

from __future__ import annotations

from datetime import UTC, datetime

from signalk_openmeteo.models._base import isoformat_utc, parse_api_timestamp
from signalk_openmeteo.models.forecast import DailyForecastRecord, MergedForecastRecord
from signalk_openmeteo.models.response import OpenMeteoResponse


def first_index_at_or_after(times: list[str], now: datetime) -> int | None:
    """Index of the first timestamp that is not in the past."""
    for index, raw in enumerate(times):
        stamp = parse_api_timestamp(raw)
        if stamp is not None and stamp >= now:
            return index
    return None


def process_hourly(
    response: OpenMeteoResponse,
    max_hours: int,
    *,
    now: datetime | None = None,
) -> list[MergedForecastRecord]:
    """Hourly records from the first bucket at or after *now*.

    At most *max_hours* records are produced; ``hour`` is the offset
    from that first bucket. Buckets without any non-null value are
    skipped.
    """
    hourly = response.hourly
    if hourly is None or not hourly.time:
        return []

    current = now if now is not None else datetime.now(UTC)
    start = first_index_at_or_after(hourly.time, current)
    if start is None:
        return []

    records: list[MergedForecastRecord] = []
    count = min(max_hours, len(hourly.time) - start)
    for offset in range(count):
        index = start + offset
        fields = hourly.values_at(index)
        if not fields:
            continue
        stamp = parse_api_timestamp(hourly.time[index])
        records.append(
            MergedForecastRecord(
                hour=offset,
                timestamp=isoformat_utc(stamp) if stamp is not None else hourly.time[index],
                fields=fields,
            )
        )
    return records


def process_daily(response: OpenMeteoResponse, max_days: int) -> list[DailyForecastRecord]:
    """Daily records for the first *max_days* days of the response."""
    daily = response.daily
    if daily is None or not daily.time:
        return []

    records: list[DailyForecastRecord] = []
    for index in range(min(max_days, len(daily.time))):
        fields = daily.values_at(index)
        if not fields:
            continue
        records.append(DailyForecastRecord(date=daily.time[index], day_index=index, fields=fields))
    return records
