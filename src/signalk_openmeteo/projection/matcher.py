"""Hour alignment between a projected hour and a response's hourly table.

Each projected-hour request returns a whole hourly time series for the
predicted position. Only the bucket for the hour the request was made
for is kept. Matching is by UTC calendar hour: minutes and seconds are
ignored because the API returns hourly buckets and target times are
computed at the top of the hour.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from signalk_openmeteo.models._base import FieldValue, ensure_utc, parse_api_timestamp
from signalk_openmeteo.models.response import TimeSeries


def _hour_key(value: datetime) -> tuple[int, int, int, int]:
    utc = ensure_utc(value)
    return utc.year, utc.month, utc.day, utc.hour


def find_hour_index(times: Sequence[str], target_time: datetime) -> int | None:
    """Index of the first timestamp in the same UTC hour as *target_time*.

    Scans linearly and stops at the first match. Entries that cannot be
    parsed are skipped.
    """
    wanted = _hour_key(target_time)
    for index, raw in enumerate(times):
        stamp = parse_api_timestamp(raw)
        if stamp is not None and _hour_key(stamp) == wanted:
            return index
    return None


def match_hour(series: TimeSeries, target_time: datetime) -> tuple[int, dict[str, FieldValue]] | None:
    """Index and field values of the bucket matching *target_time*.

    Every field except ``time`` is copied; null values are left out.
    An empty dict means the bucket matched but carried no data. Returns
    ``None`` when no bucket is in the target hour.
    """
    index = find_hour_index(series.time, target_time)
    if index is None:
        return None
    return index, series.values_at(index)
