"""Assembly of per-hour fetch results into forecast sequences."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from signalk_openmeteo.ingestion.forecast import process_daily
from signalk_openmeteo.models._base import DatasetKind, isoformat_utc, parse_api_timestamp
from signalk_openmeteo.models.forecast import (
    DailyForecastRecord,
    HourlyFetchResult,
    MergedForecastRecord,
    predicted_record,
)
from signalk_openmeteo.projection.matcher import match_hour

_logger = logging.getLogger(__name__)


def _in_hour_order(results: Iterable[HourlyFetchResult | None]) -> list[HourlyFetchResult]:
    present = [result for result in results if result is not None]
    return sorted(present, key=lambda result: result.hour)


def merge(
    results: Iterable[HourlyFetchResult | None],
    dataset: DatasetKind,
) -> list[MergedForecastRecord]:
    """Build the ordered moving-vessel sequence for *dataset*.

    Failed hours (``None``), hours whose response has no bucket for the
    target hour and buckets without any value are left out, so the
    sequence may have gaps. At most one record is emitted per hour, in
    ascending hour order.
    """
    records: list[MergedForecastRecord] = []
    seen: set[int] = set()

    for result in _in_hour_order(results):
        if result.hour in seen:
            continue
        response = result.response_for(dataset)
        if response is None or response.hourly is None:
            continue

        hourly = response.hourly
        matched = match_hour(hourly, result.target_time)
        if matched is None:
            _logger.debug("Hour %d: no %s bucket for %s", result.hour, dataset, result.target_time)
            continue

        index, fields = matched
        if not fields:
            continue

        stamp = parse_api_timestamp(hourly.time[index])
        records.append(
            predicted_record(
                hour=result.hour,
                timestamp=isoformat_utc(stamp) if stamp is not None else hourly.time[index],
                position=result.predicted_position,
                fields=fields,
            )
        )
        seen.add(result.hour)

    return records


def derive_daily(
    results: Iterable[HourlyFetchResult | None],
    dataset: DatasetKind,
    max_days: int,
) -> list[DailyForecastRecord]:
    """Daily records taken from the first successful result only.

    Daily aggregates are not re-projected per predicted position: the
    earliest hour that was fetched stands for the whole run.
    """
    ordered = _in_hour_order(results)
    if not ordered:
        return []
    response = ordered[0].response_for(dataset)
    if response is None:
        return []
    return process_daily(response, max_days)
