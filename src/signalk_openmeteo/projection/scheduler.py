"""Batched, rate-bounded dispatch of per-hour forecast fetches."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from signalk_openmeteo._constants import DEFAULT_BATCH_WIDTH, DEFAULT_INTER_BATCH_DELAY
from signalk_openmeteo.models.forecast import HourlyFetchResult

_logger = logging.getLogger(__name__)

FetchOneHour = Callable[[int], Awaitable[HourlyFetchResult | None]]


def batch_ranges(hour_count: int, batch_width: int) -> list[range]:
    """Partition ``[0, hour_count)`` into contiguous ranges of *batch_width*."""
    if batch_width < 1:
        raise ValueError(f"batch_width must be >= 1, got {batch_width}")
    return [range(start, min(start + batch_width, hour_count)) for start in range(0, max(hour_count, 0), batch_width)]


async def run_batches(
    hour_count: int,
    batch_width: int = DEFAULT_BATCH_WIDTH,
    inter_batch_delay: float = DEFAULT_INTER_BATCH_DELAY,
    fetch_one_hour: FetchOneHour | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> list[HourlyFetchResult | None]:
    """Fetch every hour in ``[0, hour_count)`` in concurrent batches.

    All calls of a batch are awaited together and the batch only ends
    once every call has settled; a failing call never cancels its
    siblings. The scheduler pauses *inter_batch_delay* seconds between
    batches (not after the last one).

    A call returning ``None`` (that hour's fetch failed) stays ``None``
    in the result list. The list is in hour order whatever the
    completion order was.

    Raises
    ------
    Exception
        The first exception (in hour order) raised by a call, re-raised
        once its whole batch has settled. Later batches are not started.
    """
    if fetch_one_hour is None:
        raise ValueError("fetch_one_hour is required")

    batches = batch_ranges(hour_count, batch_width)
    results: list[HourlyFetchResult | None] = []

    for index, hours in enumerate(batches):
        _logger.debug("Fetching batch: hours %d-%d", hours.start, hours.stop - 1)
        settled = await asyncio.gather(*(fetch_one_hour(hour) for hour in hours), return_exceptions=True)

        for hour, outcome in zip(hours, settled, strict=True):
            if isinstance(outcome, BaseException):
                _logger.debug("Hour %d raised %r; aborting remaining batches", hour, outcome)
                raise outcome
            results.append(outcome)

        if index < len(batches) - 1 and inter_batch_delay > 0:
            await sleep(inter_batch_delay)

    return results
