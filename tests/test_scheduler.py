from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from signalk_openmeteo.models.forecast import HourlyFetchResult
from signalk_openmeteo.models.position import Position
from signalk_openmeteo.projection.scheduler import batch_ranges, run_batches

_BASE = datetime(2024, 1, 1, 6, tzinfo=UTC)


def _result(hour: int) -> HourlyFetchResult:
    return HourlyFetchResult(
        hour=hour,
        target_time=_BASE + timedelta(hours=hour),
        predicted_position=Position(latitude=float(hour), longitude=0.0),
    )


class _SleepRecorder:
    def __init__(self, calls: list[int]) -> None:
        self.delays: list[float] = []
        self.calls_seen: list[int] = []
        self._calls = calls

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.calls_seen.append(len(self._calls))


def test_batch_ranges_partitions_contiguously() -> None:
    assert batch_ranges(12, 5) == [range(0, 5), range(5, 10), range(10, 12)]
    assert batch_ranges(0, 5) == []


def test_batch_ranges_rejects_zero_width() -> None:
    with pytest.raises(ValueError):
        batch_ranges(3, 0)


@pytest.mark.asyncio
async def test_twelve_hours_in_batches_of_five() -> None:
    calls: list[int] = []
    sleep = _SleepRecorder(calls)

    async def fetch(hour: int) -> HourlyFetchResult | None:
        calls.append(hour)
        return None if hour % 3 == 0 else _result(hour)

    results = await run_batches(12, 5, 0.2, fetch, sleep=sleep)

    assert len(calls) == 12
    assert sorted(calls) == list(range(12))
    # Two pauses, taken after 5 and after 10 dispatched calls.
    assert sleep.delays == [0.2, 0.2]
    assert sleep.calls_seen == [5, 10]
    assert len(results) == 12


@pytest.mark.asyncio
async def test_none_results_are_kept_in_place() -> None:
    async def fetch(hour: int) -> HourlyFetchResult | None:
        return None if hour in {1, 6} else _result(hour)

    results = await run_batches(8, 5, 0.0, fetch, sleep=_SleepRecorder([]))

    assert results[1] is None
    assert results[6] is None
    assert [r.hour for r in results if r is not None] == [0, 2, 3, 4, 5, 7]


@pytest.mark.asyncio
async def test_results_in_hour_order_whatever_the_completion_order() -> None:
    completed: list[int] = []

    async def fetch(hour: int) -> HourlyFetchResult | None:
        await asyncio.sleep(0.002 * (5 - hour % 5))
        completed.append(hour)
        return _result(hour)

    results = await run_batches(10, 5, 0.0, fetch, sleep=_SleepRecorder([]))

    assert completed[:5] != [0, 1, 2, 3, 4]
    assert [r.hour for r in results if r is not None] == list(range(10))


@pytest.mark.asyncio
async def test_batch_calls_run_concurrently_up_to_width() -> None:
    in_flight = 0
    peak = 0

    async def fetch(hour: int) -> HourlyFetchResult | None:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.005)
        in_flight -= 1
        return _result(hour)

    await run_batches(12, 5, 0.0, fetch, sleep=_SleepRecorder([]))

    assert peak == 5


@pytest.mark.asyncio
async def test_no_pause_after_single_batch() -> None:
    sleep = _SleepRecorder([])

    async def fetch(hour: int) -> HourlyFetchResult | None:
        return _result(hour)

    await run_batches(4, 5, 0.2, fetch, sleep=sleep)

    assert sleep.delays == []


@pytest.mark.asyncio
async def test_exception_lets_siblings_settle_then_propagates() -> None:
    finished: list[int] = []
    started: list[int] = []

    async def fetch(hour: int) -> HourlyFetchResult | None:
        started.append(hour)
        if hour == 1:
            raise RuntimeError("boom")
        await asyncio.sleep(0.005)
        finished.append(hour)
        return _result(hour)

    with pytest.raises(RuntimeError, match="boom"):
        await run_batches(12, 5, 0.0, fetch, sleep=_SleepRecorder([]))

    assert sorted(finished) == [0, 2, 3, 4]
    assert sorted(started) == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_fetch_callable_is_required() -> None:
    with pytest.raises(ValueError):
        await run_batches(3)
