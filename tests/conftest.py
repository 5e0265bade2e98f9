from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.models.response import OpenMeteoResponse

FieldFn = Callable[[int], Any]

NOW = datetime(2024, 1, 1, 6, 30, tzinfo=UTC)


def forecast_body(
    *,
    start: datetime = datetime(2024, 1, 1, tzinfo=UTC),
    hours: int = 96,
    hourly: Mapping[str, FieldFn] | None = None,
    days: int = 0,
    daily: Mapping[str, FieldFn] | None = None,
    latitude: float = 0.0,
    longitude: float = 0.0,
) -> dict[str, Any]:
    """Open-Meteo shaped body with offset-less UTC timestamps."""
    hourly_fields = hourly if hourly is not None else {"temperature_2m": lambda i: 10.0 + i}
    body: dict[str, Any] = {
        "latitude": latitude,
        "longitude": longitude,
        "generationtime_ms": 0.5,
        "utc_offset_seconds": 0,
        "timezone": "GMT",
        "elevation": 0.0,
    }
    if hours:
        times = [(start + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M") for i in range(hours)]
        body["hourly"] = {"time": times, **{name: [fn(i) for i in range(hours)] for name, fn in hourly_fields.items()}}
    if days:
        daily_fields = daily if daily is not None else {"temperature_2m_max": lambda i: 20.0 + i}
        dates = [(start + timedelta(days=i)).strftime("%Y-%m-%d") for i in range(days)]
        body["daily"] = {"time": dates, **{name: [fn(i) for i in range(days)] for name, fn in daily_fields.items()}}
    return body


def build_response(**kwargs: Any) -> OpenMeteoResponse:
    return OpenMeteoResponse.model_validate(forecast_body(**kwargs))


@pytest.fixture
def make_response() -> Callable[..., OpenMeteoResponse]:
    return build_response


@pytest.fixture
def config() -> ForecastConfig:
    return ForecastConfig(
        max_forecast_hours=12,
        max_forecast_days=3,
        enable_marine_hourly=False,
        enable_marine_daily=False,
        inter_batch_delay=0.2,
    )


class RecordingPublisher:
    """Publisher double recording every publish call."""

    def __init__(self, *, fail: bool = False) -> None:
        self.calls: list[tuple[str, list[Any], str]] = []
        self._fail = fail

    def publish(self, records: Any, dataset: Any) -> int:
        if self._fail:
            raise RuntimeError("bus unavailable")
        self.calls.append(("hourly", list(records), str(dataset)))
        return len(records)

    def publish_daily(self, records: Any, dataset: Any) -> int:
        if self._fail:
            raise RuntimeError("bus unavailable")
        self.calls.append(("daily", list(records), str(dataset)))
        return len(records)

    def kinds(self) -> list[tuple[str, str]]:
        return [(kind, dataset) for kind, _records, dataset in self.calls]


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def failing_publisher() -> RecordingPublisher:
    return RecordingPublisher(fail=True)
