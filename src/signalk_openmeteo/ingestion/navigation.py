"""Navigation ingestion.

Translates Signal K deltas and MQTT navigation messages into normalized
:class:`NavigationUpdate` objects. Values that cannot be used (missing
latitude or longitude, null course or speed) are dropped here so the
state store never has to filter them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import ValidationError

from signalk_openmeteo._constants import SELF_CONTEXT
from signalk_openmeteo.ingestion.normalize import decode_payload, safe_float, topic_to_path
from signalk_openmeteo.models._base import parse_api_timestamp
from signalk_openmeteo.models.position import Position
from signalk_openmeteo.state.events import NavigationPath, NavigationUpdate, UpdateSource

_logger = logging.getLogger(__name__)

SUBSCRIBED_PATHS: tuple[str, ...] = tuple(path.value for path in NavigationPath)


def _position(value: Any, timestamp: Any) -> Position | None:
    if not isinstance(value, Mapping):
        return None
    latitude = safe_float(value.get("latitude"))
    longitude = safe_float(value.get("longitude"))
    if latitude is None or longitude is None:
        return None
    stamp = parse_api_timestamp(timestamp)
    if stamp is None:
        return Position(latitude=latitude, longitude=longitude)
    return Position(latitude=latitude, longitude=longitude, timestamp=stamp)


def build_update(
    path: str,
    value: Any,
    *,
    source: UpdateSource,
    timestamp: Any = None,
) -> NavigationUpdate | None:
    """Normalize one ``(path, value)`` pair, or ``None`` when unusable."""
    try:
        nav_path = NavigationPath(path)
    except ValueError:
        return None

    observed = parse_api_timestamp(timestamp)
    extra: dict[str, Any] = {"observed_at": observed} if observed is not None else {}

    if nav_path == NavigationPath.POSITION:
        position = _position(value, timestamp)
        if position is None:
            _logger.debug("Ignoring position without latitude/longitude: %r", value)
            return None
        return NavigationUpdate(path=nav_path, source=source, position=position, raw=value, **extra)

    number = safe_float(value)
    if number is None:
        return None
    try:
        return NavigationUpdate(path=nav_path, source=source, value=number, raw=value, **extra)
    except ValidationError:
        _logger.debug("Dropping invalid %s value %r", path, value, exc_info=True)
        return None


def iter_delta_updates(delta: Mapping[str, Any]) -> Iterator[NavigationUpdate]:
    """Yield navigation updates carried by a Signal K delta.

    Deltas for another context than our own vessel are ignored. A delta
    without a context is taken to be about our vessel.
    """
    context = delta.get("context")
    if context not in (None, SELF_CONTEXT):
        return
    for update in delta.get("updates") or []:
        if not isinstance(update, Mapping):
            continue
        timestamp = update.get("timestamp")
        for entry in update.get("values") or []:
            if not isinstance(entry, Mapping):
                continue
            built = build_update(
                str(entry.get("path", "")),
                entry.get("value"),
                source=UpdateSource.DELTA,
                timestamp=timestamp,
            )
            if built is not None:
                yield built


def update_from_mqtt(topic: str, payload: bytes | str) -> NavigationUpdate | None:
    """Normalize one MQTT message published under ``vessels/self/...``."""
    path = topic_to_path(topic)
    if path is None:
        return None
    value = decode_payload(payload)
    # Some bridges publish the full ``{"value": ..., "timestamp": ...}`` object.
    timestamp = None
    if isinstance(value, Mapping) and "value" in value:
        timestamp = value.get("timestamp")
        value = value.get("value")
    return build_update(path, value, source=UpdateSource.MQTT, timestamp=timestamp)
