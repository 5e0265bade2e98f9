"""Normalization helpers.

Centralizes parsing of values coming off the Signal K bus. Placeholders
and non-finite numbers become ``None``.
"""

from __future__ import annotations

import json
import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def decode_payload(payload: bytes | str) -> Any:
    """Decode an MQTT payload.

    Signal K publishes JSON values; a bare number or string that is not
    valid JSON is returned as text.
    """
    text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
    text = text.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def topic_to_path(topic: str) -> str | None:
    """Signal K path for a ``vessels/self/...`` MQTT topic."""
    parts = [part for part in topic.split("/") if part]
    if len(parts) < 3 or parts[0] != "vessels" or parts[1] != "self":
        return None
    return ".".join(parts[2:])
