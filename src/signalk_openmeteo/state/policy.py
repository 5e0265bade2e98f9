"""Rules for reacting to navigation updates.

No parsing happens here; the ingestion boundary produces normalized
values.
"""

from __future__ import annotations

from signalk_openmeteo.projection.motion import is_moving


def should_auto_engage(
    *,
    auto_enabled: bool,
    engaged: bool,
    speed_mps: float | None,
    threshold_knots: float,
) -> bool:
    """Decide whether a speed update engages moving-vessel forecasting.

    Auto-engage only ever switches the mode on. Slowing down below the
    threshold leaves it engaged; the motion gate then falls back to
    stationary forecasts on its own.
    """
    if not auto_enabled or engaged or speed_mps is None:
        return False
    return is_moving(speed_mps, threshold_knots)


def is_first_position(previous: object | None, incoming: object | None) -> bool:
    """Whether *incoming* is the first position the state has seen."""
    return previous is None and incoming is not None
