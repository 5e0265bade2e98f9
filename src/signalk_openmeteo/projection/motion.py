"""Motion gate: decides between projected and stationary forecasting."""

from __future__ import annotations

from signalk_openmeteo._constants import MPS_PER_KNOT
from signalk_openmeteo.models.position import MotionState


def is_moving(speed_mps: float, threshold_knots: float = 1.0) -> bool:
    """Return ``True`` when *speed_mps* is strictly above *threshold_knots*."""
    return speed_mps > threshold_knots * MPS_PER_KNOT


def should_project(motion: MotionState, engaged: bool, threshold_knots: float) -> bool:
    """Whether a run should forecast along the projected track.

    Requires a position, a heading and a speed (a heading of 0, due
    north, is a valid heading), a speed above the threshold and the
    moving-forecast mode engaged.
    """
    if motion.current_position is None or motion.heading is None or motion.speed_over_ground is None:
        return False
    if not is_moving(motion.speed_over_ground, threshold_knots):
        return False
    return engaged
