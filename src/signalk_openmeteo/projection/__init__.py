"""Moving-vessel forecast projection.

Pure building blocks live here; the run orchestration is in
:mod:`signalk_openmeteo.projection.controller`.
"""

from signalk_openmeteo.projection.geodesic import project
from signalk_openmeteo.projection.matcher import find_hour_index, match_hour
from signalk_openmeteo.projection.merger import derive_daily, merge
from signalk_openmeteo.projection.motion import is_moving, should_project
from signalk_openmeteo.projection.scheduler import batch_ranges, run_batches

__all__ = [
    "batch_ranges",
    "derive_daily",
    "find_hour_index",
    "is_moving",
    "match_hour",
    "merge",
    "project",
    "run_batches",
    "should_project",
]
