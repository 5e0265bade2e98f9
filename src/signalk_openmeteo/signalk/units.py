"""Conversion of Open-Meteo values to Signal K base units.

Open-Meteo reports temperatures in °C, directions in degrees, rain in
mm, snow in cm, pressure in hPa, ratios in percent and ocean current
velocity in km/h (wind speed is requested in m/s). Signal K wants K,
rad, m, Pa, ratios in 0..1 and m/s.
"""

from __future__ import annotations

import math

from signalk_openmeteo.models._base import FieldValue

_MM_FIELDS = frozenset({"precipitation", "rain", "showers", "precipitation_sum", "rain_sum", "showers_sum"})
_CM_FIELDS = frozenset({"snowfall", "snowfall_sum"})
_PERCENT_FIELDS = frozenset({"precipitation_probability", "precipitation_probability_max"})


def celsius_to_kelvin(celsius: float) -> float:
    return celsius + 273.15


def deg_to_rad(degrees: float) -> float:
    return degrees * math.pi / 180.0


def hpa_to_pa(hpa: float) -> float:
    return hpa * 100.0


def mm_to_m(mm: float) -> float:
    return mm / 1000.0


def cm_to_m(cm: float) -> float:
    return cm / 100.0


def kmh_to_ms(kmh: float) -> float:
    return kmh / 3.6


def percent_to_ratio(percent: float) -> float:
    return percent / 100.0


def convert_value(field: str, value: FieldValue) -> FieldValue:
    """Convert *value* of the Open-Meteo variable *field* to Signal K units.

    Non-numeric values (sunrise / sunset strings, booleans) and fields
    without a known unit are returned unchanged.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value

    if "temperature" in field or field == "dew_point_2m":
        return celsius_to_kelvin(value)
    if "direction" in field:
        return deg_to_rad(value)
    if field in _MM_FIELDS:
        return mm_to_m(value)
    if field in _CM_FIELDS:
        return cm_to_m(value)
    if "pressure" in field:
        return hpa_to_pa(value)
    if "humidity" in field or "cloud_cover" in field or field in _PERCENT_FIELDS:
        return percent_to_ratio(value)
    if field == "ocean_current_velocity":
        return kmh_to_ms(value)
    return value
