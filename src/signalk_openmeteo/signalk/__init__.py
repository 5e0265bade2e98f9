"""Signal K translation: field names, units, metadata, deltas and Weather API entries."""

from signalk_openmeteo.signalk.delta import DeltaPublisher, DeltaSink, ForecastPublisher, build_delta
from signalk_openmeteo.signalk.fields import parameter_metadata, translate_field_name
from signalk_openmeteo.signalk.units import convert_value
from signalk_openmeteo.signalk.weather_data import WeatherData, WeatherForecastType, to_weather_data

__all__ = [
    "DeltaPublisher",
    "DeltaSink",
    "ForecastPublisher",
    "WeatherData",
    "WeatherForecastType",
    "build_delta",
    "convert_value",
    "parameter_metadata",
    "to_weather_data",
    "translate_field_name",
]
