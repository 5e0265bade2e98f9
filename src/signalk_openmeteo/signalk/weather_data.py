"""Signal K Weather API view of the published forecasts.

The Weather API provider answers from the forecast lists last handed to
the publisher, read back per index the same way the delta paths are
addressed: hourly (or daily) weather and marine records sharing an index
are combined into one :class:`WeatherData` entry. Values are already in
Signal K names and SI units.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from signalk_openmeteo.models._base import DatasetKind, FieldValue
from signalk_openmeteo.models.forecast import DailyForecastRecord, MergedForecastRecord
from signalk_openmeteo.signalk.delta import translate_fields

DEFAULT_DESCRIPTION = "Open-Meteo weather"
DEFAULT_LONG_DESCRIPTION = "Open-Meteo weather forecast"

DEFAULT_POINT_COUNT = 72
DEFAULT_DAILY_COUNT = 7

WMO_DESCRIPTIONS: dict[int, str] = {
    0: "Clear",
    1: "Mostly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing Rime Fog",
    51: "Light Drizzle",
    53: "Moderate Drizzle",
    55: "Dense Drizzle",
    56: "Light Freezing Drizzle",
    57: "Dense Freezing Drizzle",
    61: "Slight Rain",
    63: "Moderate Rain",
    65: "Heavy Rain",
    66: "Light Freezing Rain",
    67: "Heavy Freezing Rain",
    71: "Slight Snow",
    73: "Moderate Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Slight Rain Showers",
    81: "Moderate Rain Showers",
    82: "Violent Rain Showers",
    85: "Slight Snow Showers",
    86: "Heavy Snow Showers",
    95: "Thunderstorm",
    96: "Thunderstorm with Slight Hail",
    99: "Thunderstorm with Heavy Hail",
}

WMO_LONG_DESCRIPTIONS: dict[int, str] = {
    0: "Clear sky with no cloud cover",
    1: "Mainly clear with minimal cloud cover",
    2: "Partly cloudy with scattered clouds",
    3: "Overcast with complete cloud cover",
    45: "Fog reducing visibility",
    48: "Depositing rime fog with ice formation",
    51: "Light drizzle with fine precipitation",
    53: "Moderate drizzle with steady light rain",
    55: "Dense drizzle with continuous light rain",
    56: "Light freezing drizzle, ice possible",
    57: "Dense freezing drizzle, hazardous conditions",
    61: "Slight rain with light precipitation",
    63: "Moderate rain with steady precipitation",
    65: "Heavy rain with intense precipitation",
    66: "Light freezing rain, ice accumulation possible",
    67: "Heavy freezing rain, hazardous ice conditions",
    71: "Slight snowfall with light accumulation",
    73: "Moderate snowfall with steady accumulation",
    75: "Heavy snowfall with significant accumulation",
    77: "Snow grains, fine ice particles falling",
    80: "Slight rain showers, brief light rain",
    81: "Moderate rain showers, intermittent rain",
    82: "Violent rain showers, intense downpours",
    85: "Slight snow showers, brief light snow",
    86: "Heavy snow showers, intense snowfall",
    95: "Thunderstorm with lightning and thunder",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail, dangerous conditions",
}


class WeatherForecastType(StrEnum):
    """Kind of entry returned by the Weather API provider."""

    POINT = "point"
    DAILY = "daily"
    OBSERVATION = "observation"


def _wmo_code(value: FieldValue) -> int | None:
    if value is None or isinstance(value, (bool, str)):
        return None
    return int(value)


def weather_icon(code: FieldValue, is_day: FieldValue = None) -> str | None:
    """Icon file name, e.g. ``wmo_3_day.svg``; day unless *is_day* is false or 0."""
    wmo = _wmo_code(code)
    if wmo is None:
        return None
    day_night = "night" if is_day is False or is_day == 0 else "day"
    return f"wmo_{wmo}_{day_night}.svg"


def weather_description(code: FieldValue, fallback: str = DEFAULT_DESCRIPTION) -> str:
    wmo = _wmo_code(code)
    return WMO_DESCRIPTIONS.get(wmo, fallback) if wmo is not None else fallback


def weather_long_description(code: FieldValue, fallback: str = DEFAULT_LONG_DESCRIPTION) -> str:
    wmo = _wmo_code(code)
    return WMO_LONG_DESCRIPTIONS.get(wmo, fallback) if wmo is not None else fallback


# ------------------------------------------------------------------
# Weather API models (camelCase on the wire)
# ------------------------------------------------------------------


class WeatherApiModel(BaseModel):
    """Base for Weather API payloads."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict[str, object]:
        """camelCase dict without unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class OutsideConditions(WeatherApiModel):
    temperature: float | None = None
    max_temperature: float | None = None
    min_temperature: float | None = None
    feels_like_temperature: float | None = None
    pressure: float | None = None
    relative_humidity: float | None = None
    uv_index: float | None = None
    cloud_cover: float | None = None
    precipitation_volume: float | None = None
    dew_point_temperature: float | None = None
    horizontal_visibility: float | None = None
    precipitation_probability: float | None = None
    low_cloud_cover: float | None = None
    mid_cloud_cover: float | None = None
    high_cloud_cover: float | None = None
    solar_radiation: float | None = None
    direct_normal_irradiance: float | None = None
    diffuse_horizontal_irradiance: float | None = None


class WaterConditions(WeatherApiModel):
    temperature: float | None = None
    wave_significant_height: float | None = None
    wave_period: float | None = None
    wave_direction: float | None = None
    wind_wave_height: float | None = None
    wind_wave_period: float | None = None
    wind_wave_direction: float | None = None
    swell_height: float | None = None
    swell_period: float | None = None
    swell_direction: float | None = None
    surface_current_speed: float | None = None
    surface_current_direction: float | None = None
    swell_peak_period: float | None = None
    wind_wave_peak_period: float | None = None


class WindConditions(WeatherApiModel):
    speed_true: float | None = None
    direction_true: float | None = None
    gust: float | None = None


class SunConditions(WeatherApiModel):
    sunrise: str | None = None
    sunset: str | None = None
    sunshine_duration: float | None = None
    is_daylight: bool | None = None


class WeatherData(WeatherApiModel):
    """One Weather API forecast or observation entry."""

    date: str
    type: WeatherForecastType
    description: str
    long_description: str
    icon: str | None = None
    outside: OutsideConditions
    water: WaterConditions
    wind: WindConditions
    sun: SunConditions


def _first(values: Mapping[str, FieldValue], *names: str) -> FieldValue:
    """First of *names* holding a value; daily aggregates back up the hourly names."""
    for name in names:
        value = values.get(name)
        if value is not None:
            return value
    return None


def to_weather_data(
    values: Mapping[str, FieldValue],
    forecast_type: WeatherForecastType,
    date: str,
) -> WeatherData:
    """Build a Weather API entry from Signal K-named *values*."""
    code = values.get("weatherCode")
    is_day = values.get("isDaylight")
    return WeatherData(
        date=date,
        type=forecast_type,
        description=weather_description(code),
        long_description=weather_long_description(code),
        icon=weather_icon(code, is_day),
        outside=OutsideConditions(
            temperature=values.get("airTemperature"),
            max_temperature=values.get("airTempHigh"),
            min_temperature=values.get("airTempLow"),
            feels_like_temperature=_first(values, "feelsLike", "feelsLikeHigh"),
            pressure=values.get("seaLevelPressure"),
            relative_humidity=values.get("relativeHumidity"),
            uv_index=_first(values, "uvIndex", "uvIndexMax"),
            cloud_cover=values.get("cloudCover"),
            precipitation_volume=_first(values, "precip", "precipSum"),
            dew_point_temperature=values.get("dewPoint"),
            horizontal_visibility=values.get("visibility"),
            precipitation_probability=_first(values, "precipProbability", "precipProbabilityMax"),
            low_cloud_cover=values.get("lowCloudCover"),
            mid_cloud_cover=values.get("midCloudCover"),
            high_cloud_cover=values.get("highCloudCover"),
            solar_radiation=_first(values, "solarRadiation", "solarRadiationSum"),
            direct_normal_irradiance=values.get("irradianceDirectNormal"),
            diffuse_horizontal_irradiance=values.get("diffuseRadiation"),
        ),
        water=WaterConditions(
            temperature=values.get("seaSurfaceTemperature"),
            wave_significant_height=_first(values, "significantWaveHeight", "significantWaveHeightMax"),
            wave_period=_first(values, "meanWavePeriod", "meanWavePeriodMax"),
            wave_direction=_first(values, "meanWaveDirection", "meanWaveDirectionDominant"),
            wind_wave_height=_first(values, "windWaveHeight", "windWaveHeightMax"),
            wind_wave_period=_first(values, "windWavePeriod", "windWavePeriodMax"),
            wind_wave_direction=_first(values, "windWaveDirection", "windWaveDirectionDominant"),
            swell_height=_first(values, "swellSignificantHeight", "swellSignificantHeightMax"),
            swell_period=_first(values, "swellMeanPeriod", "swellMeanPeriodMax"),
            swell_direction=_first(values, "swellMeanDirection", "swellMeanDirectionDominant"),
            surface_current_speed=values.get("currentVelocity"),
            surface_current_direction=values.get("currentDirection"),
            swell_peak_period=_first(values, "swellPeakPeriod", "swellPeakPeriodMax"),
            wind_wave_peak_period=_first(values, "windWavePeakPeriod", "windWavePeakPeriodMax"),
        ),
        wind=WindConditions(
            speed_true=_first(values, "windAvg", "windAvgMax"),
            direction_true=_first(values, "windDirection", "windDirectionDominant"),
            gust=_first(values, "windGust", "windGustMax"),
        ),
        sun=SunConditions(
            sunrise=values.get("sunrise"),
            sunset=values.get("sunset"),
            sunshine_duration=values.get("sunshineDuration"),
            is_daylight=None if is_day is None else is_day in (1, True),
        ),
    )


# ------------------------------------------------------------------
# Read-back of published lists
# ------------------------------------------------------------------


def _values_at(records: Sequence[MergedForecastRecord | DailyForecastRecord], index: int) -> dict[str, FieldValue]:
    if index >= len(records):
        return {}
    return translate_fields(records[index].fields)


def _leading_count(records: Sequence[MergedForecastRecord | DailyForecastRecord], key: str) -> int:
    """Number of leading records whose translated values include *key*."""
    count = 0
    for record in records:
        if translate_fields(record.fields).get(key) is None:
            break
        count += 1
    return count


def hourly_forecasts(
    published: Mapping[DatasetKind, Sequence[MergedForecastRecord]],
    max_count: int = DEFAULT_POINT_COUNT,
) -> list[WeatherData]:
    """Point forecasts for the leading hours with an air temperature."""
    weather = published.get(DatasetKind.WEATHER, [])
    marine = published.get(DatasetKind.MARINE, [])
    count = min(_leading_count(weather, "airTemperature"), max_count)
    forecasts: list[WeatherData] = []
    for index in range(count):
        values = {**_values_at(marine, index), **_values_at(weather, index)}
        forecasts.append(to_weather_data(values, WeatherForecastType.POINT, weather[index].timestamp))
    return forecasts


def daily_forecasts(
    published: Mapping[DatasetKind, Sequence[DailyForecastRecord]],
    max_count: int = DEFAULT_DAILY_COUNT,
) -> list[WeatherData]:
    """Daily forecasts for the leading days with a high temperature."""
    weather = published.get(DatasetKind.WEATHER, [])
    marine = published.get(DatasetKind.MARINE, [])
    count = min(_leading_count(weather, "airTempHigh"), max_count)
    forecasts: list[WeatherData] = []
    for index in range(count):
        values = {**_values_at(marine, index), **_values_at(weather, index)}
        forecasts.append(to_weather_data(values, WeatherForecastType.DAILY, weather[index].date))
    return forecasts
