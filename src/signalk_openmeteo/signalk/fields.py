"""Open-Meteo variable names mapped to Signal K-aligned names, with metadata."""

from __future__ import annotations

from typing import Any

FIELD_NAME_MAP: dict[str, str] = {
    # Temperature
    "temperature_2m": "airTemperature",
    "apparent_temperature": "feelsLike",
    "dew_point_2m": "dewPoint",
    "temperature_2m_max": "airTempHigh",
    "temperature_2m_min": "airTempLow",
    "apparent_temperature_max": "feelsLikeHigh",
    "apparent_temperature_min": "feelsLikeLow",
    "sea_surface_temperature": "seaSurfaceTemperature",
    # Wind
    "wind_speed_10m": "windAvg",
    "wind_direction_10m": "windDirection",
    "wind_gusts_10m": "windGust",
    "wind_speed_10m_max": "windAvgMax",
    "wind_gusts_10m_max": "windGustMax",
    "wind_direction_10m_dominant": "windDirectionDominant",
    # Pressure
    "pressure_msl": "seaLevelPressure",
    "surface_pressure": "stationPressure",
    # Humidity
    "relative_humidity_2m": "relativeHumidity",
    # Precipitation
    "precipitation": "precip",
    "precipitation_probability": "precipProbability",
    "precipitation_sum": "precipSum",
    "precipitation_probability_max": "precipProbabilityMax",
    "precipitation_hours": "precipHours",
    "rain": "rain",
    "rain_sum": "rainSum",
    "showers": "showers",
    "showers_sum": "showersSum",
    "snowfall": "snowfall",
    "snowfall_sum": "snowfallSum",
    # Cloud cover
    "cloud_cover": "cloudCover",
    "cloud_cover_low": "lowCloudCover",
    "cloud_cover_mid": "midCloudCover",
    "cloud_cover_high": "highCloudCover",
    # Solar / UV
    "uv_index": "uvIndex",
    "uv_index_max": "uvIndexMax",
    "shortwave_radiation": "solarRadiation",
    "shortwave_radiation_sum": "solarRadiationSum",
    "direct_radiation": "directRadiation",
    "diffuse_radiation": "diffuseRadiation",
    "direct_normal_irradiance": "irradianceDirectNormal",
    "sunshine_duration": "sunshineDuration",
    "daylight_duration": "daylightDuration",
    # Waves
    "wave_height": "significantWaveHeight",
    "wave_height_max": "significantWaveHeightMax",
    "wave_direction": "meanWaveDirection",
    "wave_direction_dominant": "meanWaveDirectionDominant",
    "wave_period": "meanWavePeriod",
    "wave_period_max": "meanWavePeriodMax",
    "wind_wave_height": "windWaveHeight",
    "wind_wave_height_max": "windWaveHeightMax",
    "wind_wave_direction": "windWaveDirection",
    "wind_wave_direction_dominant": "windWaveDirectionDominant",
    "wind_wave_period": "windWavePeriod",
    "wind_wave_period_max": "windWavePeriodMax",
    "wind_wave_peak_period": "windWavePeakPeriod",
    "wind_wave_peak_period_max": "windWavePeakPeriodMax",
    "swell_wave_height": "swellSignificantHeight",
    "swell_wave_height_max": "swellSignificantHeightMax",
    "swell_wave_direction": "swellMeanDirection",
    "swell_wave_direction_dominant": "swellMeanDirectionDominant",
    "swell_wave_period": "swellMeanPeriod",
    "swell_wave_period_max": "swellMeanPeriodMax",
    "swell_wave_peak_period": "swellPeakPeriod",
    "swell_wave_peak_period_max": "swellPeakPeriodMax",
    # Ocean currents
    "ocean_current_velocity": "currentVelocity",
    "ocean_current_direction": "currentDirection",
    # Other
    "visibility": "visibility",
    "is_day": "isDaylight",
    "weather_code": "weatherCode",
    "cape": "cape",
    "sunrise": "sunrise",
    "sunset": "sunset",
}

REVERSE_FIELD_NAME_MAP: dict[str, str] = {signalk: openmeteo for openmeteo, signalk in FIELD_NAME_MAP.items()}


def translate_field_name(openmeteo_name: str) -> str:
    """Signal K-aligned name for an Open-Meteo variable (unknown names pass through)."""
    return FIELD_NAME_MAP.get(openmeteo_name, openmeteo_name)


def openmeteo_field_name(signalk_name: str) -> str:
    """Open-Meteo variable for a Signal K-aligned name (unknown names pass through)."""
    return REVERSE_FIELD_NAME_MAP.get(signalk_name, signalk_name)


def _meta(display_name: str, description: str, units: str | None = None) -> dict[str, str]:
    meta = {"displayName": display_name, "description": description}
    if units is not None:
        meta["units"] = units
    return meta


PARAMETER_METADATA: dict[str, dict[str, str]] = {
    # Temperature (K)
    "airTemperature": _meta("Temperature", "Air temperature at 2m height", "K"),
    "feelsLike": _meta("Feels Like Temperature", "Apparent temperature considering wind and humidity", "K"),
    "dewPoint": _meta("Dew Point", "Dew point temperature at 2m height", "K"),
    "seaSurfaceTemperature": _meta("Sea Surface Temperature", "Sea surface temperature", "K"),
    "airTempHigh": _meta("High Temperature", "Maximum air temperature", "K"),
    "airTempLow": _meta("Low Temperature", "Minimum air temperature", "K"),
    "feelsLikeHigh": _meta("Feels Like High", "Maximum apparent temperature", "K"),
    "feelsLikeLow": _meta("Feels Like Low", "Minimum apparent temperature", "K"),
    # Wind (m/s, rad)
    "windAvg": _meta("Wind Speed", "Wind speed at 10m height", "m/s"),
    "windGust": _meta("Wind Gusts", "Wind gust speed at 10m height", "m/s"),
    "windDirection": _meta("Wind Direction", "Wind direction at 10m height", "rad"),
    "windAvgMax": _meta("Max Wind Speed", "Maximum wind speed", "m/s"),
    "windGustMax": _meta("Max Wind Gusts", "Maximum wind gust speed", "m/s"),
    "windDirectionDominant": _meta("Dominant Wind Direction", "Dominant wind direction", "rad"),
    # Pressure (Pa)
    "seaLevelPressure": _meta("Sea Level Pressure", "Atmospheric pressure at mean sea level", "Pa"),
    "stationPressure": _meta("Surface Pressure", "Atmospheric pressure at surface", "Pa"),
    # Ratios
    "relativeHumidity": _meta("Relative Humidity", "Relative humidity at 2m height (0-1)", "ratio"),
    "cloudCover": _meta("Cloud Cover", "Total cloud cover (0-1)", "ratio"),
    "lowCloudCover": _meta("Low Cloud Cover", "Low altitude cloud cover (0-1)", "ratio"),
    "midCloudCover": _meta("Mid Cloud Cover", "Mid altitude cloud cover (0-1)", "ratio"),
    "highCloudCover": _meta("High Cloud Cover", "High altitude cloud cover (0-1)", "ratio"),
    # Precipitation (m)
    "precip": _meta("Precipitation", "Precipitation amount", "m"),
    "rain": _meta("Rain", "Rain amount", "m"),
    "snowfall": _meta("Snowfall", "Snowfall amount", "m"),
    "precipProbability": _meta("Precipitation Probability", "Probability of precipitation (0-1)", "ratio"),
    "precipSum": _meta("Precipitation Sum", "Total precipitation amount", "m"),
    "precipProbabilityMax": _meta(
        "Max Precipitation Probability", "Maximum probability of precipitation (0-1)", "ratio"
    ),
    "visibility": _meta("Visibility", "Horizontal visibility", "m"),
    # Waves (m, s, rad)
    "significantWaveHeight": _meta("Wave Height", "Significant wave height", "m"),
    "significantWaveHeightMax": _meta("Max Wave Height", "Maximum significant wave height", "m"),
    "meanWavePeriod": _meta("Wave Period", "Mean wave period", "s"),
    "meanWavePeriodMax": _meta("Max Wave Period", "Maximum wave period", "s"),
    "meanWaveDirection": _meta("Wave Direction", "Mean wave direction", "rad"),
    "meanWaveDirectionDominant": _meta("Dominant Wave Direction", "Dominant wave direction", "rad"),
    "windWaveHeight": _meta("Wind Wave Height", "Wind-generated wave height", "m"),
    "windWaveHeightMax": _meta("Max Wind Wave Height", "Maximum wind-generated wave height", "m"),
    "windWavePeriod": _meta("Wind Wave Period", "Wind-generated wave period", "s"),
    "windWaveDirection": _meta("Wind Wave Direction", "Wind-generated wave direction", "rad"),
    "windWaveDirectionDominant": _meta(
        "Dominant Wind Wave Direction", "Dominant wind-generated wave direction", "rad"
    ),
    "windWavePeakPeriod": _meta("Wind Wave Peak Period", "Peak period of wind-generated waves", "s"),
    "swellSignificantHeight": _meta("Swell Height", "Swell wave height", "m"),
    "swellSignificantHeightMax": _meta("Max Swell Height", "Maximum swell wave height", "m"),
    "swellMeanPeriod": _meta("Swell Period", "Swell wave period", "s"),
    "swellMeanPeriodMax": _meta("Max Swell Period", "Maximum swell wave period", "s"),
    "swellMeanDirection": _meta("Swell Direction", "Swell wave direction", "rad"),
    "swellMeanDirectionDominant": _meta("Dominant Swell Direction", "Dominant swell wave direction", "rad"),
    "swellPeakPeriod": _meta("Swell Peak Period", "Peak period of swell waves", "s"),
    # Currents
    "currentVelocity": _meta("Current Speed", "Ocean current velocity", "m/s"),
    "currentDirection": _meta("Current Direction", "Ocean current direction", "rad"),
    # Solar
    "solarRadiation": _meta("Solar Radiation", "Shortwave solar radiation", "W/m2"),
    "solarRadiationSum": _meta("Total Solar Radiation", "Total shortwave solar radiation", "J/m2"),
    "directRadiation": _meta("Direct Radiation", "Direct solar radiation", "W/m2"),
    "diffuseRadiation": _meta("Diffuse Radiation", "Diffuse solar radiation", "W/m2"),
    "irradianceDirectNormal": _meta("Direct Normal Irradiance", "Direct normal solar irradiance", "W/m2"),
    # Other
    "uvIndex": _meta("UV Index", "UV index"),
    "uvIndexMax": _meta("Max UV Index", "Maximum UV index"),
    "weatherCode": _meta("Weather Code", "WMO weather interpretation code"),
    "isDaylight": _meta("Is Daylight", "Whether it is day (1) or night (0)"),
    "sunshineDuration": _meta("Sunshine Duration", "Duration of sunshine", "s"),
    "daylightDuration": _meta("Daylight Duration", "Duration of daylight", "s"),
    "cape": _meta("CAPE", "Convective Available Potential Energy", "J/kg"),
    "sunrise": _meta("Sunrise", "Sunrise time"),
    "sunset": _meta("Sunset", "Sunset time"),
    # Moving-vessel annotations
    "predictedLatitude": _meta("Predicted Latitude", "Latitude the vessel is predicted to reach", "deg"),
    "predictedLongitude": _meta("Predicted Longitude", "Longitude the vessel is predicted to reach", "deg"),
    "vesselMoving": _meta("Vessel Moving", "Forecast computed along the projected track"),
}

# Checked in order; first match wins.
_FALLBACK_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...], str, str], ...] = (
    (("Temp", "temperature"), (), "K", "Temperature forecast"),
    (("Velocity", "velocity"), (), "m/s", "Speed forecast"),
    (("Pressure", "pressure"), (), "Pa", "Pressure forecast"),
    (("Humidity", "humidity"), (), "ratio", "Humidity forecast (0-1)"),
    (("precip",), ("Probability",), "m", "Precipitation forecast"),
    (("Probability", "Cover"), (), "ratio", "Ratio forecast (0-1)"),
    (("Direction", "direction"), (), "rad", "Direction forecast"),
    (("visibility", "Visibility"), (), "m", "Visibility forecast"),
    (("Height", "height"), (), "m", "Height forecast"),
    (("Period", "period"), (), "s", "Period forecast"),
)


def parameter_metadata(name: str) -> dict[str, Any]:
    """Signal K metadata for a translated field name.

    Unknown names get units guessed from the name.
    """
    known = PARAMETER_METADATA.get(name)
    if known is not None:
        return dict(known)

    if "wind" in name and ("Avg" in name or "Gust" in name):
        return {"units": "m/s", "displayName": name, "description": "Wind speed forecast"}

    for needles, exclusions, units, description in _FALLBACK_RULES:
        if any(n in name for n in needles) and not any(x in name for x in exclusions):
            return {"units": units, "displayName": name, "description": description}

    return {"units": "", "displayName": name, "description": f"{name} forecast parameter"}
