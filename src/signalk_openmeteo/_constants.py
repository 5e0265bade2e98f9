"""Internal constants shared across the library."""

WEATHER_URL = "https://api.open-meteo.com/v1/forecast"
MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
CUSTOMER_WEATHER_URL = "https://customer-api.open-meteo.com/v1/forecast"
CUSTOMER_MARINE_URL = "https://customer-marine-api.open-meteo.com/v1/marine"
USER_AGENT = "signalk-openmeteo"

PLUGIN_ID = "signalk-open-meteo"
SELF_CONTEXT = "vessels.self"
FORECAST_PATH_PREFIX = "environment.outside.openmeteo.forecast"

# Open-Meteo limits on forecast_days.
MAX_WEATHER_DAYS = 16
MAX_MARINE_DAYS = 8

# ------------------------------------------------------------------
# Navigation / geodesy
# ------------------------------------------------------------------

EARTH_RADIUS_M = 6_371_000.0
MPS_PER_KNOT = 0.514444
KNOTS_PER_MPS = 1.943844
SECONDS_PER_HOUR = 3600

# ------------------------------------------------------------------
# Projection scheduling defaults
# ------------------------------------------------------------------

DEFAULT_BATCH_WIDTH = 5
DEFAULT_INTER_BATCH_DELAY = 0.2

# ------------------------------------------------------------------
# Requested variables
# ------------------------------------------------------------------

HOURLY_WEATHER_VARIABLES: tuple[str, ...] = (
    "temperature_2m",
    "relative_humidity_2m",
    "dew_point_2m",
    "apparent_temperature",
    "precipitation_probability",
    "precipitation",
    "rain",
    "showers",
    "snowfall",
    "weather_code",
    "pressure_msl",
    "surface_pressure",
    "cloud_cover",
    "cloud_cover_low",
    "cloud_cover_mid",
    "cloud_cover_high",
    "visibility",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
    "uv_index",
    "is_day",
    "sunshine_duration",
    "cape",
    "shortwave_radiation",
    "direct_radiation",
    "diffuse_radiation",
    "direct_normal_irradiance",
)

DAILY_WEATHER_VARIABLES: tuple[str, ...] = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "apparent_temperature_max",
    "apparent_temperature_min",
    "sunrise",
    "sunset",
    "daylight_duration",
    "sunshine_duration",
    "uv_index_max",
    "precipitation_sum",
    "rain_sum",
    "showers_sum",
    "snowfall_sum",
    "precipitation_hours",
    "precipitation_probability_max",
    "wind_speed_10m_max",
    "wind_gusts_10m_max",
    "wind_direction_10m_dominant",
    "shortwave_radiation_sum",
)

CURRENT_WEATHER_VARIABLES: tuple[str, ...] = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "is_day",
    "precipitation",
    "rain",
    "showers",
    "snowfall",
    "weather_code",
    "cloud_cover",
    "pressure_msl",
    "surface_pressure",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
)

HOURLY_MARINE_VARIABLES: tuple[str, ...] = (
    "wave_height",
    "wave_direction",
    "wave_period",
    "wind_wave_height",
    "wind_wave_direction",
    "wind_wave_period",
    "wind_wave_peak_period",
    "swell_wave_height",
    "swell_wave_direction",
    "swell_wave_period",
    "swell_wave_peak_period",
    "ocean_current_velocity",
    "ocean_current_direction",
    "sea_surface_temperature",
)

DAILY_MARINE_VARIABLES: tuple[str, ...] = (
    "wave_height_max",
    "wave_direction_dominant",
    "wave_period_max",
    "wind_wave_height_max",
    "wind_wave_direction_dominant",
    "wind_wave_period_max",
    "wind_wave_peak_period_max",
    "swell_wave_height_max",
    "swell_wave_direction_dominant",
    "swell_wave_period_max",
    "swell_wave_peak_period_max",
)
