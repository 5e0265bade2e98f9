"""signalk_openmeteo - Open-Meteo weather and marine forecasts for Signal K vessels."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("signalk-openmeteo")
except PackageNotFoundError:
    __version__ = "0+local"
from signalk_openmeteo.client import ForecastClient
from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.exceptions import (
    ForecastConfigError,
    OpenMeteoApiError,
    OpenMeteoError,
    OpenMeteoTransportError,
    SignalKBusError,
)
from signalk_openmeteo.models import (
    DailyForecastRecord,
    DatasetKind,
    HourlyFetchResult,
    HourlyFetchTask,
    MergedForecastRecord,
    MotionState,
    OpenMeteoResponse,
    Position,
)
from signalk_openmeteo.projection.controller import ControllerPhase, ProjectionController, RunOutcome
from signalk_openmeteo.signalk.delta import DeltaPublisher
from signalk_openmeteo.state.events import NavigationPath, NavigationUpdate
from signalk_openmeteo.state.store import ControllerState
from signalk_openmeteo.stationary import StationaryForecaster

__all__ = [
    "__version__",
    "ControllerPhase",
    "ControllerState",
    "DailyForecastRecord",
    "DatasetKind",
    "DeltaPublisher",
    "ForecastClient",
    "ForecastConfig",
    "ForecastConfigError",
    "HourlyFetchResult",
    "HourlyFetchTask",
    "MergedForecastRecord",
    "MotionState",
    "NavigationPath",
    "NavigationUpdate",
    "OpenMeteoApiError",
    "OpenMeteoError",
    "OpenMeteoResponse",
    "OpenMeteoTransportError",
    "Position",
    "ProjectionController",
    "RunOutcome",
    "SignalKBusError",
    "StationaryForecaster",
]
