"""Custom exception hierarchy for signalk_openmeteo."""

from __future__ import annotations


class OpenMeteoError(Exception):
    """Base exception for all signalk_openmeteo errors."""


class ForecastConfigError(OpenMeteoError):
    """Invalid or missing configuration."""


class OpenMeteoTransportError(OpenMeteoError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class OpenMeteoApiError(OpenMeteoError):
    """API answered with an error body (``{"error": true, "reason": ...}``)."""

    def __init__(
        self,
        message: str,
        *,
        reason: str = "",
        endpoint: str = "",
    ) -> None:
        self.reason = reason
        self.endpoint = endpoint
        super().__init__(message)


class SignalKBusError(OpenMeteoError):
    """The Signal K bus adapter was used while not connected."""
