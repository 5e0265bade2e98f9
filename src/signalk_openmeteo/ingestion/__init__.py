"""Ingestion layer.

Adapters that turn incoming data (Open-Meteo responses, Signal K deltas
and MQTT messages) into normalized records and navigation updates.
"""

__all__: list[str] = []
