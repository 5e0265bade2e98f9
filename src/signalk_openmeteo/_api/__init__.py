"""Open-Meteo endpoint modules."""
