#!/usr/bin/env python3
"""Run one forecast pass for a position and print the Signal K deltas.

Configuration comes from ``OPENMETEO_*`` environment variables (see
:meth:`ForecastConfig.from_env`); command-line options override them.

Usage
-----
::

    python scripts/run_forecast.py --lat 43.30 --lon 5.37

    # moving vessel: heading 90 degrees true at 6 knots
    python scripts/run_forecast.py --lat 43.30 --lon 5.37 --cog 90 --sog 6 --moving

Options::

    --hours N          Hourly forecasts / projection horizon
    --days N           Daily forecasts
    --no-marine        Skip the marine endpoint
    --summary          Print one line per delta instead of the full JSON
    --verbose / -v     Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from signalk_openmeteo import ForecastClient, ForecastConfig, ForecastConfigError  # noqa: E402
from signalk_openmeteo._constants import MPS_PER_KNOT  # noqa: E402
from signalk_openmeteo.ingestion.navigation import build_update  # noqa: E402
from signalk_openmeteo.state.events import UpdateSource  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch Open-Meteo forecasts and print Signal K deltas")
    parser.add_argument("--lat", type=float, required=True, help="Latitude in degrees")
    parser.add_argument("--lon", type=float, required=True, help="Longitude in degrees")
    parser.add_argument("--cog", type=float, default=None, help="Course over ground, degrees true")
    parser.add_argument("--sog", type=float, default=None, help="Speed over ground, knots")
    parser.add_argument("--moving", action="store_true", help="Engage moving-vessel forecasting")
    parser.add_argument("--hours", type=int, default=None, help="Hourly forecasts to publish")
    parser.add_argument("--days", type=int, default=None, help="Daily forecasts to publish")
    parser.add_argument("--no-marine", action="store_true", help="Do not query the marine API")
    parser.add_argument("--summary", action="store_true", help="One line per delta")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _summarize(delta: dict[str, Any]) -> str:
    update = delta["updates"][0]
    paths = [entry["path"].rsplit(".", 2)[-2] for entry in update["values"]]
    return f"{update['$source']:<32} {update['timestamp']:<22} {len(paths):>3} values: {', '.join(paths)}"


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {"mqtt_enabled": False}
    if args.hours is not None:
        overrides["max_forecast_hours"] = args.hours
    if args.days is not None:
        overrides["max_forecast_days"] = args.days
    if args.no_marine:
        overrides["enable_marine_hourly"] = False
        overrides["enable_marine_daily"] = False

    try:
        config = ForecastConfig.from_env(**overrides)
    except ForecastConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    deltas: list[dict[str, Any]] = []
    async with ForecastClient(config, on_delta=deltas.append) as client:
        updates = [
            build_update(
                "navigation.position",
                {"latitude": args.lat, "longitude": args.lon},
                source=UpdateSource.MANUAL,
            )
        ]
        if args.cog is not None:
            updates.append(
                build_update("navigation.courseOverGroundTrue", math.radians(args.cog), source=UpdateSource.MANUAL)
            )
        if args.sog is not None:
            updates.append(
                build_update("navigation.speedOverGround", args.sog * MPS_PER_KNOT, source=UpdateSource.MANUAL)
            )
        for update in updates:
            if update is not None:
                client.handle_navigation_update(update)
        if args.moving:
            client.engage_moving_forecast()

        outcome = await client.refresh()
        status = client.status

    for delta in deltas:
        print(_summarize(delta) if args.summary else json.dumps(delta, indent=2))

    print(f"\n{len(deltas)} deltas, run {outcome}, status: {status}", file=sys.stderr)
    return 0 if deltas else 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
