# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for live satellite tracking.

Usage:
    # Track one satellite from a TLE catalog for a minute
    hamsats --tle-file amateur.txt --track "ISS (ZARYA)" \\
        --lat 51.5 --lon -0.12 --height 10 --duration 60

    # Include the predicted ground track and export the map
    hamsats --tle-file amateur.txt --track 25544 --show-path \\
        --export-geojson map.geojson

    # Show the five satellites nearest to a remembered home location
    hamsats --tle-file amateur.txt --nearest --settings ~/.hamsats.json
"""
import argparse
import logging
import math
import sys
from datetime import datetime, timezone

from hamsats.config import DEFAULT_TRACKING_CONFIG
from hamsats.domain.geometry import is_visible
from hamsats.domain.locations import ObserverLocation
from hamsats.features.home_location import HomeLocation
from hamsats.features.nearest_satellites import NearestSatellitesFeature, rank_nearest
from hamsats.features.satellite_track import SatelliteTrack, format_look_angles
from hamsats.adapters.geojson_map import GeoJsonMapRenderer
from hamsats.adapters.sched_scheduler import SchedScheduler
from hamsats.adapters.settings_store import ChunkedSettingsStore, JsonFileBackend, MemoryBackend
from hamsats.adapters.sgp4_propagator import Sgp4Propagator
from hamsats.adapters.tle_catalog import find_satellite, read_tle_catalog


_log = logging.getLogger(__name__)


def _finite_number(value) -> float | None:
    """A saved setting as a finite float, or None if it is anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _resolve_observer(args, settings: ChunkedSettingsStore) -> tuple[ObserverLocation | None, float]:
    """Observer from the command line, falling back to saved settings."""
    if args.lat is not None and args.lon is not None:
        observer = ObserverLocation(lat_deg=args.lat, lon_deg=args.lon)
        settings.save("home_location", {"lat": args.lat, "lon": args.lon})
    else:
        saved = settings.load("home_location", None)
        observer = None
        if isinstance(saved, dict):
            lat = _finite_number(saved.get("lat"))
            lon = _finite_number(saved.get("lon"))
            if lat is not None and lon is not None and -90.0 <= lat <= 90.0:
                observer = ObserverLocation(lat_deg=lat, lon_deg=lon)
        if saved is not None and observer is None:
            _log.warning("Ignoring invalid saved home location: %r", saved)

    if args.height is not None:
        height = args.height
        settings.save("observer_height", height)
    else:
        saved = settings.load("observer_height", 0.0)
        height = _finite_number(saved)
        if height is None:
            _log.warning("Ignoring invalid saved observer height: %r", saved)
            height = 0.0
    return observer, height


def run(args) -> int:
    """Run a tracking session. Returns a process exit code."""
    try:
        catalog = read_tle_catalog(args.tle_file)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load TLE catalog: {e}", file=sys.stderr)
        return 1

    backend = JsonFileBackend(args.settings) if args.settings else MemoryBackend()
    settings = ChunkedSettingsStore(backend)
    observer, height = _resolve_observer(args, settings)
    if args.nearest and observer is None:
        print("Error: --nearest requires a home location (--lat/--lon)", file=sys.stderr)
        return 1

    renderer = GeoJsonMapRenderer()
    scheduler = SchedScheduler()
    propagator = Sgp4Propagator()
    config = DEFAULT_TRACKING_CONFIG

    home = HomeLocation(renderer)
    if observer is not None:
        home.set_location(observer)
        home.update_horizon(height)

    track = None
    report_timer = None
    saved_target = settings.load("selected_satellite", None)
    if saved_target is not None and not isinstance(saved_target, str):
        _log.warning("Ignoring invalid saved satellite selection: %r", saved_target)
        saved_target = None
    target = args.track or saved_target
    if target:
        try:
            tle = find_satellite(catalog, target)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        settings.save("selected_satellite", tle.name)
        saved_show_path = settings.load("show_path", False)
        show_path = args.show_path or saved_show_path is True
        settings.save("show_path", show_path)

        track = SatelliteTrack(tle.name, tle, propagator, renderer, scheduler, config)
        track.set_show_path(show_path)
        track.start(observer, height if observer is not None else None)

        def report() -> None:
            angles = track.look_angles
            position = track.position
            if angles is None or position is None or observer is None:
                return
            visible = is_visible(
                observer.lat_deg, observer.lon_deg, height,
                position.lat_deg, position.lon_deg, position.alt_km,
            )
            print(f"{tle.name}: {format_look_angles(angles)}"
                  f"{' (visible)' if visible else ''}")

        report_timer = scheduler.call_every(config.position_interval_s, report)

    nearest = None
    if args.nearest:
        nearest = NearestSatellitesFeature(renderer, propagator, scheduler, config)
        nearest.update_satellites(rank_nearest(
            catalog, observer, propagator, datetime.now(tz=timezone.utc), config.nearest_limit,
        ))
        for sat in nearest.satellites:
            print(f"  {sat.label}")
        nearest.start_tracking()

    try:
        scheduler.run_for(args.duration)
    except KeyboardInterrupt:
        print("\nTracking stopped.")

    if args.export_geojson:
        count = renderer.write(args.export_geojson)
        print(f"Exported {count} map features to {args.export_geojson}")

    if report_timer is not None:
        report_timer.cancel()
    if track is not None:
        track.stop()
    if nearest is not None:
        nearest.close()
    home.remove()
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Track amateur-radio satellites: positions, horizons, look angles"
    )
    parser.add_argument(
        '--tle-file', required=True,
        help="TLE catalog (name, line 1, line 2 per satellite)"
    )
    parser.add_argument('--track', help="Satellite name or catalog number to track")
    parser.add_argument('--lat', type=float, help="Observer latitude in degrees")
    parser.add_argument('--lon', type=float, help="Observer longitude in degrees")
    parser.add_argument(
        '--height', type=float,
        help="Observer height above ground in metres (default: saved value or 0)"
    )
    parser.add_argument(
        '--show-path', action='store_true', default=False,
        help="Draw the predicted ground track"
    )
    parser.add_argument(
        '--nearest', action='store_true', default=False,
        help="Show the satellites nearest to the observer"
    )
    parser.add_argument(
        '--duration', type=float, default=60.0,
        help="Seconds to keep tracking (default: 60)"
    )
    parser.add_argument('--settings', help="JSON file for persisted settings")
    parser.add_argument('--export-geojson', help="Write the drawn map to a GeoJSON file")
    parser.add_argument('-v', '--verbose', action='store_true', default=False)

    args = parser.parse_args()
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(run(args))


if __name__ == "__main__":
    main()
