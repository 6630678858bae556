# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Per-satellite tracking feature.

A SatelliteTrack owns every shape drawn for one satellite: its marker,
horizon footprint, line of sight to the observer, and (when path display
is on) the predicted ground track with its markers and a connector from
the satellite to the track.

Lifecycle:
    IDLE -> TRACKING <-> TRACKING_WITH_PATH -> STOPPED

Two timers drive it: a fast one for position/horizon/line of sight and a
slow one for the ground track. STOPPED is terminal: timers are cancelled,
every owned shape is retracted, and re-tracking needs a new instance.
"""
import logging
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from hamsats.config import DEFAULT_TRACKING_CONFIG, TrackingConfig
from hamsats.domain.geometry import (
    LookAngles,
    curved_line,
    look_angles,
    satellite_horizon_polygon,
)
from hamsats.domain.ground_track import SegmentedTrack, sample_ground_track, segment_ground_track
from hamsats.domain.locations import GeoPoint, ObserverLocation
from hamsats.domain.shapes import LineShape, PointShape, PolygonShape, Shape
from hamsats.domain.tle import TwoLineElement, parse_tle
from hamsats.ports.propagation import PropagationError, Propagator, propagate_point
from hamsats.ports.rendering import FeatureHandle, MapLayer, MapRenderer, Style
from hamsats.ports.scheduling import Scheduler, TimerHandle


_log = logging.getLogger(__name__)

_TICK_ERRORS = (PropagationError, ValueError, ArithmeticError)

SATELLITE_STYLE = Style(
    icon="satellite", icon_scale=1.5, font="14px monospace", text_color="#388E3C",
)
HORIZON_STYLE = Style(
    fill_color="rgba(255, 193, 7, 0.2)", stroke_color="rgba(255, 193, 7, 0.5)",
)
LINE_OF_SIGHT_STYLE = Style(
    stroke_color="rgba(56, 142, 60, 0.8)", stroke_width=2, line_dash=(4, 4),
    font="12px monospace", text_color="#388E3C",
)
CONNECTOR_STYLE = Style(stroke_color="rgba(128, 128, 128, 0.4)", stroke_width=2)
PATH_STYLE = Style(stroke_color="rgba(128, 128, 128, 0.8)", stroke_width=2, line_dash=(4, 4))
PATH_MARKER_STYLE = Style(
    icon="satellite", icon_scale=0.5, font="12px monospace", text_color="#388E3C",
)


class TrackState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    TRACKING_WITH_PATH = "tracking_with_path"
    STOPPED = "stopped"


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def format_look_angles(angles: LookAngles) -> str:
    """Line-of-sight label: range | elevation | azimuth."""
    return (
        f"{angles.slant_range_km:.0f}km | "
        f"{angles.elevation_deg:.1f}° | {angles.azimuth_deg:.1f}°"
    )


class SatelliteTrack:
    """Tracks one satellite on the map."""

    def __init__(
        self,
        name: str,
        tle: TwoLineElement | tuple[str, str],
        propagator: Propagator,
        renderer: MapRenderer,
        scheduler: Scheduler,
        config: TrackingConfig = DEFAULT_TRACKING_CONFIG,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if isinstance(tle, TwoLineElement):
            line1, line2 = tle.lines
        else:
            line1, line2 = tle
        self.tle = parse_tle(name, line1, line2)
        self.name = name

        self._propagator = propagator
        self._renderer = renderer
        self._scheduler = scheduler
        self._config = config
        self._clock = clock

        self._handles: dict[str, FeatureHandle] = {}
        self._path_handles: list[FeatureHandle] = []
        self._position_timer: TimerHandle | None = None
        self._path_timer: TimerHandle | None = None

        self._observer: ObserverLocation | None = None
        self._observer_height_m: float | None = None
        self._position: GeoPoint | None = None
        self._look_angles: LookAngles | None = None
        self._path: SegmentedTrack | None = None
        self._show_path = False
        self._stopped = False

    # --- State ---

    @property
    def state(self) -> TrackState:
        if self._stopped:
            return TrackState.STOPPED
        if self._position_timer is None:
            return TrackState.IDLE
        return TrackState.TRACKING_WITH_PATH if self._show_path else TrackState.TRACKING

    @property
    def position(self) -> GeoPoint | None:
        return self._position

    @property
    def look_angles(self) -> LookAngles | None:
        return self._look_angles

    @property
    def path(self) -> SegmentedTrack | None:
        return self._path

    @property
    def show_path(self) -> bool:
        return self._show_path

    @property
    def owned_handles(self) -> list[FeatureHandle]:
        """Handles of every shape this track currently has on the map."""
        return list(self._handles.values()) + list(self._path_handles)

    def _require_not_stopped(self) -> None:
        if self._stopped:
            raise RuntimeError(f"Track for {self.name} is stopped; create a new track")

    # --- Drawing helpers ---

    def _put(self, key: str, layer: MapLayer, shape: Shape, style: Style,
             label: str | None = None) -> None:
        handle = self._handles.get(key)
        if handle is None:
            self._handles[key] = self._renderer.add_feature(layer, shape, style, label=label)
            return
        self._renderer.update_feature(handle, shape)
        if label is not None:
            self._renderer.set_label(handle, label)

    def _retract(self, key: str) -> None:
        handle = self._handles.pop(key, None)
        if handle is not None:
            self._renderer.remove_feature(handle)

    def _draw_connector(self) -> None:
        first = self._path.first_point if self._path is not None else None
        if not self._show_path or first is None or self._position is None:
            self._retract("connector")
            return
        self._put(
            "connector", MapLayer.VECTOR,
            LineShape(coordinates=(self._position.lon_lat, first)),
            CONNECTOR_STYLE,
        )

    # --- Lifecycle ---

    def start(
        self,
        observer: ObserverLocation | None = None,
        observer_height_m: float | None = None,
    ) -> LookAngles | None:
        """
        Compute once, then keep recomputing on the position timer.

        Line of sight is drawn only when both observer and height are known.
        Omitted arguments keep what an earlier set_observer() stored.

        Raises:
            RuntimeError: If the track is already started or stopped.
        """
        self._require_not_stopped()
        if self._position_timer is not None:
            raise RuntimeError(f"Track for {self.name} is already started")

        if observer is not None:
            self._observer = observer
        if observer_height_m is not None:
            self._observer_height_m = observer_height_m
        _log.info("Tracking %s (catalog %s)", self.name, self.tle.catalog_number)

        angles = self.tick()
        self._position_timer = self._scheduler.call_every(
            self._config.position_interval_s, self.tick,
        )
        if self._show_path:
            self._start_path_updates()
        return angles

    def stop(self) -> None:
        """Cancel both timers and retract every owned shape. Idempotent."""
        for timer in (self._position_timer, self._path_timer):
            if timer is not None:
                timer.cancel()
        self._position_timer = None
        self._path_timer = None

        self._clear_path()
        for key in list(self._handles):
            self._retract(key)

        if not self._stopped:
            _log.info("Stopped tracking %s", self.name)
        self._stopped = True

    def set_observer(
        self,
        observer: ObserverLocation | None,
        observer_height_m: float | None = None,
    ) -> None:
        """Replace the line-of-sight target; None removes the line of sight."""
        self._require_not_stopped()
        self._observer = observer
        self._observer_height_m = observer_height_m
        if observer is None or observer_height_m is None:
            self._retract("line_of_sight")
            self._look_angles = None
        if self._position_timer is not None:
            self.tick()

    # --- Position ---

    def current_position(self) -> GeoPoint:
        """
        Sub-satellite point now.

        Raises:
            PropagationError: If propagation fails.
        """
        return propagate_point(self._propagator, self.tle, self._clock())

    def tick(self) -> LookAngles | None:
        """
        Recompute position, horizon and line of sight, and redraw them.

        On propagation failure the previous shapes stay on the map and the
        last look angles are returned.

        Returns:
            Latest look angles, or None without an observer.
        """
        if self._stopped:
            return self._look_angles

        has_observer = self._observer is not None and self._observer_height_m is not None
        try:
            position = self.current_position()
            horizon = satellite_horizon_polygon(
                position.lat_deg, position.lon_deg, position.alt_km,
                self._config.horizon_points,
            )
            sight_line = angles = None
            if has_observer:
                sight_line = curved_line(
                    self._observer.lon_lat, position.lon_lat, self._config.curve_points,
                )
                angles = look_angles(
                    self._observer.lat_deg, self._observer.lon_deg, self._observer_height_m,
                    position.lat_deg, position.lon_deg, position.alt_km,
                )
                if not all(math.isfinite(v) for v in (
                    angles.slant_range_km, angles.elevation_deg, angles.azimuth_deg,
                )):
                    raise ValueError(f"Non-finite look angles {angles}")
        except _TICK_ERRORS as e:
            _log.warning("Position update for %s failed, keeping last state: %s", self.name, e)
            return self._look_angles

        self._position = position
        self._put(
            "satellite", MapLayer.VECTOR,
            PointShape(lon_deg=position.lon_deg, lat_deg=position.lat_deg),
            SATELLITE_STYLE, label=self.name,
        )
        self._put("horizon", MapLayer.VECTOR, PolygonShape(ring=tuple(horizon)), HORIZON_STYLE)

        if has_observer:
            self._look_angles = angles
            self._put(
                "line_of_sight", MapLayer.LINE, LineShape(coordinates=tuple(sight_line)),
                LINE_OF_SIGHT_STYLE, label=format_look_angles(angles),
            )
        else:
            self._look_angles = None
            self._retract("line_of_sight")

        self._draw_connector()
        _log.debug(
            "%s at %.3f, %.3f, %.1f km", self.name,
            position.lat_deg, position.lon_deg, position.alt_km,
        )
        return self._look_angles

    # --- Ground track ---

    def set_show_path(self, show: bool) -> None:
        """
        Toggle ground track display.

        While tracking, turning it on recomputes the path immediately and
        starts the path timer; turning it off cancels the timer and
        retracts the path, its markers and the connector.
        """
        self._require_not_stopped()
        self._show_path = show
        if show:
            if self._position_timer is not None:
                self._start_path_updates()
        else:
            if self._path_timer is not None:
                self._path_timer.cancel()
                self._path_timer = None
            self._clear_path()
        _log.info("Path display for %s %s", self.name, "on" if show else "off")

    def _start_path_updates(self) -> None:
        self.update_path()
        if self._path_timer is None:
            self._path_timer = self._scheduler.call_every(
                self._config.path_interval_s, self.update_path,
            )

    def update_path(self) -> None:
        """Predict and redraw the ground track. No-op when path display is off."""
        if self._stopped or not self._show_path:
            return

        def position_at(when: datetime) -> tuple[float, float, float]:
            point = propagate_point(self._propagator, self.tle, when)
            return point.lat_deg, point.lon_deg, point.alt_km

        try:
            samples = sample_ground_track(
                position_at, self._clock(), self._config.path_steps, self._config.path_step,
            )
        except _TICK_ERRORS as e:
            _log.warning("Path update for %s failed, keeping last path: %s", self.name, e)
            return

        path = segment_ground_track(
            [(p.lon_deg, p.lat_deg) for p in samples], self._config.marker_stride,
        )
        self._clear_path()

        for segment in path.segments:
            self._path_handles.append(self._renderer.add_feature(
                MapLayer.LINE, LineShape(coordinates=segment), PATH_STYLE,
            ))
        step_minutes = self._config.path_step.total_seconds() / 60.0
        for marker in path.markers:
            self._path_handles.append(self._renderer.add_feature(
                MapLayer.LINE,
                PointShape(lon_deg=marker.lon_deg, lat_deg=marker.lat_deg),
                PATH_MARKER_STYLE,
                label=f"+{marker.index * step_minutes:.0f}m",
            ))

        self._path = path
        self._draw_connector()
        _log.debug(
            "Path for %s: %d segments, %d markers",
            self.name, len(path.segments), len(path.markers),
        )

    def _clear_path(self) -> None:
        for handle in self._path_handles:
            self._renderer.remove_feature(handle)
        self._path_handles = []
        self._path = None
        self._retract("connector")
