# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Nearest-satellites feature.

Shows lightweight markers (position and label only) for a short list of
satellites closest to the observer and refreshes their positions on a
timer. Markers are redrawn from scratch on every refresh.

Clicking one of these markers reports its satellite name to a handler
until the feature is closed.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable

from hamsats.config import DEFAULT_TRACKING_CONFIG, TrackingConfig
from hamsats.domain.geometry import surface_distance_km
from hamsats.domain.locations import GeoPoint, ObserverLocation
from hamsats.domain.shapes import PointShape
from hamsats.domain.tle import TwoLineElement
from hamsats.ports.propagation import PropagationError, Propagator, propagate_point
from hamsats.ports.rendering import FeatureHandle, MapLayer, MapRenderer, Style
from hamsats.ports.scheduling import Scheduler, TimerHandle


_log = logging.getLogger(__name__)

NEAREST_STYLE = Style(
    icon="satellite", icon_scale=1.2, font="12px monospace", text_color="#666666",
)


@dataclass(frozen=True)
class NearestSatellite:
    """A satellite with its distance from the observer, if known."""
    name: str
    tle: TwoLineElement
    distance_km: float | None = None

    @property
    def label(self) -> str:
        if self.distance_km is not None:
            return f"{self.name} ({self.distance_km:.0f}km)"
        return self.name


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def rank_nearest(
    catalog: Iterable[TwoLineElement],
    observer: ObserverLocation,
    propagator: Propagator,
    when: datetime,
    limit: int = 5,
) -> list[NearestSatellite]:
    """
    Rank satellites by surface distance from observer to sub-satellite point.

    Satellites that fail to propagate are left out.

    Returns:
        Up to limit NearestSatellites, closest first.
    """
    ranked: list[NearestSatellite] = []
    for tle in catalog:
        try:
            point = propagate_point(propagator, tle, when)
        except PropagationError as e:
            _log.debug("Skipping %s in nearest ranking: %s", tle.name, e)
            continue
        distance = surface_distance_km(
            observer.lat_deg, observer.lon_deg, point.lat_deg, point.lon_deg,
        )
        ranked.append(NearestSatellite(name=tle.name, tle=tle, distance_km=distance))
    ranked.sort(key=lambda s: s.distance_km)
    return ranked[:limit]


class NearestSatellitesFeature:
    """Bounded set of periodically refreshed satellite markers."""

    def __init__(
        self,
        renderer: MapRenderer,
        propagator: Propagator,
        scheduler: Scheduler,
        config: TrackingConfig = DEFAULT_TRACKING_CONFIG,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._renderer = renderer
        self._propagator = propagator
        self._scheduler = scheduler
        self._config = config
        self._clock = clock

        self._satellites: list[NearestSatellite] = []
        self._markers: dict[FeatureHandle, str] = {}
        self._last_positions: dict[str, GeoPoint] = {}
        self._timer: TimerHandle | None = None
        self._click_handler: Callable[[str], None] | None = None

        renderer.on_click(self._handle_click)

    @property
    def satellites(self) -> list[NearestSatellite]:
        return list(self._satellites)

    @property
    def owned_handles(self) -> list[FeatureHandle]:
        return list(self._markers)

    @property
    def is_tracking(self) -> bool:
        return self._timer is not None

    def set_click_handler(self, handler: Callable[[str], None] | None) -> None:
        self._click_handler = handler

    def update_satellites(self, satellites: Iterable[NearestSatellite]) -> None:
        """Keep the first N satellites and redraw their markers."""
        self._satellites = list(satellites)[:self._config.nearest_limit]
        names = {s.name for s in self._satellites}
        self._last_positions = {
            name: point for name, point in self._last_positions.items() if name in names
        }
        self.refresh()

    def refresh(self) -> None:
        """Replace every marker with one at the satellite's current position."""
        self.remove()
        now = self._clock()
        for satellite in self._satellites:
            try:
                point = propagate_point(self._propagator, satellite.tle, now)
                self._last_positions[satellite.name] = point
            except PropagationError as e:
                point = self._last_positions.get(satellite.name)
                _log.warning("Position update for %s failed: %s", satellite.name, e)
                if point is None:
                    continue
            handle = self._renderer.add_feature(
                MapLayer.VECTOR,
                PointShape(lon_deg=point.lon_deg, lat_deg=point.lat_deg),
                NEAREST_STYLE,
                label=satellite.label,
                properties={'satellite_name': satellite.name},
            )
            self._markers[handle] = satellite.name

    def start_tracking(self) -> None:
        self.refresh()
        if self._timer is None:
            self._timer = self._scheduler.call_every(
                self._config.nearest_interval_s, self.refresh,
            )

    def stop_tracking(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.remove()

    def close(self) -> None:
        """Stop tracking, retract markers and stop listening for clicks."""
        self.stop_tracking()
        self._renderer.off_click(self._handle_click)

    def remove(self) -> None:
        """Retract every marker this feature drew."""
        for handle in self._markers:
            self._renderer.remove_feature(handle)
        self._markers = {}

    def _handle_click(self, hits: list[FeatureHandle]) -> None:
        if self._click_handler is None:
            return
        for handle in hits:
            name = self._markers.get(handle)
            if name is not None:
                self._click_handler(name)
                return
