# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Ground track sampling and antimeridian-safe segmentation.

A predicted ground track is a chronological list of sub-satellite points
taken at a fixed time step. Drawn as a single polyline it would streak
across the whole map every time the satellite crosses the antimeridian,
so the track is cut into segments wherever consecutive longitudes jump
by more than 180 degrees. Markers are placed every few samples, but only
on samples that belong to an emitted segment.

No external dependencies — only stdlib dataclasses/datetime.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Sequence

from hamsats.domain.geometry import LonLat


@dataclass(frozen=True)
class GroundTrackPoint:
    """A single sample of a predicted ground track."""
    time: datetime
    lat_deg: float
    lon_deg: float
    alt_km: float


@dataclass(frozen=True)
class PathMarker:
    """Marker placed on the track at a given sample index."""
    index: int
    lon_deg: float
    lat_deg: float


@dataclass(frozen=True)
class SegmentedTrack:
    """Antimeridian-safe polylines plus the markers that fall on them."""
    segments: tuple[tuple[LonLat, ...], ...]
    markers: tuple[PathMarker, ...]

    @property
    def first_point(self) -> LonLat | None:
        """First point of the first segment, if any segment was emitted."""
        if not self.segments:
            return None
        return self.segments[0][0]


def sample_ground_track(
    position_at: Callable[[datetime], tuple[float, float, float]],
    start: datetime,
    num_steps: int = 100,
    step: timedelta = timedelta(minutes=1),
) -> list[GroundTrackPoint]:
    """
    Sample future sub-satellite points at a fixed time step.

    Args:
        position_at: Callable returning (lat_deg, lon_deg, alt_km) at a time.
        start: Time of the first sample.
        num_steps: Number of samples.
        step: Time between consecutive samples.

    Returns:
        num_steps GroundTrackPoints in chronological order.

    Raises:
        ValueError: If step is zero or negative.
    """
    if step.total_seconds() <= 0:
        raise ValueError(f"Step must be positive, got {step}")

    points: list[GroundTrackPoint] = []
    for i in range(num_steps):
        when = start + i * step
        lat, lon, alt = position_at(when)
        points.append(GroundTrackPoint(time=when, lat_deg=lat, lon_deg=lon, alt_km=alt))
    return points


def segment_ground_track(
    points: Sequence[LonLat],
    marker_stride: int = 5,
) -> SegmentedTrack:
    """
    Split a chronological (lon, lat) sequence at antimeridian crossings.

    A new segment starts whenever |delta lon| > 180 between consecutive
    points. Segments with fewer than two points are dropped. Every
    marker_stride-th point becomes a marker if it is part of an emitted
    segment.

    Args:
        points: Chronological (lon, lat) samples.
        marker_stride: Spacing between markers in samples.

    Returns:
        SegmentedTrack with segments in chronological order.

    Raises:
        ValueError: If marker_stride is not positive.
    """
    if marker_stride < 1:
        raise ValueError(f"marker_stride must be >= 1, got {marker_stride}")

    segments: list[tuple[LonLat, ...]] = []
    kept: set[int] = set()
    current: list[int] = []

    def _close() -> None:
        if len(current) > 1:
            segments.append(tuple(points[i] for i in current))
            kept.update(current)

    for i, point in enumerate(points):
        if current and abs(point[0] - points[current[-1]][0]) > 180.0:
            _close()
            current = []
        current.append(i)
    _close()

    markers = tuple(
        PathMarker(index=i, lon_deg=points[i][0], lat_deg=points[i][1])
        for i in range(0, len(points), marker_stride)
        if i in kept
    )
    return SegmentedTrack(segments=tuple(segments), markers=markers)
