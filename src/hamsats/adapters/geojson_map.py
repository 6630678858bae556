# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
In-memory GeoJSON map renderer.

Keeps the drawn shapes per layer, answers hit-tests in projected
(EPSG:3857) space, dispatches clicks to listeners, and exports each
layer as a GeoJSON FeatureCollection. Coordinates follow RFC 7946
order: [lon, lat]. External dependencies (json, file I/O) are confined to
this adapter.
"""
import itertools
import json
import logging
import math
from dataclasses import asdict, dataclass
from typing import Any

from hamsats.domain.shapes import CircleShape, LineShape, PointShape, PolygonShape, Shape
from hamsats.domain.web_mercator import circle_ring, from_lon_lat
from hamsats.ports.rendering import ClickListener, FeatureHandle, MapLayer, Style


_log = logging.getLogger(__name__)

DEFAULT_HIT_TOLERANCE_M = 20_000.0


@dataclass
class DrawnFeature:
    """A shape currently on the map."""
    handle: FeatureHandle
    layer: MapLayer
    shape: Shape
    style: Style
    label: str | None
    properties: dict[str, Any]


def _segment_distance(p, a, b) -> float:
    ax, ay = a
    bx, by = b
    px, py = p
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return math.hypot(px - ax, py - ay)
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / length_sq))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def _inside_ring(p, ring) -> bool:
    """Even-odd ray casting."""
    px, py = p
    inside = False
    for (x1, y1), (x2, y2) in zip(ring, ring[1:]):
        if (y1 > py) != (y2 > py):
            x_cross = x1 + (py - y1) * (x2 - x1) / (y2 - y1)
            if px < x_cross:
                inside = not inside
    return inside


def _geometry(shape: Shape) -> dict[str, Any]:
    if isinstance(shape, PointShape):
        return {'type': 'Point', 'coordinates': [shape.lon_deg, shape.lat_deg]}
    if isinstance(shape, LineShape):
        return {'type': 'LineString', 'coordinates': [list(c) for c in shape.coordinates]}
    if isinstance(shape, PolygonShape):
        return {'type': 'Polygon', 'coordinates': [[list(c) for c in shape.ring]]}
    if isinstance(shape, CircleShape):
        ring = circle_ring(shape.center, shape.radius_m)
        return {'type': 'Polygon', 'coordinates': [[list(c) for c in ring]]}
    raise TypeError(f"Unsupported shape {type(shape).__name__}")


class GeoJsonMapRenderer:
    """Map renderer keeping features in memory and exporting GeoJSON."""

    def __init__(self, hit_tolerance_m: float = DEFAULT_HIT_TOLERANCE_M) -> None:
        self._layers: dict[MapLayer, dict[FeatureHandle, DrawnFeature]] = {
            layer: {} for layer in MapLayer
        }
        self._index: dict[FeatureHandle, DrawnFeature] = {}
        self._listeners: list[ClickListener] = []
        self._ids = itertools.count(1)
        self._hit_tolerance_m = hit_tolerance_m

    # --- MapRenderer port ---

    def add_feature(
        self,
        layer: MapLayer,
        shape: Shape,
        style: Style,
        label: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> FeatureHandle:
        handle = f"{layer.name.lower()}-{next(self._ids)}"
        feature = DrawnFeature(
            handle=handle, layer=layer, shape=shape, style=style,
            label=label, properties=dict(properties or {}),
        )
        self._layers[layer][handle] = feature
        self._index[handle] = feature
        return handle

    def update_feature(self, handle: FeatureHandle, shape: Shape) -> None:
        self._require(handle).shape = shape

    def set_label(self, handle: FeatureHandle, label: str | None) -> None:
        self._require(handle).label = label

    def remove_feature(self, handle: FeatureHandle) -> None:
        feature = self._index.pop(handle, None)
        if feature is None:
            _log.debug("Ignoring removal of unknown feature %s", handle)
            return
        del self._layers[feature.layer][handle]

    def has_feature(self, handle: FeatureHandle) -> bool:
        return handle in self._index

    def on_click(self, listener: ClickListener) -> None:
        self._listeners.append(listener)

    def off_click(self, listener: ClickListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- Inspection ---

    def feature(self, handle: FeatureHandle) -> DrawnFeature:
        return self._require(handle)

    def features(self, layer: MapLayer | None = None) -> list[DrawnFeature]:
        if layer is not None:
            return list(self._layers[layer].values())
        return list(self._index.values())

    def feature_count(self, layer: MapLayer | None = None) -> int:
        return len(self.features(layer))

    def _require(self, handle: FeatureHandle) -> DrawnFeature:
        try:
            return self._index[handle]
        except KeyError:
            raise KeyError(f"Feature {handle!r} is not on the map") from None

    # --- Hit testing ---

    def _hits(self, feature: DrawnFeature, p: tuple[float, float], tolerance: float) -> bool:
        shape = feature.shape
        if isinstance(shape, PointShape):
            x, y = from_lon_lat(shape.lon_deg, shape.lat_deg)
            return math.hypot(p[0] - x, p[1] - y) <= tolerance
        if isinstance(shape, LineShape):
            coords = [from_lon_lat(*c) for c in shape.coordinates]
            return any(
                _segment_distance(p, a, b) <= tolerance
                for a, b in zip(coords, coords[1:])
            )
        if isinstance(shape, PolygonShape):
            ring = [from_lon_lat(*c) for c in shape.ring]
            return _inside_ring(p, ring)
        if isinstance(shape, CircleShape):
            cx, cy = from_lon_lat(*shape.center)
            return math.hypot(p[0] - cx, p[1] - cy) <= shape.radius_m
        return False

    def features_at(
        self, lon_deg: float, lat_deg: float, tolerance_m: float | None = None,
    ) -> list[FeatureHandle]:
        """Handles of the features under a point, topmost layer and newest first."""
        tolerance = self._hit_tolerance_m if tolerance_m is None else tolerance_m
        p = from_lon_lat(lon_deg, lat_deg)
        hits: list[FeatureHandle] = []
        for layer in sorted(MapLayer, key=lambda l: l.value, reverse=True):
            for feature in reversed(list(self._layers[layer].values())):
                if self._hits(feature, p, tolerance):
                    hits.append(feature.handle)
        return hits

    def click(self, lon_deg: float, lat_deg: float) -> list[FeatureHandle]:
        """Simulate a map click: hit-test and notify every listener once."""
        hits = self.features_at(lon_deg, lat_deg)
        for listener in list(self._listeners):
            listener(hits)
        return hits

    # --- Export ---

    def to_feature_collection(self, layer: MapLayer | None = None) -> dict[str, Any]:
        features = []
        for drawn in self.features(layer):
            properties = {
                'handle': drawn.handle,
                'layer': drawn.layer.name.lower(),
                'label': drawn.label,
                'style': {k: v for k, v in asdict(drawn.style).items() if v not in (None, ())},
            }
            properties.update(drawn.properties)
            features.append({
                'type': 'Feature',
                'geometry': _geometry(drawn.shape),
                'properties': properties,
            })
        return {'type': 'FeatureCollection', 'features': features}

    def write(self, path: str, layer: MapLayer | None = None) -> int:
        """Write drawn features to a GeoJSON file. Returns the feature count."""
        collection = self.to_feature_collection(layer)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(collection, f, indent=2, ensure_ascii=False)
        return len(collection['features'])
