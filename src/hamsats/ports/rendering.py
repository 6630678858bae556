# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for the map renderer.

The renderer owns screen geometry, styling and hit-testing. Callers add
shapes in (lon, lat) and get back an opaque handle; they keep the handles
of the shapes they created and remove exactly those.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol, runtime_checkable

from hamsats.domain.shapes import Shape

FeatureHandle = str


class MapLayer(Enum):
    """Drawable collections, bottom to top."""
    HORIZON = 1
    LINE = 2
    VECTOR = 3


@dataclass(frozen=True)
class Style:
    """Presentation hints for a shape."""
    fill_color: str | None = None
    stroke_color: str | None = None
    stroke_width: float = 1.0
    line_dash: tuple[int, ...] = ()
    icon: str | None = None
    icon_scale: float = 1.0
    font: str | None = None
    text_color: str | None = None
    z_index: int = 0


ClickListener = Callable[[list[FeatureHandle]], None]


@runtime_checkable
class MapRenderer(Protocol):
    """Port for adding, updating and removing map shapes."""

    def add_feature(
        self,
        layer: MapLayer,
        shape: Shape,
        style: Style,
        label: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> FeatureHandle:
        """Draw a shape and return its handle."""
        ...

    def update_feature(self, handle: FeatureHandle, shape: Shape) -> None:
        """Replace the geometry of a drawn shape."""
        ...

    def set_label(self, handle: FeatureHandle, label: str | None) -> None:
        """Replace the text label of a drawn shape."""
        ...

    def remove_feature(self, handle: FeatureHandle) -> None:
        """Retract a shape. Unknown handles are ignored."""
        ...

    def has_feature(self, handle: FeatureHandle) -> bool:
        """Whether a handle is currently drawn."""
        ...

    def on_click(self, listener: ClickListener) -> None:
        """Register a listener receiving the handles hit by a click, topmost first."""
        ...

    def off_click(self, listener: ClickListener) -> None:
        """Unregister a click listener. Unknown listeners are ignored."""
        ...
