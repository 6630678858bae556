# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tracking cadences and sampling parameters."""
from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class TrackingConfig:
    """Immutable tracking configuration."""
    position_interval_s: float = 1.0
    path_interval_s: float = 60.0
    path_steps: int = 100
    path_step: timedelta = timedelta(minutes=1)
    marker_stride: int = 5
    horizon_points: int = 50
    curve_points: int = 50
    nearest_limit: int = 5
    nearest_interval_s: float = 1.0

    def __post_init__(self) -> None:
        for name in ("position_interval_s", "path_interval_s", "nearest_interval_s"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("path_steps", "marker_stride", "horizon_points",
                     "curve_points", "nearest_limit"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.path_step.total_seconds() <= 0:
            raise ValueError(f"path_step must be positive, got {self.path_step}")


DEFAULT_TRACKING_CONFIG = TrackingConfig()
