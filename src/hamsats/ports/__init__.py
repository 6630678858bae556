# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for the external collaborators.

Adapters implement these: orbit propagation, map rendering, timer
scheduling, and key/value persistence.
"""
from hamsats.ports.propagation import PropagationError, Propagator
from hamsats.ports.rendering import FeatureHandle, MapLayer, MapRenderer, Style
from hamsats.ports.scheduling import Scheduler, TimerHandle
from hamsats.ports.storage import KeyValueBackend

__all__ = [
    "FeatureHandle",
    "KeyValueBackend",
    "MapLayer",
    "MapRenderer",
    "PropagationError",
    "Propagator",
    "Scheduler",
    "Style",
    "TimerHandle",
]
