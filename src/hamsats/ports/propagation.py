# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for orbit propagation.

Adapters turn a TLE and a timestamp into a sub-satellite point.
"""
from datetime import datetime
from typing import Protocol, runtime_checkable

from hamsats.domain.locations import GeoPoint
from hamsats.domain.tle import TwoLineElement


class PropagationError(RuntimeError):
    """Propagation failed for a TLE at a given time."""


@runtime_checkable
class Propagator(Protocol):
    """Port for TLE propagation."""

    def sub_satellite_point(
        self, tle: TwoLineElement, when: datetime,
    ) -> tuple[float, float, float]:
        """
        Sub-satellite point of a satellite at a time.

        Returns:
            (lat_deg, lon_deg, alt_km), longitude in (-180, 180].

        Raises:
            PropagationError: If the propagator cannot produce a position.
        """
        ...


def propagate_point(propagator: Propagator, tle: TwoLineElement, when: datetime) -> GeoPoint:
    """
    Ask a propagator for a sub-satellite point and validate the result.

    Any exception raised by the propagator is reported as PropagationError.

    Raises:
        PropagationError: If the propagator fails or returns a non-finite position.
    """
    try:
        lat, lon, alt = propagator.sub_satellite_point(tle, when)
    except PropagationError:
        raise
    except Exception as e:
        raise PropagationError(f"Propagator failed for {tle.name}: {e!r}") from e
    try:
        return GeoPoint.from_propagation(lat, lon, alt)
    except (TypeError, ValueError) as e:
        raise PropagationError(str(e)) from e
