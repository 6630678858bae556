# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
SGP4 propagation adapter.

External dependency (sgp4) is confined to this layer.

TLE mean elements are SGP4-specific, NOT pure Keplerian, so positions
come from the sgp4 library. Its TEME output is rotated into ECEF by GMST
and converted to a WGS84 sub-satellite point.
"""
import logging
from datetime import datetime, timezone

from sgp4.api import Satrec, jday

from hamsats.domain.coordinate_frames import ecef_to_geodetic, eci_to_ecef, gmst_rad
from hamsats.domain.tle import TwoLineElement
from hamsats.ports.propagation import PropagationError


_log = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (treat naive as UTC)."""
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class Sgp4Propagator:
    """Propagates TLEs to sub-satellite points, caching parsed records."""

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], Satrec] = {}

    def _satrec(self, tle: TwoLineElement) -> Satrec:
        key = tle.lines
        sat = self._records.get(key)
        if sat is None:
            sat = Satrec.twoline2rv(tle.line1, tle.line2)
            self._records[key] = sat
        return sat

    def sub_satellite_point(
        self, tle: TwoLineElement, when: datetime,
    ) -> tuple[float, float, float]:
        when = _as_utc(when).astimezone(timezone.utc)
        sat = self._satrec(tle)
        jd, fr = jday(
            when.year, when.month, when.day,
            when.hour, when.minute, when.second + when.microsecond / 1e6,
        )
        error_code, position_km, _ = sat.sgp4(jd, fr)
        if error_code != 0:
            raise PropagationError(
                f"SGP4 propagation error {error_code} for {tle.name} at {when.isoformat()}"
            )

        pos_m = (position_km[0] * 1000, position_km[1] * 1000, position_km[2] * 1000)
        lat_deg, lon_deg, alt_m = ecef_to_geodetic(eci_to_ecef(pos_m, gmst_rad(when)))
        _log.debug("%s at %s: %.3f, %.3f, %.1f km", tle.name, when, lat_deg, lon_deg, alt_m / 1000)
        return lat_deg, lon_deg, alt_m / 1000.0
