# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Shared fakes: a manual clock, a scripted propagator, sample TLEs."""
from datetime import datetime, timedelta, timezone

import pytest

from hamsats.adapters.geojson_map import GeoJsonMapRenderer
from hamsats.adapters.sched_scheduler import SchedScheduler
from hamsats.domain.coordinate_frames import normalize_longitude
from hamsats.ports.propagation import PropagationError


EPOCH = datetime(2019, 12, 9, 16, 38, 29, tzinfo=timezone.utc)

ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   19343.69339541  .00001764  00000-0  38792-4 0  9991"
ISS_LINE2 = "2 25544  51.6439 211.2001 0007417  17.6667  85.6398 15.50103472202482"

SO50_NAME = "SO-50"
SO50_LINE1 = "1 27607U 02058C   19343.50000000  .00000110  00000-0  21340-4 0  9998"
SO50_LINE2 = "2 27607  64.5552 123.4567 0075623 210.1234 149.5432 14.75678909123454"

AO91_NAME = "AO-91"
AO91_LINE1 = "1 43017U 17073E   19343.50000000  .00000045  00000-0  12345-4 0  9996"
AO91_LINE2 = "2 43017  97.6976  12.3456 0214000 190.1234 169.5432 14.78065432109874"

CATALOG_TEXT = "\n".join([
    ISS_NAME, ISS_LINE1, ISS_LINE2,
    SO50_NAME, SO50_LINE1, SO50_LINE2,
    AO91_NAME, AO91_LINE1, AO91_LINE2,
]) + "\n"


class FakeClock:
    """Monotonic seconds plus the matching UTC wall-clock time."""

    def __init__(self, start: datetime = EPOCH):
        self.start = start
        self.seconds = 0.0

    def time(self) -> float:
        return self.seconds

    def advance(self, seconds: float) -> None:
        self.seconds += seconds

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.seconds)


class FakePropagator:
    """
    Satellite moving east along a fixed latitude.

    Longitude advances lon_rate_deg_per_min from lon0 at the clock start.
    Set ``fail`` to make every call raise PropagationError, or ``error`` to
    raise an arbitrary exception instead.
    """

    def __init__(self, start: datetime = EPOCH, lat=10.0, lon0=0.0,
                 lon_rate_deg_per_min=4.0, alt_km=500.0):
        self.start = start
        self.lat = lat
        self.lon0 = lon0
        self.rate = lon_rate_deg_per_min
        self.alt_km = alt_km
        self.fail = False
        self.error: Exception | None = None
        self.calls = 0
        self.offsets: dict[str, float] = {}

    def sub_satellite_point(self, tle, when):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.fail:
            raise PropagationError(f"scripted failure for {tle.name}")
        minutes = (when - self.start).total_seconds() / 60.0
        lon = self.lon0 + self.offsets.get(tle.name, 0.0) + self.rate * minutes
        return self.lat, normalize_longitude(lon), self.alt_km


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return SchedScheduler(timefunc=clock.time, delayfunc=clock.advance)


@pytest.fixture
def renderer():
    return GeoJsonMapRenderer()


@pytest.fixture
def propagator():
    return FakePropagator()
