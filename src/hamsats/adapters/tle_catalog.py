# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""TLE catalog file reader (name/line1/line2 triplets)."""
import logging

from hamsats.domain.tle import TwoLineElement, parse_tle_catalog


_log = logging.getLogger(__name__)


def read_tle_catalog(path: str) -> list[TwoLineElement]:
    """Read and validate a TLE catalog file."""
    with open(path, encoding='utf-8') as f:
        catalog = parse_tle_catalog(f.read())
    _log.info("Loaded %d satellites from %s", len(catalog), path)
    return catalog


def find_satellite(catalog: list[TwoLineElement], name: str) -> TwoLineElement:
    """
    Look up a satellite by name (case-insensitive) or catalog number.

    Raises:
        ValueError: If no entry matches.
    """
    wanted = name.strip().casefold()
    for tle in catalog:
        if tle.name.casefold() == wanted or tle.catalog_number == name.strip():
            return tle
    raise ValueError(f"Satellite '{name}' not found in TLE catalog")
