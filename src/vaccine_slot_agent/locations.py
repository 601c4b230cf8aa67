"""Narrow the upstream store list down to the ones worth querying."""

from __future__ import annotations

from typing import Collection, Iterable, List

from .models import Location


def filter_locations(locations: Iterable[Location], cities: Collection[str]) -> List[Location]:
    """Keep stores in ``cities`` whose appointment type is open for booking.

    Order is preserved. Stores without a city or without an appointment type
    entry are dropped.
    """
    allowed = set(cities)
    kept: list[Location] = []
    for location in locations:
        if location.city not in allowed:
            continue
        capability = location.primary_capability
        if capability is None or capability.waitlisted:
            continue
        kept.append(location)
    return kept
