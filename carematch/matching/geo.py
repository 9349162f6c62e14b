"""Geographic distance utilities built on the haversine formula.

A missing coordinate never counts as zero distance: every function here
treats it as "unknown", and unknown distances pass radius checks.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import TypeVar

from carematch.matching.config import MatchingConfig, get_matching_config
from carematch.matching.models import Coordinates, TravelDistance
from carematch.matching.normalize import normalize_travel_distance

T = TypeVar("T")

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinates | None, b: Coordinates | None) -> float | None:
    """Return the great-circle distance between two points, or None if unknown.

    a = sin²(Δlat/2) + cos(lat1)·cos(lat2)·sin²(Δlon/2)
    d = 2R·atan2(√a, √(1−a))
    """
    if a is None or b is None:
        return None

    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = math.radians(b.latitude - a.latitude)
    delta_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def max_travel_distance_to_km(
    category: TravelDistance | str | None,
    config: MatchingConfig | None = None,
) -> float | None:
    """Convert a travel-radius category to a km ceiling.

    Returns None for ENTIRE_CITY (no ceiling). Missing or unrecognised
    categories fall back to the configured default ceiling.
    """
    cfg = config or get_matching_config()
    normalized = normalize_travel_distance(category)
    if normalized is None or normalized.value not in cfg.travel_distance_km:
        return cfg.default_travel_km
    return cfg.travel_distance_km[normalized.value]


def is_within_radius(
    center: Coordinates | None, target: Coordinates | None, radius_km: float | None
) -> bool:
    """Return True if target lies within radius_km of center.

    Unknown distance and an unlimited radius (None) both pass.
    """
    if radius_km is None:
        return True
    distance = distance_km(center, target)
    if distance is None:
        return True
    return distance <= radius_km


def is_within_travel_range(
    caregiver_location: Coordinates | None,
    family_location: Coordinates | None,
    category: TravelDistance | str | None,
    config: MatchingConfig | None = None,
) -> bool:
    """Return True if the family is inside the caregiver's travel ceiling."""
    ceiling = max_travel_distance_to_km(category, config)
    return is_within_radius(caregiver_location, family_location, ceiling)


def filter_by_radius(
    center: Coordinates | None,
    items: Sequence[T],
    radius_km: float | None,
    get_coordinates: Callable[[T], Coordinates | None],
) -> list[T]:
    """Keep items within the radius; items with unknown distance are kept."""
    return [
        item
        for item in items
        if is_within_radius(center, get_coordinates(item), radius_km)
    ]


def sort_by_distance(
    center: Coordinates | None,
    items: Sequence[T],
    get_coordinates: Callable[[T], Coordinates | None],
) -> list[T]:
    """Sort items nearest first; unknown distances go last in input order."""

    def _key(item: T) -> tuple[bool, float]:
        distance = distance_km(center, get_coordinates(item))
        if distance is None:
            return (True, 0.0)
        return (False, distance)

    return sorted(items, key=_key)


def with_distances(
    center: Coordinates | None,
    items: Sequence[T],
    get_coordinates: Callable[[T], Coordinates | None],
) -> list[tuple[T, float | None]]:
    """Pair each item with its distance from center (None if unknown)."""
    return [(item, distance_km(center, get_coordinates(item))) for item in items]
