"""Normalization of enum-like category strings found in stored records."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import TypeVar

from carematch.matching.models import (
    AgeRange,
    HourlyRateRange,
    PetComfort,
    TravelDistance,
)
from carematch.utils.logging import get_logger

logger = get_logger("matching.normalize")

E = TypeVar("E", bound=Enum)

_ACTIVITY_ALIASES: dict[str, str] = {
    "MEAL_PREP": "COOKING",
    "CHILD_LAUNDRY": "LAUNDRY",
    "SCHOOL_PICKUP": "TRANSPORT",
    "HOMEWORK_HELP": "HOMEWORK",
    "OUTDOOR_ACTIVITIES": "OUTDOOR",
    "SPORTS_ACTIVITIES": "SPORTS",
}

_REQUIREMENT_ALIASES: dict[str, str] = {
    "NO_SMOKING": "NON_SMOKER",
    "NONSMOKER": "NON_SMOKER",
    "CNH": "DRIVER_LICENSE",
    "DRIVERS_LICENSE": "DRIVER_LICENSE",
    "COMFORTABLE_WITH_PETS": "PET_FRIENDLY",
    "PETS": "PET_FRIENDLY",
    "SPECIAL_NEEDS_EXP": "SPECIAL_NEEDS_EXPERIENCE",
}

_PET_COMFORT_ALIASES: dict[str, str] = {
    "YES": "YES_ANY",
    "ANY": "YES_ANY",
    "SOME": "ONLY_SOME",
}


def normalize_token(value: object) -> str | None:
    """Normalize a category string for comparison.

    Upper-cases, trims, and turns runs of spaces or hyphens into single
    underscores ("from 26-to-35" -> "FROM_26_TO_35"). Returns None for
    empty values.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    text = str(value).strip().upper()
    text = re.sub(r"[\s\-]+", "_", text)
    text = text.strip("_")
    return text or None


def _to_enum(enum_cls: type[E], value: object, aliases: dict[str, str] | None = None) -> E | None:
    token = normalize_token(value)
    if token is None:
        return None
    if aliases:
        token = aliases.get(token, token)
    try:
        return enum_cls(token)
    except ValueError:
        logger.debug("Unknown %s value %r ignored", enum_cls.__name__, value)
        return None


def normalize_rate_range(value: object) -> HourlyRateRange | None:
    return _to_enum(HourlyRateRange, value)


def normalize_travel_distance(value: object) -> TravelDistance | None:
    return _to_enum(TravelDistance, value)


def normalize_pet_comfort(value: object) -> PetComfort | None:
    return _to_enum(PetComfort, value, _PET_COMFORT_ALIASES)


def normalize_age_ranges(values: Iterable[object] | None) -> list[AgeRange]:
    """Normalize declared age ranges, dropping unknown ones."""
    ranges: list[AgeRange] = []
    for value in values or []:
        age_range = _to_enum(AgeRange, value)
        if age_range is not None and age_range not in ranges:
            ranges.append(age_range)
    return ranges


def normalize_tags(
    values: Iterable[object] | None, aliases: dict[str, str] | None = None
) -> list[str]:
    """Normalize a list of free-form tags, keeping order and dropping duplicates."""
    tags: list[str] = []
    for value in values or []:
        token = normalize_token(value)
        if token is None:
            continue
        if aliases:
            token = aliases.get(token, token)
        if token not in tags:
            tags.append(token)
    return tags


def normalize_activities(values: Iterable[object] | None) -> list[str]:
    return normalize_tags(values, _ACTIVITY_ALIASES)


def normalize_requirements(values: Iterable[object] | None) -> list[str]:
    return normalize_tags(values, _REQUIREMENT_ALIASES)
