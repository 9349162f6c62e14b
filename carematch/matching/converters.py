"""Convert storage-layer records into matching value objects.

Records may be plain mappings (decoded JSON, query rows) or attribute
objects (ORM instances). Missing optional attributes fall back to None or
an empty collection. Only a missing identifier, or review stats that are
not a mapping, is an error.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from carematch.matching.availability import arrays_to_slots, schedule_to_slots
from carematch.matching.models import (
    CaregiverProfile,
    ChildRecord,
    Coordinates,
    FamilyProfile,
    JobRequest,
    ReviewStats,
)
from carematch.matching.normalize import (
    normalize_activities,
    normalize_age_ranges,
    normalize_pet_comfort,
    normalize_rate_range,
    normalize_requirements,
    normalize_tags,
    normalize_token,
    normalize_travel_distance,
)
from carematch.utils.logging import get_logger

logger = get_logger("matching.converters")


class RecordConversionError(ValueError):
    """Raised when a record lacks a structurally required field."""


def _get(record: Any, name: str, default: Any = None) -> Any:
    if record is None:
        return default
    if isinstance(record, Mapping):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value


def _require_id(record: Any, kind: str) -> int:
    value = _get(record, "id")
    if value is None:
        raise RecordConversionError(f"{kind} record has no id")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise RecordConversionError(f"{kind} record has invalid id {value!r}") from e


def _as_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        logger.warning("Unparseable date %r ignored", value)
        return None


def _as_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning("Unparseable timestamp %r ignored", value)
        return None


def _as_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric value %r ignored", value)
        return None


def _as_bool(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


def _coordinates(record: Any) -> Coordinates | None:
    """Extract coordinates from a nested address or top-level lat/lon."""
    address = _get(record, "address")
    source = address if address is not None else record
    latitude = _get(source, "latitude")
    longitude = _get(source, "longitude")
    if latitude is None or longitude is None:
        return None
    try:
        return Coordinates(latitude=float(latitude), longitude=float(longitude))
    except ValueError:
        logger.warning("Invalid coordinates (%r, %r) ignored", latitude, longitude)
        return None


def _review_stats(
    record: Any, review_stats: ReviewStats | Mapping | None
) -> tuple[float | None, int | None]:
    if review_stats is None:
        return _get(record, "average_rating"), _as_int(_get(record, "review_count"))
    if isinstance(review_stats, Mapping):
        # Null aggregates mean "no reviews", same as absent keys
        present = {k: v for k, v in review_stats.items() if v is not None}
        review_stats = ReviewStats.model_validate(present)
    elif not isinstance(review_stats, ReviewStats):
        raise RecordConversionError(
            f"Review stats must be a mapping, got {type(review_stats).__name__}"
        )
    return review_stats.average_rating, review_stats.review_count


def to_caregiver_profile(
    record: Any, review_stats: ReviewStats | Mapping | None = None
) -> CaregiverProfile:
    """Build a CaregiverProfile from a stored caregiver record.

    Availability is derived from the per-day schedule JSON stored in
    `availability_json`.
    """
    average_rating, review_count = _review_stats(record, review_stats)
    slots = schedule_to_slots(_get(record, "availability_json"))

    return CaregiverProfile(
        id=_require_id(record, "Caregiver"),
        name=_get(record, "name", ""),
        gender=normalize_token(_get(record, "gender")),
        birth_date=_as_date(_get(record, "birth_date")),
        is_smoker=_as_bool(_get(record, "is_smoker")),
        has_cnh=_as_bool(_get(record, "has_cnh")),
        experience_years=_as_int(_get(record, "experience_years")),
        age_ranges_experience=normalize_age_ranges(
            _get(record, "age_ranges_experience", [])
        ),
        certifications=normalize_tags(_get(record, "certifications", [])),
        has_special_needs_experience=_as_bool(
            _get(record, "has_special_needs_experience")
        ),
        special_needs_specialties=normalize_tags(
            _get(record, "special_needs_specialties", [])
        ),
        special_needs_experience_description=_get(
            record, "special_needs_experience_description"
        ),
        max_children_care=_as_int(_get(record, "max_children_care")),
        comfortable_with_pets=normalize_pet_comfort(
            _get(record, "comfortable_with_pets")
        ),
        accepted_activities=normalize_activities(
            _get(record, "accepted_activities", [])
        ),
        activities_not_accepted=normalize_activities(
            _get(record, "activities_not_accepted", [])
        ),
        caregiver_types=normalize_tags(_get(record, "caregiver_types", [])),
        contract_regimes=normalize_tags(_get(record, "contract_regimes", [])),
        hourly_rate_range=normalize_rate_range(_get(record, "hourly_rate_range")),
        max_travel_distance=normalize_travel_distance(
            _get(record, "max_travel_distance")
        ),
        document_validated=bool(_get(record, "document_validated", False)),
        personal_data_validated=bool(_get(record, "personal_data_validated", False)),
        criminal_background_validated=bool(
            _get(record, "criminal_background_validated", False)
        ),
        document_expiration_date=_as_date(_get(record, "document_expiration_date")),
        average_rating=average_rating,
        review_count=review_count,
        last_active_at=_as_datetime(_get(record, "last_active_at")),
        location=_coordinates(record),
        availability_slots=frozenset(slots) if slots else None,
    )


def to_family_profile(record: Any) -> FamilyProfile:
    """Build a FamilyProfile from a stored family record.

    Availability is the cross product of `needed_days` and `needed_shifts`.
    """
    slots = arrays_to_slots(
        _get(record, "needed_days", []), _get(record, "needed_shifts", [])
    )

    return FamilyProfile(
        id=_require_id(record, "Family"),
        has_pets=bool(_get(record, "has_pets", False)),
        number_of_children=_as_int(_get(record, "number_of_children")),
        caregiver_type=normalize_token(_get(record, "caregiver_type")),
        contract_regime=normalize_token(_get(record, "contract_regime")),
        hourly_rate_range=normalize_rate_range(_get(record, "hourly_rate_range")),
        domestic_help_expected=normalize_activities(
            _get(record, "domestic_help_expected", [])
        ),
        location=_coordinates(record),
        availability_slots=frozenset(slots) if slots else None,
    )


def to_job_request(record: Any) -> JobRequest:
    """Build a JobRequest from a stored job record."""
    children_ids = [
        child_id
        for child_id in (_as_int(v) for v in _get(record, "children_ids", []))
        if child_id is not None
    ]
    return JobRequest(
        id=_require_id(record, "Job"),
        mandatory_requirements=normalize_requirements(
            _get(record, "mandatory_requirements", [])
        ),
        children_ids=children_ids,
    )


def to_child_record(record: Any) -> ChildRecord:
    """Build a ChildRecord from a stored child record."""
    return ChildRecord(
        id=_require_id(record, "Child"),
        birth_date=_as_date(_get(record, "birth_date")),
        expected_birth_date=_as_date(_get(record, "expected_birth_date")),
        unborn=bool(_get(record, "unborn", False)),
        has_special_needs=bool(_get(record, "has_special_needs", False)),
        special_needs_types=normalize_tags(_get(record, "special_needs_types", [])),
        special_needs_description=_get(record, "special_needs_description"),
    )


def select_job_children(
    job: JobRequest, children: Iterable[ChildRecord]
) -> list[ChildRecord]:
    """Return the children a job covers, in the job's order.

    A job without children ids covers every supplied child.
    """
    children = list(children)
    if not job.children_ids:
        return children
    by_id = {child.id: child for child in children}
    return [by_id[cid] for cid in job.children_ids if cid in by_id]
