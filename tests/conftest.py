"""Pytest configuration and shared fixtures."""

import math
from datetime import date

import pytest

REFERENCE_DATE = date(2025, 6, 1)

# Family home (São Paulo, Sé)
FAMILY_LAT = -23.5505
FAMILY_LON = -46.6333


def point_north_of(latitude: float, longitude: float, km: float) -> dict:
    """Return lat/lon `km` kilometres due north of the given point."""
    return {
        "latitude": latitude + math.degrees(km / 6371.0),
        "longitude": longitude,
    }


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Drop cached settings so each test builds its own."""
    from carematch.config.settings import reset_settings
    from carematch.matching.config import reset_matching_config
    from carematch.utils.logging import reset_logging

    yield
    reset_settings()
    reset_matching_config()
    reset_logging()


@pytest.fixture
def today() -> date:
    """Fixed reference date for age and expiry computations."""
    return REFERENCE_DATE


@pytest.fixture
def matching_config():
    """Default matching configuration, isolated from any .env file."""
    from carematch.matching.config import MatchingConfig

    return MatchingConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def service(matching_config):
    """Scoring service using the default configuration."""
    from carematch.matching.service import MatchScoringService

    return MatchScoringService(config=matching_config)


@pytest.fixture
def family_location():
    from carematch.matching.models import Coordinates

    return Coordinates(latitude=FAMILY_LAT, longitude=FAMILY_LON)


@pytest.fixture
def north_of_family():
    """Return a function giving Coordinates `km` kilometres north of the family."""
    from carematch.matching.models import Coordinates

    def _north(km: float):
        return Coordinates(**point_north_of(FAMILY_LAT, FAMILY_LON, km))

    return _north


@pytest.fixture
def make_caregiver():
    """Factory for caregivers with no optional data unless overridden."""
    from carematch.matching.models import CaregiverProfile

    def _make(**overrides):
        data = {"id": 1, "name": "Ana Souza"}
        data.update(overrides)
        return CaregiverProfile(**data)

    return _make


@pytest.fixture
def make_family():
    """Factory for families with no optional data unless overridden."""
    from carematch.matching.models import FamilyProfile

    def _make(**overrides):
        data = {"id": 10}
        data.update(overrides)
        return FamilyProfile(**data)

    return _make


@pytest.fixture
def make_job():
    from carematch.matching.models import JobRequest

    def _make(**overrides):
        data = {"id": 100}
        data.update(overrides)
        return JobRequest(**data)

    return _make


@pytest.fixture
def make_child():
    from carematch.matching.models import ChildRecord

    def _make(**overrides):
        data = {"id": 1000}
        data.update(overrides)
        return ChildRecord(**data)

    return _make


@pytest.fixture
def caregiver_record() -> dict:
    """A complete caregiver row as the storage layer returns it."""
    return {
        "id": 7,
        "name": "Beatriz Lima",
        "gender": "female",
        "birth_date": "1990-04-12",
        "is_smoker": False,
        "has_cnh": True,
        "experience_years": 8,
        "age_ranges_experience": ["BABY", "TODDLER", "preschool"],
        "certifications": ["FIRST_AID", "CPR"],
        "has_special_needs_experience": True,
        "special_needs_specialties": ["AUTISM", "ADHD"],
        "max_children_care": 3,
        "comfortable_with_pets": "YES_ANY",
        "accepted_activities": ["COOKING", "HOMEWORK", "school pickup"],
        "activities_not_accepted": ["CLEANING"],
        "caregiver_types": ["NANNY"],
        "contract_regimes": ["CLT"],
        "hourly_rate_range": "FROM_36_TO_45",
        "max_travel_distance": "UP_TO_10KM",
        "document_validated": True,
        "personal_data_validated": True,
        "criminal_background_validated": True,
        "document_expiration_date": "2030-01-01",
        "address": point_north_of(FAMILY_LAT, FAMILY_LON, 3.0),
        "availability_json": {
            "monday": {"enabled": True, "start_time": "08:00", "end_time": "17:00"},
            "tuesday": {"enabled": True, "start_time": "08:00", "end_time": "17:00"},
            "wednesday": {"enabled": False, "start_time": "08:00", "end_time": "17:00"},
        },
    }


@pytest.fixture
def family_record() -> dict:
    """A complete family row as the storage layer returns it."""
    return {
        "id": 10,
        "has_pets": True,
        "number_of_children": 2,
        "caregiver_type": "NANNY",
        "contract_regime": "CLT",
        "hourly_rate_range": "FROM_36_TO_45",
        "domestic_help_expected": ["COOKING", "MEAL_PREP", "HOMEWORK"],
        "address": {"latitude": FAMILY_LAT, "longitude": FAMILY_LON},
        "needed_days": ["MONDAY", "TUESDAY"],
        "needed_shifts": ["MORNING", "AFTERNOON"],
    }


@pytest.fixture
def scenario_data(caregiver_record, family_record) -> dict:
    """A full scenario mapping: one job, its family, children and caregivers."""
    smoker = dict(caregiver_record, id=8, name="Carla Dias", is_smoker=True)
    far_away = dict(
        caregiver_record,
        id=9,
        name="Daniela Rocha",
        address=point_north_of(FAMILY_LAT, FAMILY_LON, 40.0),
        document_validated=False,
    )
    return {
        "job": {
            "id": 100,
            "mandatory_requirements": ["NON_SMOKER", "FIRST_AID"],
            "children_ids": [1000, 1001],
        },
        "family": family_record,
        "children": [
            {"id": 1000, "birth_date": "2024-03-01"},
            {"id": 1001, "birth_date": "2022-01-15"},
            {"id": 1002, "birth_date": "2012-05-20"},
        ],
        "caregivers": [caregiver_record, smoker, far_away],
        "review_stats": {
            "7": {"average_rating": 4.9, "review_count": 20},
            "8": {"average_rating": 4.9, "review_count": 20},
        },
    }
