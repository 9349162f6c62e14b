"""Tests for category normalization."""

import pytest


class TestNormalizeToken:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("nanny", "NANNY"),
            ("  from 26-to-35 ", "FROM_26_TO_35"),
            ("school   pickup", "SCHOOL_PICKUP"),
            ("", None),
            ("   ", None),
            (None, None),
        ],
    )
    def test_normalize_token(self, value, expected):
        """Tokens should be upper-cased with underscores."""
        from carematch.matching.normalize import normalize_token

        assert normalize_token(value) == expected

    def test_enum_members_use_their_value(self):
        """Enum members should normalize to their value."""
        from carematch.matching.models import HourlyRateRange
        from carematch.matching.normalize import normalize_token

        assert normalize_token(HourlyRateRange.LEGACY_20_TO_30) == "20_TO_30"


class TestEnumNormalization:
    """Test scalar enum normalization with legacy names."""

    def test_current_rate_range(self):
        """Current bracket names should resolve."""
        from carematch.matching.models import HourlyRateRange
        from carematch.matching.normalize import normalize_rate_range

        assert normalize_rate_range("from_36_to_45") == HourlyRateRange.FROM_36_TO_45

    def test_legacy_rate_range(self):
        """Legacy bracket names should resolve."""
        from carematch.matching.models import HourlyRateRange
        from carematch.matching.normalize import normalize_rate_range

        rate = normalize_rate_range("20_TO_30")

        assert rate == HourlyRateRange.LEGACY_20_TO_30
        assert rate.is_legacy is True
        assert HourlyRateRange.OVER_80.is_legacy is False

    def test_unknown_values_become_none(self):
        """Unknown scalar values should become None."""
        from carematch.matching.normalize import (
            normalize_pet_comfort,
            normalize_rate_range,
            normalize_travel_distance,
        )

        assert normalize_rate_range("CHEAP") is None
        assert normalize_travel_distance("MOON") is None
        assert normalize_pet_comfort("MAYBE") is None

    def test_pet_comfort_aliases(self):
        """Pet comfort aliases should map to canonical values."""
        from carematch.matching.models import PetComfort
        from carematch.matching.normalize import normalize_pet_comfort

        assert normalize_pet_comfort("yes") == PetComfort.YES_ANY
        assert normalize_pet_comfort("only some") == PetComfort.ONLY_SOME
        assert normalize_pet_comfort("NO") == PetComfort.NO


class TestListNormalization:
    """Test list normalization: aliases, duplicates and unknown entries."""

    def test_age_ranges_drop_unknown_and_duplicates(self):
        """Unknown and repeated age ranges should be dropped."""
        from carematch.matching.models import AgeRange
        from carematch.matching.normalize import normalize_age_ranges

        ranges = normalize_age_ranges(["baby", "BABY", "ELDERLY", "school age"])

        assert ranges == [AgeRange.BABY, AgeRange.SCHOOL_AGE]

    def test_activity_aliases_collapse_to_canonical_names(self):
        """Legacy activity names should map to canonical ones."""
        from carematch.matching.normalize import normalize_activities

        activities = normalize_activities(["MEAL_PREP", "cooking", "School Pickup"])

        assert activities == ["COOKING", "TRANSPORT"]

    def test_requirement_aliases(self):
        """Requirement aliases should map to canonical tags."""
        from carematch.matching.normalize import normalize_requirements

        requirements = normalize_requirements(
            ["comfortable with pets", "CNH", "non-smoker", ""]
        )

        assert requirements == ["PET_FRIENDLY", "DRIVER_LICENSE", "NON_SMOKER"]

    def test_none_is_empty(self):
        """None should normalize to an empty list."""
        from carematch.matching.normalize import normalize_tags

        assert normalize_tags(None) == []
