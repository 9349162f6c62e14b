"""Tests for matching data models."""

import pytest
from pydantic import ValidationError


def _component(score=1.0, max_score=5.0, details=None):
    from carematch.matching.models import ScoreComponent

    return ScoreComponent(score=score, max_score=max_score, details=details)


def _breakdown():
    from carematch.matching.models import MatchBreakdown

    return MatchBreakdown(
        age_range=_component(25.0, 25.0),
        caregiver_type=_component(15.0, 15.0),
        activities=_component(10.0, 15.0),
        contract_regime=_component(10.0, 10.0),
        availability=_component(5.0, 10.0),
        children_count=_component(5.0, 5.0),
        seal=_component(8.0, 8.0),
        reviews=_component(6.0, 12.0),
        distance_bonus=_component(3.0, 5.0),
        budget_bonus=_component(5.0, 5.0),
    )


class TestScoreComponent:
    """Test ScoreComponent bounds and serialization."""

    def test_accepts_score_within_bounds(self):
        """A score inside its maximum should be accepted."""
        comp = _component(2.5, 5.0, "ok")

        assert comp.score == 2.5
        assert comp.details == "ok"

    @pytest.mark.parametrize("score", [-0.1, 5.1])
    def test_rejects_score_out_of_bounds(self, score):
        """A score outside zero and its maximum should be rejected."""
        with pytest.raises(ValueError):
            _component(score, 5.0)

    def test_to_dict_rounds_for_presentation(self):
        """Serialized scores should be rounded."""
        comp = _component(11.217391, 12.0, "4.9 stars")

        assert comp.to_dict() == {"score": 11.22, "max_score": 12.0, "details": "4.9 stars"}


class TestMatchBreakdown:
    def test_components_in_scoring_order(self):
        """Components should be listed in scoring order."""
        names = list(_breakdown().components())

        assert names == [
            "age_range",
            "caregiver_type",
            "activities",
            "contract_regime",
            "availability",
            "children_count",
            "seal",
            "reviews",
            "distance_bonus",
            "budget_bonus",
        ]

    def test_to_dict(self):
        """The breakdown should serialize every component."""
        data = _breakdown().to_dict()

        assert data["activities"]["score"] == 10.0
        assert data["distance_bonus"]["max_score"] == 5.0


class TestMatchResult:
    """Test MatchResult invariants."""

    def test_eligible_result_has_no_reasons(self):
        """An eligible result should carry no elimination reasons."""
        from carematch.matching.models import MatchResult

        with pytest.raises(ValueError):
            MatchResult(
                caregiver_id=1,
                score=90.0,
                fit_score=70.0,
                trust_score=14.0,
                bonus_score=8.0,
                is_eligible=True,
                breakdown=_breakdown(),
                elimination_reasons=["Job requires a non-smoker"],
            )

    def test_ineligible_result_needs_a_reason(self):
        """An ineligible result without a reason should be rejected."""
        from carematch.matching.models import MatchResult

        with pytest.raises(ValueError):
            MatchResult(
                caregiver_id=1,
                score=90.0,
                fit_score=70.0,
                trust_score=14.0,
                bonus_score=8.0,
                is_eligible=False,
                breakdown=_breakdown(),
            )

    def test_to_dict(self):
        """The result should serialize scores, flags and breakdown."""
        from carematch.matching.models import MatchResult

        result = MatchResult(
            caregiver_id=1,
            score=92.123,
            fit_score=70.0,
            trust_score=14.0,
            bonus_score=8.123,
            is_eligible=False,
            breakdown=_breakdown(),
            elimination_reasons=["Job requires a non-smoker"],
            warnings=["Family has pets and caregiver is not comfortable with pets"],
            distance_km=7.4567,
        )

        data = result.to_dict()

        assert data["score"] == 92.12
        assert data["bonus_score"] == 8.12
        assert data["distance_km"] == 7.46
        assert data["is_eligible"] is False
        assert data["elimination_reasons"] == ["Job requires a non-smoker"]
        assert set(data["breakdown"]) == set(_breakdown().components())


class TestProfiles:
    """Test pydantic profile models."""

    def test_coordinates_bounds(self):
        """Coordinates outside valid ranges should be rejected."""
        from carematch.matching.models import Coordinates

        with pytest.raises(ValidationError):
            Coordinates(latitude=91.0, longitude=0.0)
        with pytest.raises(ValidationError):
            Coordinates(latitude=0.0, longitude=-181.0)

    def test_profiles_are_frozen(self, make_caregiver):
        """Profiles should be immutable."""
        caregiver = make_caregiver()

        with pytest.raises(ValidationError):
            caregiver.name = "Someone Else"

    def test_review_stats_bounds(self):
        """Ratings above 5 and negative counts should be rejected."""
        from carematch.matching.models import ReviewStats

        with pytest.raises(ValidationError):
            ReviewStats(average_rating=5.5, review_count=1)
        with pytest.raises(ValidationError):
            ReviewStats(average_rating=4.0, review_count=-1)

    def test_caregiver_slots_accept_lists(self, make_caregiver):
        """Slot lists should be stored as frozensets."""
        caregiver = make_caregiver(availability_slots=["MONDAY_MORNING", "MONDAY_MORNING"])

        assert caregiver.availability_slots == frozenset({"MONDAY_MORNING"})
