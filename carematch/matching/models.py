"""Data models for the matching engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Day(str, Enum):
    """Day of the week, in calendar order."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class Shift(str, Enum):
    """Coarse shift bucket of a day."""

    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    NIGHT = "NIGHT"
    OVERNIGHT = "OVERNIGHT"


class AgeRange(str, Enum):
    """Child age bracket a caregiver declares experience with."""

    NEWBORN = "NEWBORN"
    BABY = "BABY"
    TODDLER = "TODDLER"
    PRESCHOOL = "PRESCHOOL"
    SCHOOL_AGE = "SCHOOL_AGE"
    TEENAGER = "TEENAGER"


class TravelDistance(str, Enum):
    """How far a caregiver is willing to travel."""

    UP_TO_5KM = "UP_TO_5KM"
    UP_TO_10KM = "UP_TO_10KM"
    UP_TO_15KM = "UP_TO_15KM"
    UP_TO_20KM = "UP_TO_20KM"
    UP_TO_30KM = "UP_TO_30KM"
    ENTIRE_CITY = "ENTIRE_CITY"


class PetComfort(str, Enum):
    """Caregiver comfort level with pets in the household."""

    YES_ANY = "YES_ANY"
    ONLY_SOME = "ONLY_SOME"
    NO = "NO"


class HourlyRateRange(str, Enum):
    """Hourly rate bracket, including names still present in old records."""

    UP_TO_25 = "UP_TO_25"
    FROM_26_TO_35 = "FROM_26_TO_35"
    FROM_36_TO_45 = "FROM_36_TO_45"
    FROM_46_TO_60 = "FROM_46_TO_60"
    FROM_61_TO_80 = "FROM_61_TO_80"
    OVER_80 = "OVER_80"

    # Legacy caregiver brackets
    UP_TO_20 = "UP_TO_20"
    FROM_21_TO_30 = "FROM_21_TO_30"
    FROM_31_TO_40 = "FROM_31_TO_40"
    FROM_41_TO_50 = "FROM_41_TO_50"
    FROM_51_TO_70 = "FROM_51_TO_70"
    FROM_71_TO_100 = "FROM_71_TO_100"
    OVER_100 = "OVER_100"

    # Legacy family brackets
    LEGACY_20_TO_30 = "20_TO_30"
    LEGACY_30_TO_40 = "30_TO_40"
    LEGACY_40_TO_50 = "40_TO_50"
    ABOVE_50 = "ABOVE_50"

    @property
    def is_legacy(self) -> bool:
        return self not in _CURRENT_RATE_RANGES


_CURRENT_RATE_RANGES = frozenset(
    {
        HourlyRateRange.UP_TO_25,
        HourlyRateRange.FROM_26_TO_35,
        HourlyRateRange.FROM_36_TO_45,
        HourlyRateRange.FROM_46_TO_60,
        HourlyRateRange.FROM_61_TO_80,
        HourlyRateRange.OVER_80,
    }
)


class Coordinates(BaseModel):
    """Geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class ReviewStats(BaseModel):
    """Precomputed review aggregate for a caregiver."""

    model_config = ConfigDict(frozen=True)

    average_rating: float | None = Field(default=None, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)


class CaregiverProfile(BaseModel):
    """Caregiver (service provider) side of a match."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Caregiver identifier")
    name: str = Field(default="", description="Display name")

    # Demographics
    gender: str | None = None
    birth_date: date | None = None
    is_smoker: bool | None = None
    has_cnh: bool | None = Field(
        default=None, description="Holds a driver's license"
    )

    # Experience
    experience_years: int | None = None
    age_ranges_experience: list[AgeRange] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    has_special_needs_experience: bool | None = None
    special_needs_specialties: list[str] = Field(default_factory=list)
    special_needs_experience_description: str | None = None

    # Capacity
    max_children_care: int | None = Field(default=None, ge=0)
    comfortable_with_pets: PetComfort | None = None

    # Work model
    accepted_activities: list[str] = Field(default_factory=list)
    activities_not_accepted: list[str] = Field(default_factory=list)
    caregiver_types: list[str] = Field(default_factory=list)
    contract_regimes: list[str] = Field(default_factory=list)
    hourly_rate_range: HourlyRateRange | None = None
    max_travel_distance: TravelDistance | None = None

    # Trust
    document_validated: bool = False
    personal_data_validated: bool = Field(
        default=False, description="Facial (selfie) validation passed"
    )
    criminal_background_validated: bool = False
    document_expiration_date: date | None = None
    average_rating: float | None = Field(default=None, ge=0.0, le=5.0)
    review_count: int | None = Field(default=None, ge=0)
    last_active_at: datetime | None = None

    # Location & availability
    location: Coordinates | None = None
    availability_slots: frozenset[str] | None = None


class FamilyProfile(BaseModel):
    """Family (demand) side of a match."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Family identifier")
    has_pets: bool = False
    number_of_children: int | None = Field(default=None, ge=0)
    caregiver_type: str | None = None
    contract_regime: str | None = None
    hourly_rate_range: HourlyRateRange | None = None
    domestic_help_expected: list[str] = Field(default_factory=list)
    location: Coordinates | None = None
    availability_slots: frozenset[str] | None = None


class JobRequest(BaseModel):
    """A job posted by a family, covering some of its children."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Job identifier")
    mandatory_requirements: list[str] = Field(default_factory=list)
    children_ids: list[int] = Field(default_factory=list)


class ChildRecord(BaseModel):
    """A child (or expected child) covered by a job."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Child identifier")
    birth_date: date | None = None
    expected_birth_date: date | None = None
    unborn: bool = False
    has_special_needs: bool = False
    special_needs_types: list[str] = Field(default_factory=list)
    special_needs_description: str | None = None


@dataclass(frozen=True)
class ScoreComponent:
    """A bounded sub-score with an optional human-readable justification."""

    score: float
    max_score: float
    details: str | None = None

    def __post_init__(self) -> None:
        if self.max_score < 0:
            raise ValueError(f"max_score must be non-negative (got {self.max_score})")
        if not (0.0 <= self.score <= self.max_score + 1e-9):
            raise ValueError(
                f"score must be between 0 and {self.max_score} (got {self.score})"
            )

    def to_dict(self) -> dict:
        """Serialize to a dictionary, rounding for presentation."""
        return {
            "score": round(self.score, 2),
            "max_score": round(self.max_score, 2),
            "details": self.details,
        }


@dataclass(frozen=True)
class MatchBreakdown:
    """Detailed breakdown of a match across the ten scoring dimensions."""

    # Structural fit
    age_range: ScoreComponent
    caregiver_type: ScoreComponent
    activities: ScoreComponent
    contract_regime: ScoreComponent
    availability: ScoreComponent
    children_count: ScoreComponent
    # Trust
    seal: ScoreComponent
    reviews: ScoreComponent
    # Bonus
    distance_bonus: ScoreComponent
    budget_bonus: ScoreComponent

    def components(self) -> dict[str, ScoreComponent]:
        """Return the components keyed by dimension name, in scoring order."""
        return {
            "age_range": self.age_range,
            "caregiver_type": self.caregiver_type,
            "activities": self.activities,
            "contract_regime": self.contract_regime,
            "availability": self.availability,
            "children_count": self.children_count,
            "seal": self.seal,
            "reviews": self.reviews,
            "distance_bonus": self.distance_bonus,
            "budget_bonus": self.budget_bonus,
        }

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return {name: comp.to_dict() for name, comp in self.components().items()}


@dataclass(frozen=True)
class MatchResult:
    """Full evaluation of one caregiver against a job."""

    caregiver_id: int
    score: float
    fit_score: float
    trust_score: float
    bonus_score: float
    is_eligible: bool
    breakdown: MatchBreakdown
    elimination_reasons: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    distance_km: float | None = None

    def __post_init__(self) -> None:
        if self.is_eligible and self.elimination_reasons:
            raise ValueError(
                "MatchResult.is_eligible=True is incompatible with elimination_reasons"
            )
        if not self.is_eligible and not self.elimination_reasons:
            raise ValueError(
                "MatchResult.is_eligible=False requires at least one elimination reason"
            )

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary, rounding for presentation."""
        return {
            "caregiver_id": self.caregiver_id,
            "score": round(self.score, 2),
            "fit_score": round(self.fit_score, 2),
            "trust_score": round(self.trust_score, 2),
            "bonus_score": round(self.bonus_score, 2),
            "is_eligible": self.is_eligible,
            "elimination_reasons": list(self.elimination_reasons),
            "warnings": list(self.warnings),
            "distance_km": round(self.distance_km, 2)
            if self.distance_km is not None
            else None,
            "breakdown": self.breakdown.to_dict(),
        }
