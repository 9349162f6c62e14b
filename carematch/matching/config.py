"""Configuration settings for the matching engine.

Every tunable number the scoring algorithm uses lives here, so thresholds
can be adjusted without touching scoring logic.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MaxScores(BaseModel):
    """Maximum points per scoring dimension."""

    # Structural fit
    age_range: Annotated[float, Field(ge=0.0)] = 25.0
    caregiver_type: Annotated[float, Field(ge=0.0)] = 15.0
    activities: Annotated[float, Field(ge=0.0)] = 15.0
    contract_regime: Annotated[float, Field(ge=0.0)] = 10.0
    availability: Annotated[float, Field(ge=0.0)] = 10.0
    children_count: Annotated[float, Field(ge=0.0)] = 5.0
    # Trust
    seal: Annotated[float, Field(ge=0.0)] = 8.0
    reviews: Annotated[float, Field(ge=0.0)] = 12.0
    # Bonus
    distance_bonus: Annotated[float, Field(ge=0.0)] = 5.0
    budget_bonus: Annotated[float, Field(ge=0.0)] = 5.0

    @property
    def fit_total(self) -> float:
        return (
            self.age_range
            + self.caregiver_type
            + self.activities
            + self.contract_regime
            + self.availability
            + self.children_count
        )

    @property
    def trust_total(self) -> float:
        return self.seal + self.reviews

    @property
    def bonus_total(self) -> float:
        return self.distance_bonus + self.budget_bonus


class RateBounds(BaseModel):
    """Numeric hourly-rate range (R$/h) behind a rate bracket name."""

    min: float = Field(..., ge=0.0)
    max: float = Field(..., ge=0.0)

    @model_validator(mode="after")
    def validate_order(self) -> RateBounds:
        if self.max < self.min:
            raise ValueError(f"Rate max ({self.max}) below min ({self.min})")
        return self


# Open-ended brackets ("OVER_80") use this as their upper bound.
_OPEN_RATE_MAX = 1000.0

DEFAULT_RATE_BRACKETS: dict[str, RateBounds] = {
    # Current names
    "UP_TO_25": RateBounds(min=0, max=25),
    "FROM_26_TO_35": RateBounds(min=26, max=35),
    "FROM_36_TO_45": RateBounds(min=36, max=45),
    "FROM_46_TO_60": RateBounds(min=46, max=60),
    "FROM_61_TO_80": RateBounds(min=61, max=80),
    "OVER_80": RateBounds(min=81, max=_OPEN_RATE_MAX),
    # Legacy caregiver names
    "UP_TO_20": RateBounds(min=0, max=20),
    "FROM_21_TO_30": RateBounds(min=21, max=30),
    "FROM_31_TO_40": RateBounds(min=31, max=40),
    "FROM_41_TO_50": RateBounds(min=41, max=50),
    "FROM_51_TO_70": RateBounds(min=51, max=70),
    "FROM_71_TO_100": RateBounds(min=71, max=100),
    "OVER_100": RateBounds(min=101, max=_OPEN_RATE_MAX),
    # Legacy family names
    "20_TO_30": RateBounds(min=20, max=30),
    "30_TO_40": RateBounds(min=30, max=40),
    "40_TO_50": RateBounds(min=40, max=50),
    "ABOVE_50": RateBounds(min=51, max=_OPEN_RATE_MAX),
}

DEFAULT_TRAVEL_DISTANCE_KM: dict[str, float | None] = {
    "UP_TO_5KM": 5.0,
    "UP_TO_10KM": 10.0,
    "UP_TO_15KM": 15.0,
    "UP_TO_20KM": 20.0,
    "UP_TO_30KM": 30.0,
    "ENTIRE_CITY": None,
}

DEFAULT_CERTIFICATION_REQUIREMENTS: list[str] = [
    "FIRST_AID",
    "CPR",
    "CHILD_DEVELOPMENT",
    "EARLY_EDUCATION",
    "NUTRITION",
    "SPECIAL_NEEDS",
    "MONTESSORI",
    "NURSING",
]


class ReviewTier(BaseModel):
    """Rating threshold and the points it implies."""

    min_rating: float = Field(..., ge=0.0, le=5.0)
    score: float = Field(..., ge=0.0)


class MatchingConfig(BaseSettings):
    """Matching engine configuration.

    Defaults reproduce the production scoring table. Any value can be
    overridden via environment variables with `MATCHING_` prefix (nested
    tables as JSON) or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Score table
    max_scores: MaxScores = Field(default_factory=MaxScores)
    fit_cap: Annotated[float, Field(ge=0.0)] = Field(
        default=80.0, description="Cap on the structural fit subtotal"
    )
    trust_cap: Annotated[float, Field(ge=0.0)] = Field(
        default=20.0, description="Cap on the trust subtotal"
    )
    bonus_cap: Annotated[float, Field(ge=0.0)] = Field(
        default=10.0, description="Cap on the additive bonus subtotal"
    )

    # Category tables
    rate_brackets: dict[str, RateBounds] = Field(
        default_factory=lambda: dict(DEFAULT_RATE_BRACKETS),
        description="Hourly-rate bracket name -> numeric range (current and legacy)",
    )
    travel_distance_km: dict[str, float | None] = Field(
        default_factory=lambda: dict(DEFAULT_TRAVEL_DISTANCE_KM),
        description="Travel category -> km ceiling (None = no ceiling)",
    )
    certification_requirements: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CERTIFICATION_REQUIREMENTS),
        description="Requirement tags checked against caregiver certifications",
    )
    compatible_contract_regimes: list[tuple[str, str]] = Field(
        default_factory=lambda: [("AUTONOMA", "PJ"), ("PJ", "AUTONOMA")],
        description="(family regime, caregiver regime) pairs earning partial credit",
    )

    # Distance
    default_travel_km: Annotated[float, Field(gt=0.0)] = Field(
        default=10.0,
        description="Ceiling used when a caregiver's travel category is missing",
    )
    entire_city_reference_km: Annotated[float, Field(gt=0.0)] = Field(
        default=50.0,
        description="Reference radius for distance tiers of ENTIRE_CITY caregivers",
    )
    near_ratio: Annotated[float, Field(gt=0.0, le=1.0)] = Field(
        default=0.5, description="Distance/ceiling ratio for the full distance bonus"
    )
    near_score: Annotated[float, Field(ge=0.0)] = 5.0
    within_score: Annotated[float, Field(ge=0.0)] = 3.0
    beyond_reference_score: Annotated[float, Field(ge=0.0)] = Field(
        default=1.0,
        description="Distance bonus for ENTIRE_CITY caregivers past the reference radius",
    )
    travel_tolerance: Annotated[float, Field(ge=1.0)] = Field(
        default=1.2,
        description="Multiple of the travel ceiling tolerated before flagging distance",
    )

    # Trust
    seal_full_score: Annotated[float, Field(ge=0.0)] = 8.0
    seal_verified_score: Annotated[float, Field(ge=0.0)] = 4.0
    seal_identified_score: Annotated[float, Field(ge=0.0)] = 2.0
    review_neutral_score: Annotated[float, Field(ge=0.0)] = Field(
        default=6.0, description="Reviews sub-score for caregivers with no reviews"
    )
    review_confidence_k: Annotated[float, Field(gt=0.0)] = Field(
        default=3.0,
        description="Pseudo-count: confidence = reviews / (reviews + k)",
    )
    review_tiers: list[ReviewTier] = Field(
        default_factory=lambda: [
            ReviewTier(min_rating=4.8, score=12.0),
            ReviewTier(min_rating=4.5, score=9.0),
            ReviewTier(min_rating=4.0, score=5.0),
            ReviewTier(min_rating=0.0, score=2.0),
        ]
    )

    # Budget
    budget_full_score: Annotated[float, Field(ge=0.0)] = 5.0
    budget_negotiable_score: Annotated[float, Field(ge=0.0)] = 2.0
    budget_negotiable_gap: Annotated[float, Field(ge=0.0)] = Field(
        default=10.0,
        description="R$/h a caregiver's floor may exceed the family ceiling and still earn partial credit",
    )

    # Constraint modes (True = hard constraint causing elimination, False = warning)
    age_range_strict: bool = False
    children_count_strict: bool = False
    pets_strict: bool = False
    distance_strict: bool = False
    budget_strict: bool = False
    availability_strict: bool = False

    @model_validator(mode="after")
    def validate_score_table(self) -> MatchingConfig:
        """Ensure per-dimension maxima add up to the subtotal caps."""
        checks = (
            ("fit", self.max_scores.fit_total, self.fit_cap),
            ("trust", self.max_scores.trust_total, self.trust_cap),
            ("bonus", self.max_scores.bonus_total, self.bonus_cap),
        )
        for name, total, cap in checks:
            if abs(total - cap) > 1e-6:
                raise ValueError(
                    f"Max scores for {name} dimensions must sum to {cap}. "
                    f"Got {total:.6f}."
                )

        for name, value in (
            ("near_score", self.near_score),
            ("within_score", self.within_score),
            ("beyond_reference_score", self.beyond_reference_score),
        ):
            if value > self.max_scores.distance_bonus:
                raise ValueError(f"{name} exceeds the distance bonus maximum")
        for name, value in (
            ("budget_full_score", self.budget_full_score),
            ("budget_negotiable_score", self.budget_negotiable_score),
        ):
            if value > self.max_scores.budget_bonus:
                raise ValueError(f"{name} exceeds the budget bonus maximum")
        for name, value in (
            ("seal_full_score", self.seal_full_score),
            ("seal_verified_score", self.seal_verified_score),
            ("seal_identified_score", self.seal_identified_score),
        ):
            if value > self.max_scores.seal:
                raise ValueError(f"{name} exceeds the seal maximum")
        if self.review_neutral_score > self.max_scores.reviews:
            raise ValueError("review_neutral_score exceeds the reviews maximum")
        if any(tier.score > self.max_scores.reviews for tier in self.review_tiers):
            raise ValueError("A review tier exceeds the reviews maximum")
        for category, ceiling in self.travel_distance_km.items():
            if ceiling is not None and ceiling <= 0:
                raise ValueError(
                    f"Travel ceiling for {category} must be positive, got {ceiling}"
                )
        return self

    def review_tier_score(self, rating: float) -> float:
        """Return the points implied by an average rating."""
        for tier in sorted(self.review_tiers, key=lambda t: t.min_rating, reverse=True):
            if rating >= tier.min_rating:
                return tier.score
        return 0.0


# Singleton instance for easy import
_matching_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the matching configuration singleton."""
    global _matching_config
    if _matching_config is None:
        _matching_config = MatchingConfig()
    return _matching_config


def reset_matching_config() -> None:
    """Reset the matching configuration singleton (useful for testing)."""
    global _matching_config
    _matching_config = None
