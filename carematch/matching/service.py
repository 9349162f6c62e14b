"""Match scoring service implementation."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from carematch.matching.availability import intersection, overlap_ratio
from carematch.matching.config import MatchingConfig, RateBounds, get_matching_config
from carematch.matching.geo import distance_km, max_travel_distance_to_km
from carematch.matching.models import (
    AgeRange,
    CaregiverProfile,
    ChildRecord,
    FamilyProfile,
    HourlyRateRange,
    JobRequest,
    MatchBreakdown,
    MatchResult,
    PetComfort,
    ScoreComponent,
)
from carematch.utils.logging import get_logger

logger = get_logger("matching.service")

_WILDCARD_SPECIALTY = "OTHER"


class MatchScoringService:
    """Service for computing caregiver/job match scores and eligibility."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    # ------------------------------------------------------------------
    # Phase A: eligibility
    # ------------------------------------------------------------------

    def check_requirements(
        self,
        caregiver: CaregiverProfile,
        job: JobRequest,
        children: Sequence[ChildRecord],
    ) -> list[str]:
        """Check the job's mandatory requirement tags against a caregiver.

        Returns one human-readable reason per unmet requirement.
        """
        reasons: list[str] = []
        certifications = set(self.config.certification_requirements)

        for tag in job.mandatory_requirements:
            if tag == "NON_SMOKER":
                if caregiver.is_smoker:
                    reasons.append("Job requires a non-smoker")
            elif tag == "DRIVER_LICENSE":
                if not caregiver.has_cnh:
                    reasons.append("Job requires a driver's license")
            elif tag == "PET_FRIENDLY":
                if caregiver.comfortable_with_pets == PetComfort.NO:
                    reasons.append("Job requires comfort with pets")
            elif tag == "SPECIAL_NEEDS_EXPERIENCE":
                reasons.extend(self._check_special_needs(caregiver, children))
            elif tag in certifications:
                if tag not in caregiver.certifications:
                    reasons.append(f"Job requires certification {tag}")
            else:
                logger.debug("Unknown requirement tag %s ignored (job %s)", tag, job.id)

        return reasons

    def _check_special_needs(
        self, caregiver: CaregiverProfile, children: Sequence[ChildRecord]
    ) -> list[str]:
        if not caregiver.has_special_needs_experience:
            return ["Job requires special-needs experience"]

        required: list[str] = []
        for child in children:
            if not child.has_special_needs:
                continue
            for need in child.special_needs_types:
                if need != _WILDCARD_SPECIALTY and need not in required:
                    required.append(need)

        specialties = set(caregiver.special_needs_specialties)
        if _WILDCARD_SPECIALTY in specialties:
            return []
        unmatched = [need for need in required if need not in specialties]
        if unmatched:
            return [f"No special-needs experience with: {', '.join(unmatched)}"]
        return []

    def check_constraints(
        self,
        caregiver: CaregiverProfile,
        family: FamilyProfile,
        children: Sequence[ChildRecord],
        today: date,
    ) -> tuple[list[str], list[str]]:
        """Check soft constraints and return (hard_violations, soft_warnings).

        Each constraint is a warning unless its `*_strict` flag is set.
        """
        hard_violations: list[str] = []
        soft_warnings: list[str] = []

        def _flag(strict: bool, message: str) -> None:
            (hard_violations if strict else soft_warnings).append(message)

        ranges = children_age_ranges(children, today)
        if ranges and caregiver.age_ranges_experience:
            youngest = ranges[0]
            if youngest not in caregiver.age_ranges_experience:
                _flag(
                    self.config.age_range_strict,
                    f"No experience with the youngest child's age range ({youngest.value})",
                )

        number = _number_of_children(family, children)
        limit = caregiver.max_children_care
        if limit is not None and number > limit:
            _flag(
                self.config.children_count_strict,
                f"Family has {number} children, caregiver accepts up to {limit}",
            )

        if family.has_pets and caregiver.comfortable_with_pets == PetComfort.NO:
            _flag(
                self.config.pets_strict,
                "Family has pets and caregiver is not comfortable with pets",
            )

        distance = distance_km(caregiver.location, family.location)
        ceiling = max_travel_distance_to_km(caregiver.max_travel_distance, self.config)
        if (
            distance is not None
            and ceiling is not None
            and distance > ceiling * self.config.travel_tolerance
        ):
            _flag(
                self.config.distance_strict,
                f"Distance ({distance:.1f} km) exceeds caregiver's travel radius ({ceiling:g} km)",
            )

        family_rate = self._rate_bounds(family.hourly_rate_range)
        caregiver_rate = self._rate_bounds(caregiver.hourly_rate_range)
        if family_rate is not None and caregiver_rate is not None:
            if not (
                family_rate.max >= caregiver_rate.min
                and caregiver_rate.max >= family_rate.min
            ):
                _flag(
                    self.config.budget_strict,
                    f"Incompatible budget: family {family.hourly_rate_range.value}, "
                    f"caregiver {caregiver.hourly_rate_range.value}",
                )

        if (
            family.availability_slots
            and caregiver.availability_slots
            and not intersection(family.availability_slots, caregiver.availability_slots)
        ):
            _flag(
                self.config.availability_strict,
                "No shared availability between family and caregiver",
            )

        return hard_violations, soft_warnings

    # ------------------------------------------------------------------
    # Phase B: structural fit
    # ------------------------------------------------------------------

    def score_age_range(
        self,
        caregiver: CaregiverProfile,
        children: Sequence[ChildRecord],
        today: date,
    ) -> ScoreComponent:
        max_score = self.config.max_scores.age_range
        ranges = children_age_ranges(children, today)
        if not ranges:
            return ScoreComponent(max_score, max_score, "No children with known age")

        covered = [r for r in ranges if r in caregiver.age_ranges_experience]
        fraction = len(covered) / len(ranges)
        if fraction == 1.0:
            details = "All age ranges covered"
        elif covered:
            details = f"Partial coverage ({len(covered)}/{len(ranges)} children)"
        else:
            details = "No age range covered"
        return self._component(max_score * fraction, max_score, details)

    def score_caregiver_type(
        self, caregiver: CaregiverProfile, family: FamilyProfile
    ) -> ScoreComponent:
        max_score = self.config.max_scores.caregiver_type
        wanted = family.caregiver_type
        if not wanted:
            return ScoreComponent(max_score, max_score, "Family did not specify a type")
        if wanted in caregiver.caregiver_types:
            return ScoreComponent(max_score, max_score, f"Works as {wanted}")
        return ScoreComponent(0.0, max_score, f"Does not work as {wanted}")

    def score_activities(
        self, caregiver: CaregiverProfile, family: FamilyProfile
    ) -> ScoreComponent:
        max_score = self.config.max_scores.activities
        expected = family.domestic_help_expected
        if not expected:
            return ScoreComponent(
                max_score, max_score, "Family did not specify activities"
            )

        accepted = [a for a in expected if a in caregiver.accepted_activities]
        rejected = [
            a
            for a in expected
            if a in caregiver.activities_not_accepted
            and a not in caregiver.accepted_activities
        ]
        net = max(0, len(accepted) - len(rejected))
        details = f"{len(accepted)}/{len(expected)} activities accepted"
        if rejected:
            details += f", {len(rejected)} refused ({', '.join(rejected)})"
        return self._component(max_score * net / len(expected), max_score, details)

    def score_contract_regime(
        self, caregiver: CaregiverProfile, family: FamilyProfile
    ) -> ScoreComponent:
        max_score = self.config.max_scores.contract_regime
        wanted = family.contract_regime
        if not wanted:
            return ScoreComponent(
                max_score, max_score, "Family did not specify a regime"
            )
        if wanted in caregiver.contract_regimes:
            return ScoreComponent(max_score, max_score, f"Exact match: {wanted}")

        compatible = any(
            family_regime == wanted and caregiver_regime in caregiver.contract_regimes
            for family_regime, caregiver_regime in self.config.compatible_contract_regimes
        )
        if compatible:
            return ScoreComponent(
                max_score / 2, max_score, f"Compatible regime for {wanted}"
            )
        return ScoreComponent(0.0, max_score, f"Does not accept {wanted}")

    def score_availability(
        self, caregiver: CaregiverProfile, family: FamilyProfile
    ) -> ScoreComponent:
        max_score = self.config.max_scores.availability
        if not caregiver.availability_slots:
            return ScoreComponent(
                max_score, max_score, "Caregiver did not provide availability"
            )
        if not family.availability_slots:
            return ScoreComponent(
                max_score, max_score, "Family did not provide availability"
            )

        ratio = overlap_ratio(family.availability_slots, caregiver.availability_slots)
        shared = intersection(family.availability_slots, caregiver.availability_slots)
        return self._component(
            max_score * ratio,
            max_score,
            f"{len(shared)}/{len(family.availability_slots)} slots covered ({ratio:.0%})",
        )

    def score_children_count(
        self,
        caregiver: CaregiverProfile,
        family: FamilyProfile,
        children: Sequence[ChildRecord],
    ) -> ScoreComponent:
        max_score = self.config.max_scores.children_count
        number = _number_of_children(family, children)
        limit = caregiver.max_children_care

        if limit is None:
            return ScoreComponent(
                max_score, max_score, "Caregiver did not specify a limit"
            )
        if number <= limit:
            return ScoreComponent(
                max_score, max_score, f"{number} children, limit {limit}"
            )
        return self._component(
            max_score * limit / number,
            max_score,
            f"Exceeds limit ({number} > {limit})",
        )

    # ------------------------------------------------------------------
    # Phase B: trust
    # ------------------------------------------------------------------

    def score_seal(self, caregiver: CaregiverProfile, today: date) -> ScoreComponent:
        max_score = self.config.max_scores.seal
        expired = (
            caregiver.document_expiration_date is not None
            and caregiver.document_expiration_date < today
        )
        document = caregiver.document_validated and not expired
        facial = caregiver.personal_data_validated
        background = caregiver.criminal_background_validated

        if document and facial and background:
            score, details = (
                self.config.seal_full_score,
                "Trusted (document + facial + background check)",
            )
        elif document and facial:
            score, details = self.config.seal_verified_score, "Verified (document + facial)"
        elif document:
            score, details = self.config.seal_identified_score, "Identified (document)"
        elif expired:
            score, details = 0.0, "Document expired"
        else:
            score, details = 0.0, "No validated document"
        return self._component(score, max_score, details)

    def score_reviews(self, caregiver: CaregiverProfile) -> ScoreComponent:
        """Score reviews, pulling thin review histories toward a neutral value.

        Zero reviews earns the neutral score. Otherwise the rating-implied
        score is weighted by confidence n / (n + k).
        """
        max_score = self.config.max_scores.reviews
        neutral = self.config.review_neutral_score
        count = caregiver.review_count or 0
        rating = caregiver.average_rating

        if count == 0 or rating is None:
            return ScoreComponent(neutral, max_score, "No reviews yet")

        implied = self.config.review_tier_score(rating)
        confidence = count / (count + self.config.review_confidence_k)
        score = neutral + (implied - neutral) * confidence
        return self._component(
            score, max_score, f"{rating:.1f} stars from {count} review(s)"
        )

    # ------------------------------------------------------------------
    # Phase B: bonus
    # ------------------------------------------------------------------

    def score_distance_bonus(
        self, caregiver: CaregiverProfile, family: FamilyProfile
    ) -> ScoreComponent:
        max_score = self.config.max_scores.distance_bonus
        distance = distance_km(caregiver.location, family.location)
        if distance is None:
            return ScoreComponent(0.0, max_score, "Coordinates not available")

        ceiling = max_travel_distance_to_km(caregiver.max_travel_distance, self.config)
        unlimited = ceiling is None
        if ceiling is None:
            ceiling = self.config.entire_city_reference_km

        ratio = distance / ceiling
        if ratio <= self.config.near_ratio:
            score, details = self.config.near_score, f"Very close ({distance:.1f} km)"
        elif ratio <= 1.0:
            score, details = self.config.within_score, f"Within radius ({distance:.1f} km)"
        elif unlimited:
            score, details = (
                self.config.beyond_reference_score,
                f"Far but covers entire city ({distance:.1f} km)",
            )
        else:
            score, details = 0.0, f"Outside radius ({distance:.1f} km)"
        return self._component(score, max_score, details)

    def score_budget_bonus(
        self, caregiver: CaregiverProfile, family: FamilyProfile
    ) -> ScoreComponent:
        max_score = self.config.max_scores.budget_bonus
        if family.hourly_rate_range is None or caregiver.hourly_rate_range is None:
            return ScoreComponent(0.0, max_score, "Rate bracket not provided")

        family_rate = self._rate_bounds(family.hourly_rate_range)
        caregiver_rate = self._rate_bounds(caregiver.hourly_rate_range)
        if family_rate is None or caregiver_rate is None:
            return ScoreComponent(0.0, max_score, "Unknown rate bracket")

        if caregiver_rate.min <= family_rate.max:
            if caregiver_rate.min <= family_rate.min:
                details = "Caregiver rate within budget"
            else:
                details = "Rates overlap"
            return self._component(self.config.budget_full_score, max_score, details)

        gap = caregiver_rate.min - family_rate.max
        if gap <= self.config.budget_negotiable_gap:
            return self._component(
                self.config.budget_negotiable_score,
                max_score,
                "Slightly above budget (negotiable)",
            )
        return ScoreComponent(0.0, max_score, "Rates far apart")

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def calculate_breakdown(
        self,
        caregiver: CaregiverProfile,
        family: FamilyProfile,
        children: Sequence[ChildRecord],
        today: date,
    ) -> MatchBreakdown:
        """Score every dimension and return the full breakdown."""
        return MatchBreakdown(
            age_range=self.score_age_range(caregiver, children, today),
            caregiver_type=self.score_caregiver_type(caregiver, family),
            activities=self.score_activities(caregiver, family),
            contract_regime=self.score_contract_regime(caregiver, family),
            availability=self.score_availability(caregiver, family),
            children_count=self.score_children_count(caregiver, family, children),
            seal=self.score_seal(caregiver, today),
            reviews=self.score_reviews(caregiver),
            distance_bonus=self.score_distance_bonus(caregiver, family),
            budget_bonus=self.score_budget_bonus(caregiver, family),
        )

    def evaluate(
        self,
        caregiver: CaregiverProfile,
        job: JobRequest,
        family: FamilyProfile,
        children: Sequence[ChildRecord],
        today: date | None = None,
    ) -> MatchResult:
        """Run full evaluation: requirements, constraints, and weighted scores.

        The breakdown is always computed, even for ineligible caregivers.
        """
        today = today or date.today()

        elimination_reasons = self.check_requirements(caregiver, job, children)
        hard_violations, warnings = self.check_constraints(
            caregiver, family, children, today
        )
        elimination_reasons.extend(hard_violations)

        breakdown = self.calculate_breakdown(caregiver, family, children, today)
        fit_score = min(
            self.config.fit_cap,
            sum(
                c.score
                for c in (
                    breakdown.age_range,
                    breakdown.caregiver_type,
                    breakdown.activities,
                    breakdown.contract_regime,
                    breakdown.availability,
                    breakdown.children_count,
                )
            ),
        )
        trust_score = min(
            self.config.trust_cap, breakdown.seal.score + breakdown.reviews.score
        )
        bonus_score = min(
            self.config.bonus_cap,
            breakdown.distance_bonus.score + breakdown.budget_bonus.score,
        )

        if elimination_reasons:
            logger.debug(
                "Caregiver %s eliminated for job %s: %s",
                caregiver.id,
                job.id,
                "; ".join(elimination_reasons),
            )

        return MatchResult(
            caregiver_id=caregiver.id,
            score=fit_score + trust_score + bonus_score,
            fit_score=fit_score,
            trust_score=trust_score,
            bonus_score=bonus_score,
            is_eligible=not elimination_reasons,
            elimination_reasons=elimination_reasons,
            warnings=warnings,
            breakdown=breakdown,
            distance_km=distance_km(caregiver.location, family.location),
        )

    def format_result(self, result: MatchResult) -> str:
        """Format a MatchResult for CLI output."""
        lines: list[str] = []
        status = "ELIGIBLE" if result.is_eligible else "ELIMINATED"
        lines.append(
            f"Caregiver {result.caregiver_id}: {status} "
            f"(score={result.score:.2f}, fit={result.fit_score:.2f}, "
            f"trust={result.trust_score:.2f}, bonus={result.bonus_score:.2f})"
        )
        if result.distance_km is not None:
            lines.append(f"Distance: {result.distance_km:.1f} km")
        for name, comp in result.breakdown.components().items():
            line = f"  {name}: {comp.score:.2f}/{comp.max_score:g}"
            if comp.details:
                line += f" - {comp.details}"
            lines.append(line)
        if result.elimination_reasons:
            lines.append(f"Eliminated: {'; '.join(result.elimination_reasons)}")
        if result.warnings:
            lines.append(f"Warnings: {'; '.join(result.warnings)}")
        return "\n".join(lines)

    def _rate_bounds(self, bracket: HourlyRateRange | None) -> RateBounds | None:
        if bracket is None:
            return None
        return self.config.rate_brackets.get(bracket.value)

    def _component(self, score: float, max_score: float, details: str) -> ScoreComponent:
        return ScoreComponent(
            score=min(max(score, 0.0), max_score), max_score=max_score, details=details
        )


def calculate_age(birth_date: date | None, today: date) -> float | None:
    """Return age in years; under one year it is fractional (months / 12)."""
    if birth_date is None:
        return None
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    if years <= 0:
        months = (today.year - birth_date.year) * 12 + today.month - birth_date.month
        if today.day < birth_date.day:
            months -= 1
        return max(0, months) / 12
    return float(years)


def age_range_for(age: float | None) -> AgeRange | None:
    """Map an age in years to its bracket."""
    if age is None:
        return None
    if age < 0.25:
        return AgeRange.NEWBORN
    if age < 1:
        return AgeRange.BABY
    if age < 3:
        return AgeRange.TODDLER
    if age < 6:
        return AgeRange.PRESCHOOL
    if age < 13:
        return AgeRange.SCHOOL_AGE
    return AgeRange.TEENAGER


def children_age_ranges(
    children: Sequence[ChildRecord], today: date
) -> list[AgeRange]:
    """Return the children's age brackets, youngest first.

    Unborn children count as NEWBORN until their expected birth date has
    passed, then age from that date. Children without any date are skipped.
    """
    aged: list[tuple[float, AgeRange]] = []
    for child in children:
        if child.unborn:
            born = child.expected_birth_date or child.birth_date
            if born is None or born > today:
                aged.append((-1.0, AgeRange.NEWBORN))
                continue
        else:
            born = child.birth_date
        age = calculate_age(born, today)
        age_range = age_range_for(age)
        if age is not None and age_range is not None:
            aged.append((age, age_range))

    aged.sort(key=lambda pair: pair[0])
    return [age_range for _, age_range in aged]


def _number_of_children(
    family: FamilyProfile, children: Sequence[ChildRecord]
) -> int:
    if family.number_of_children is not None:
        return family.number_of_children
    return len(children)

