"""Caregiver matching and ranking.

This module evaluates how well each caregiver in a pool fits a family's
job: hard requirements decide eligibility, and ten weighted dimensions
(structural fit, trust, bonus) produce a 0-110 score with a breakdown.

Public API:
    - MatchScoringService: Eligibility checks and weighted scoring
    - find_best_matches: Rank a caregiver pool for a job
    - ScenarioLoader: Load a job, family, children and caregivers from a file
    - MatchResult: Evaluation output model
    - MatchingConfig: Configuration settings
"""

from carematch.matching.config import (
    MatchingConfig,
    MaxScores,
    get_matching_config,
    reset_matching_config,
)
from carematch.matching.converters import (
    RecordConversionError,
    select_job_children,
    to_caregiver_profile,
    to_child_record,
    to_family_profile,
    to_job_request,
)
from carematch.matching.loader import Scenario, ScenarioLoader
from carematch.matching.models import (
    CaregiverProfile,
    ChildRecord,
    Coordinates,
    FamilyProfile,
    JobRequest,
    MatchBreakdown,
    MatchResult,
    ReviewStats,
    ScoreComponent,
)
from carematch.matching.ranking import find_best_matches
from carematch.matching.service import MatchScoringService

__all__ = [
    "MatchScoringService",
    "find_best_matches",
    "ScenarioLoader",
    "Scenario",
    "CaregiverProfile",
    "FamilyProfile",
    "JobRequest",
    "ChildRecord",
    "Coordinates",
    "ReviewStats",
    "ScoreComponent",
    "MatchBreakdown",
    "MatchResult",
    "MatchingConfig",
    "MaxScores",
    "get_matching_config",
    "reset_matching_config",
    "RecordConversionError",
    "to_caregiver_profile",
    "to_family_profile",
    "to_job_request",
    "to_child_record",
    "select_job_children",
]
