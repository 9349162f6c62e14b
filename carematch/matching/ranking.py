"""Rank a caregiver pool against a job."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from carematch.matching.models import (
    CaregiverProfile,
    ChildRecord,
    FamilyProfile,
    JobRequest,
    MatchResult,
)
from carematch.matching.service import MatchScoringService
from carematch.utils.logging import get_logger

logger = get_logger("matching.ranking")


def rank_key(result: MatchResult) -> tuple[float, int]:
    """Sort key: highest score first, then lowest caregiver id."""
    return (-result.score, result.caregiver_id)


def find_best_matches(
    caregivers: Iterable[CaregiverProfile],
    job: JobRequest,
    family: FamilyProfile,
    children: Sequence[ChildRecord],
    *,
    limit: int | None = None,
    min_score: float | None = None,
    eligible_only: bool = False,
    max_workers: int | None = None,
    service: MatchScoringService | None = None,
    today: date | None = None,
) -> list[MatchResult]:
    """Evaluate every caregiver against the job and return them ranked.

    Ineligible caregivers stay in the list (flagged with their elimination
    reasons) unless `eligible_only` is set. With `max_workers > 1` the pool
    is scored on a thread pool; the final order is the same either way.

    Args:
        caregivers: Candidate pool.
        job: The job being filled.
        family: The family that posted the job.
        children: The children the job covers.
        limit: Keep at most this many results after sorting.
        min_score: Drop results scoring below this value.
        eligible_only: Drop caregivers that failed a hard constraint.
        max_workers: Thread pool size (None or 1 scores sequentially).
        service: Scoring service to use (defaults to one with the global config).
        today: Reference date for age and document checks (defaults to today).

    Returns:
        Match results sorted by score descending, ties by caregiver id.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative (got {limit})")

    service = service or MatchScoringService()
    today = today or date.today()
    pool = list(caregivers)
    children = list(children)

    def _evaluate(caregiver: CaregiverProfile) -> MatchResult:
        return service.evaluate(caregiver, job, family, children, today=today)

    if max_workers is not None and max_workers > 1 and len(pool) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(_evaluate, pool))
    else:
        results = [_evaluate(caregiver) for caregiver in pool]

    eligible_count = sum(1 for r in results if r.is_eligible)
    logger.info(
        "Scored %d caregivers for job %s (%d eligible)",
        len(pool),
        job.id,
        eligible_count,
    )

    if eligible_only:
        results = [r for r in results if r.is_eligible]
    if min_score is not None:
        results = [r for r in results if r.score >= min_score]

    results.sort(key=rank_key)
    if limit is not None:
        results = results[:limit]
    return results
