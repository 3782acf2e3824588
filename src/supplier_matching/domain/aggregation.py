"""Aggregator: sum criterion scores, apply fairness, clamp, and explain.

Usage example:
    from supplier_matching.domain.aggregation import score_candidate
    from supplier_matching.domain.models import Candidate, MatchRequest

    request = MatchRequest(service_category="dj", budget_max=1200)
    final_score, breakdown = score_candidate(request, Candidate(candidate_id="dj-1"))
    assert 0 <= final_score <= 100
    assert breakdown.final_score == final_score
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from .fairness import FairnessTuning, ctr_bonus, fairness_multiplier
from .models import Candidate, MatchRequest
from .scoring import (
    cultural_ceiling,
    round_half_up,
    score_budget,
    score_capacity,
    score_cultural,
    score_experience,
    score_location,
    score_reputation,
    score_specialty,
    score_tags,
)

SCORE_MIN = 0
SCORE_MAX = 100
DEFAULT_UNAVAILABLE_PENALTY = 20


@dataclass(frozen=True)
class ScoreBreakdown:
    """Auditable per-criterion breakdown for one (request, candidate) pair."""

    cultural: int
    cultural_ceiling: int
    budget: int
    reputation: int
    experience: int
    location: int
    tags: int
    specialty: int
    capacity: int | None
    ctr_bonus: int
    availability_penalty: int
    total_algo: int
    score_before_fairness: int
    fairness_multiplier: float
    final_score: int

    def as_dict(self) -> dict[str, int | float | None]:
        return asdict(self)


def is_unavailable(request: MatchRequest, candidate: Candidate) -> bool:
    """Return True when the candidate is booked on the requested event date."""
    if not request.event_date:
        return False
    return request.event_date.strip() in {day.strip() for day in candidate.unavailable_dates}


def _clamp(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    return max(low, min(high, value))


def score_candidate(
    request: MatchRequest,
    candidate: Candidate,
    tuning: FairnessTuning | None = None,
    *,
    unavailable_penalty: int = DEFAULT_UNAVAILABLE_PENALTY,
) -> tuple[int, ScoreBreakdown]:
    """Score one candidate against a request.

    Args:
        request: Structured request criteria.
        candidate: Candidate snapshot (including optional fairness data).
        tuning: Fairness tunables; defaults to the standard tuning.
        unavailable_penalty: Points removed when the candidate is booked on the event date.

    Returns:
        ``(final_score, breakdown)`` with ``final_score`` in ``[0, 100]``.
    """
    tuning = tuning or FairnessTuning()

    cultural = score_cultural(request.cultures, request.cultural_importance, candidate.cultures)
    budget = score_budget(
        request.budget_min,
        request.budget_max,
        candidate.budget_min,
        candidate.budget_max,
        request.budget_flexibility,
    )
    reputation = score_reputation(candidate.average_rating, candidate.review_count)
    experience = score_experience(candidate.years_experience)
    location = score_location(
        request.region_code,
        request.city,
        candidate.coverage_regions,
        candidate.primary_city,
    )
    tags = score_tags(request.tags, candidate.tags)
    specialty = score_specialty(request.specialty_tags, candidate.specialty_tags)
    capacity = score_capacity(request.guest_count, candidate.capacity_min, candidate.capacity_max)
    click_bonus = ctr_bonus(candidate.fairness_data, tuning)
    availability = -abs(unavailable_penalty) if is_unavailable(request, candidate) else 0

    total_algo = (
        cultural
        + budget
        + reputation
        + experience
        + location
        + tags
        + specialty
        + (capacity or 0)
        + click_bonus
        + availability
    )
    before_fairness = int(_clamp(total_algo))
    multiplier = fairness_multiplier(candidate.fairness_data, tuning)
    final_score = int(_clamp(round_half_up(_clamp(before_fairness * multiplier))))

    breakdown = ScoreBreakdown(
        cultural=cultural,
        cultural_ceiling=cultural_ceiling(request.cultural_importance),
        budget=budget,
        reputation=reputation,
        experience=experience,
        location=location,
        tags=tags,
        specialty=specialty,
        capacity=capacity,
        ctr_bonus=click_bonus,
        availability_penalty=availability,
        total_algo=total_algo,
        score_before_fairness=before_fairness,
        fairness_multiplier=multiplier,
        final_score=final_score,
    )
    return final_score, breakdown
