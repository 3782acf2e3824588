"""Short human-readable reasons for a candidate's score.

Usage example:
    from supplier_matching.domain.aggregation import score_candidate
    from supplier_matching.domain.explanations import explain
    from supplier_matching.domain.models import Candidate, MatchRequest

    candidate = Candidate(candidate_id="dj-1", average_rating=4.8, review_count=60)
    _, breakdown = score_candidate(MatchRequest(service_category="dj"), candidate)
    assert "Excellent reputation (4.8/5)" in explain(breakdown, candidate)
"""

from __future__ import annotations

from .aggregation import ScoreBreakdown
from .models import Candidate
from .scoring import LOCATION_MAX

CULTURAL_HIGHLIGHT = 20
BUDGET_HIGHLIGHT = 15
REPUTATION_HIGHLIGHT = 15
EXPERIENCE_HIGHLIGHT = 7

REASON_SEPARATOR = " • "
DEFAULT_EXPLANATION = "Qualified supplier for your request"


def _format_number(value: float | None) -> str:
    if value is None:
        return "0"
    return f"{value:g}"


def explain(
    breakdown: ScoreBreakdown,
    candidate: Candidate,
    is_unavailable: bool = False,
) -> str:
    """Render the notable parts of a breakdown as one line of reasons."""
    reasons: list[str] = []
    if is_unavailable:
        reasons.append("Possibly unavailable on your date")
    if breakdown.cultural > CULTURAL_HIGHLIGHT:
        reasons.append(
            f"Excellent cultural match ({breakdown.cultural}/{breakdown.cultural_ceiling})"
        )
    if breakdown.budget > BUDGET_HIGHLIGHT:
        reasons.append("Budget well aligned")
    if breakdown.reputation > REPUTATION_HIGHLIGHT:
        reasons.append(f"Excellent reputation ({_format_number(candidate.average_rating)}/5)")
    if breakdown.experience > EXPERIENCE_HIGHLIGHT:
        reasons.append(f"{_format_number(candidate.years_experience)} years of experience")
    if breakdown.location == LOCATION_MAX:
        reasons.append("Works in your area")
    return REASON_SEPARATOR.join(reasons) or DEFAULT_EXPLANATION
