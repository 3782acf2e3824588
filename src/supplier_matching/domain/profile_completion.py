"""Profile completeness score used to keep half-finished profiles out of results."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Candidate
from .scoring import round_half_up

AVATAR_POINTS = 15
NAME_POINTS = 10
DESCRIPTION_POINTS = 15
DESCRIPTION_MIN_LENGTH = 20
BUDGET_POINTS = 10
CITY_POINTS = 5
CULTURES_POINTS = 15
COVERAGE_POINTS = 10
PORTFOLIO_POINTS = 15
PORTFOLIO_MIN_ITEMS = 3
SOCIAL_POINTS = 5

MAX_COMPLETION_POINTS = (
    AVATAR_POINTS
    + NAME_POINTS
    + DESCRIPTION_POINTS
    + BUDGET_POINTS
    + CITY_POINTS
    + CULTURES_POINTS
    + COVERAGE_POINTS
    + PORTFOLIO_POINTS
    + SOCIAL_POINTS
)

DEFAULT_MIN_PROFILE_COMPLETION = 70


def completion_points(candidate: Candidate) -> int:
    """Sum the points earned by each filled-in profile item."""
    items = (
        (bool(candidate.avatar_url), AVATAR_POINTS),
        (bool(candidate.display_name.strip()), NAME_POINTS),
        (len(candidate.short_description) > DESCRIPTION_MIN_LENGTH, DESCRIPTION_POINTS),
        (bool(candidate.budget_min or candidate.budget_max), BUDGET_POINTS),
        (bool(candidate.primary_city), CITY_POINTS),
        (bool(candidate.cultures), CULTURES_POINTS),
        (bool(candidate.coverage_regions), COVERAGE_POINTS),
        (candidate.portfolio_count >= PORTFOLIO_MIN_ITEMS, PORTFOLIO_POINTS),
        (any(link.strip() for link in candidate.social_links), SOCIAL_POINTS),
    )
    return sum(points for completed, points in items if completed)


def profile_completion(candidate: Candidate) -> int:
    """Return completeness as a 0-100 percentage of the available points."""
    return round_half_up(completion_points(candidate) / MAX_COMPLETION_POINTS * 100)


def filter_complete_profiles(
    candidates: Iterable[Candidate],
    minimum: int = DEFAULT_MIN_PROFILE_COMPLETION,
) -> list[Candidate]:
    """Keep candidates at or above ``minimum`` completeness; 0 keeps everyone."""
    if minimum <= 0:
        return list(candidates)
    return [candidate for candidate in candidates if profile_completion(candidate) >= minimum]
